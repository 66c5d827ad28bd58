"""HTTP client for the UDPipe REST service.

WHY: Not every machine has a local model file. The UDPipe REST
service (LINDAT) annotates text with hosted models and returns the
same CONLL-U output, so it can stand in for the local engine.

HOW: A synchronous httpx.Client wrapped in a context manager. Each
document is POSTed to {base_url}/process; the CONLL-U in the "result"
field is labelled with the document id and appended to the batch blob.

RULES:
- Use as: with UDPipeServiceClient() as client: ...
- Request validation is the same as the local engine's
- The service does not know our doc_ids: the "# newdoc" line of each
  result is replaced (or inserted) with "# newdoc id = <doc_id>"
- HTTP or service failures for one document go to errors[i]
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

import httpx

from udpipe_converter.config import (
    UDPIPE_SERVICE_MODEL,
    UDPIPE_SERVICE_TIMEOUT_S,
    UDPIPE_SERVICE_URL,
)
from udpipe_converter.engine.models import AnnotationResult
from udpipe_converter.engine.request import validate_request

logger = logging.getLogger(__name__)

_NEWDOC_LINE_RE = re.compile(r"^# newdoc(?:[ \t=].*)?$")


class UDPipeServiceError(Exception):
    """Raised when the UDPipe service returns an error response.

    RULES:
    - Always include status_code and message
    - message is the response body text or a summary
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__("UDPipe service error {}: {}".format(status_code, message))


def label_document(conllu: str, doc_id: str) -> str:
    """Give one document's CONLL-U output a "# newdoc id = ..." marker.

    RULES:
    - The first "# newdoc" line (with or without id) before any token
      line is replaced; comments above it (# generator, ...) are kept
    - Otherwise the marker is inserted as the first line
    - The result always ends with a newline
    """
    header = "# newdoc id = {}".format(doc_id)
    lines = conllu.split("\n")
    for index, line in enumerate(lines):
        if _NEWDOC_LINE_RE.match(line):
            lines[index] = header
            break
        if line and not line.startswith("#"):
            lines.insert(0, header)
            break
    else:
        lines.insert(0, header)
    labelled = "\n".join(lines)
    if not labelled.endswith("\n"):
        labelled += "\n"
    return labelled


class UDPipeServiceClient:
    """Client for the UDPipe REST /process endpoint.

    RULES:
    - base_url defaults to UDPIPE_SERVICE_URL from config
    - model defaults to UDPIPE_SERVICE_MODEL from config
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = (base_url or UDPIPE_SERVICE_URL).rstrip("/")
        self._model = model or UDPIPE_SERVICE_MODEL
        self._timeout_s = timeout_s if timeout_s is not None else UDPIPE_SERVICE_TIMEOUT_S
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def model(self) -> str:
        return self._model

    def __enter__(self) -> UDPipeServiceClient:
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout_s, connect=30.0),
            transport=self._transport,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            self._client.close()
            self._client = None

    def _ensure_client(self) -> httpx.Client:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "UDPipeServiceClient must be used as a context manager: "
                "with UDPipeServiceClient() as client: ..."
            )
        return self._client

    def process(self, text: str) -> str:
        """Annotate a single text and return the service's CONLL-U output.

        Raises:
            UDPipeServiceError: On non-200 responses, a body that is not a
                JSON object, or a missing result.
            httpx.HTTPError: On transport failures.
        """
        client = self._ensure_client()
        resp = client.post(
            "/process",
            data={
                "model": self._model,
                "tokenizer": "",
                "tagger": "",
                "parser": "",
                "data": text,
            },
        )
        if resp.status_code != 200:
            raise UDPipeServiceError(resp.status_code, resp.text)

        try:
            payload = resp.json()
        except ValueError:
            raise UDPipeServiceError(resp.status_code, "Response is not JSON")
        if not isinstance(payload, dict) or not isinstance(payload.get("result"), str):
            raise UDPipeServiceError(resp.status_code, "Response has no 'result' field")
        return payload["result"]

    def annotate(
        self,
        texts: Sequence[str],
        doc_ids: Optional[Sequence[str]] = None,
    ) -> AnnotationResult:
        """Annotate a batch of documents through the REST service.

        WHY: Same contract as the local annotate(), so the CLI and
        HTTP API can switch backends without further changes.

        HOW: Validates the request, posts one request per document and
        concatenates the labelled outputs in request order.

        RULES:
        - Failed documents contribute nothing to conllu
        - Their error message is stored at the same index in errors

        Raises:
            TypeError: If texts or doc_ids is not a sequence of str.
            ArityMismatchError: If texts and doc_ids differ in length.
        """
        text_list, doc_id_list = validate_request(texts, doc_ids)
        self._ensure_client()
        logger.info(
            "Annotating %d document(s) with service model %s",
            len(text_list), self._model,
        )

        parts: List[str] = []
        errors: List[Optional[str]] = []
        for text, doc_id in zip(text_list, doc_id_list):
            try:
                result = self.process(text)
            except (UDPipeServiceError, httpx.HTTPError) as exc:
                logger.warning("Annotation failed for document %s: %s", doc_id, exc)
                errors.append(str(exc))
                continue
            parts.append(label_document(result, doc_id))
            errors.append(None)

        return AnnotationResult(
            texts=text_list,
            doc_ids=doc_id_list,
            conllu="".join(parts),
            errors=errors,
        )
