"""FastAPI application exposing reshaping and annotation over HTTP.

WHY: External clients (notebooks, n8n, other services) need an HTTP
API to turn CONLL-U or raw text into token rows without installing the
package or a model locally. FastAPI provides request validation and
automatic OpenAPI documentation.

HOW: A single FastAPI app with endpoints grouped by tags. /reshape runs
the core reshaper on a posted CONLL-U blob. /annotations runs the
configured engine (local model or REST service) and reshapes its
output. /formats and /health are informational.

RULES:
- Endpoints are plain (sync) functions: engine calls are blocking and
  FastAPI runs them in its threadpool
- Error responses use the ErrorResponse schema
- Malformed CONLL-U from the client → 422; from the engine → 502
- Request-shape errors (arity) → 400; no engine configured → 503
- The local model is loaded lazily, once per process
"""

from __future__ import annotations

import functools
import logging
from typing import Callable, List, Optional, Sequence

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from udpipe_converter import __version__
from udpipe_converter import config
from udpipe_converter.core.ir import AnnotatedToken
from udpipe_converter.core.reshaper import MalformedRowError, reshape_conllu
from udpipe_converter.engine.local import annotate, load_model
from udpipe_converter.engine.models import AnnotationResult, ModelHandle
from udpipe_converter.engine.request import ArityMismatchError
from udpipe_converter.engine.service import UDPipeServiceClient
from udpipe_converter.formatters import FORMATTERS
from udpipe_converter.server.models import (
    AnnotateRequest,
    AnnotationResponse,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    ReshapeRequest,
    ReshapeResponse,
    TokenRow,
)

logger = logging.getLogger(__name__)

Annotator = Callable[[Sequence[str], Optional[Sequence[str]]], AnnotationResult]

app = FastAPI(
    title="UDPipe Converter API",
    description=(
        "REST API for turning UDPipe CONLL-U annotation into tidy token rows. "
        "Post CONLL-U to reshape it, or post raw texts to annotate and reshape "
        "them in one call. Rows can also be rendered as TSV, CSV, JSON or a "
        "sentence listing."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Engine selection
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=1)
def _load_handle(path: str) -> ModelHandle:
    return load_model(path)


def _annotate_with_service(
    texts: Sequence[str],
    doc_ids: Optional[Sequence[str]],
) -> AnnotationResult:
    with UDPipeServiceClient() as client:
        return client.annotate(texts, doc_ids)


def get_annotator() -> Optional[Annotator]:
    """Return the configured annotation function, or None.

    RULES:
    - UDPIPE_API_ENGINE=service → UDPipe REST service
    - otherwise the local model at UDPIPE_MODEL_PATH, loaded once
    - None when no model path is configured
    - Load failures (missing file, bad model) propagate to the caller
    """
    if config.UDPIPE_API_ENGINE == "service":
        return _annotate_with_service
    try:
        path = config.load_model_path()
    except ValueError:
        return None
    return functools.partial(annotate, _load_handle(path))


def _engine_name() -> Optional[str]:
    if config.UDPIPE_API_ENGINE == "service":
        return "service"
    try:
        config.load_model_path()
    except ValueError:
        return None
    return "local"


def _to_rows(tokens: List[AnnotatedToken]) -> List[TokenRow]:
    return [TokenRow(**token.as_record()) for token in tokens]


def _reshape_or_422(conllu: str) -> List[AnnotatedToken]:
    try:
        return reshape_conllu(conllu)
    except MalformedRowError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


# ---------------------------------------------------------------------------
# Reshaping
# ---------------------------------------------------------------------------


@app.post(
    "/reshape",
    tags=["reshape"],
    summary="Reshape CONLL-U into token rows",
    description=(
        "Parse a CONLL-U blob into one row per token line, with document, "
        "paragraph and sentence context attached from the comment markers."
    ),
    response_model=ReshapeResponse,
    responses={422: {"model": ErrorResponse, "description": "Malformed CONLL-U data line"}},
)
def reshape(request: ReshapeRequest) -> ReshapeResponse:
    tokens = _reshape_or_422(request.conllu)
    return ReshapeResponse(row_count=len(tokens), rows=_to_rows(tokens))


@app.post(
    "/reshape/{format_key}",
    tags=["reshape"],
    summary="Reshape CONLL-U and render it in an output format",
    description="Reshape a CONLL-U blob and return the file produced by one formatter.",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown format"},
        422: {"model": ErrorResponse, "description": "Malformed CONLL-U data line"},
    },
)
def reshape_as(format_key: str, request: ReshapeRequest) -> Response:
    if format_key not in FORMATTERS:
        raise HTTPException(
            status_code=404,
            detail="Unknown format '{}'. Available formats: {}".format(
                format_key, ", ".join(sorted(FORMATTERS.keys()))
            ),
        )
    tokens = _reshape_or_422(request.conllu)
    output = FORMATTERS[format_key]().format(tokens)
    return Response(content=output.content, media_type=output.media_type)


# ---------------------------------------------------------------------------
# Annotation
# ---------------------------------------------------------------------------


@app.post(
    "/annotations",
    tags=["annotations"],
    summary="Annotate texts and reshape the result",
    description=(
        "Run the configured UDPipe engine over a batch of texts and return "
        "the token rows. Documents that fail are reported in 'errors' and "
        "do not abort the batch."
    ),
    response_model=AnnotationResponse,
    responses={
        400: {"model": ErrorResponse, "description": "texts and doc_ids differ in length"},
        502: {"model": ErrorResponse, "description": "Engine returned malformed CONLL-U"},
        503: {"model": ErrorResponse, "description": "No annotation engine available"},
    },
)
def create_annotation(request: AnnotateRequest) -> AnnotationResponse:
    try:
        annotator = get_annotator()
    except (OSError, ValueError) as exc:
        logger.exception("Annotation engine could not be loaded")
        raise HTTPException(status_code=503, detail="Annotation engine unavailable: {}".format(exc))
    if annotator is None:
        raise HTTPException(
            status_code=503,
            detail="No annotation engine configured. Set UDPIPE_MODEL_PATH or UDPIPE_API_ENGINE=service.",
        )

    try:
        result = annotator(request.texts, request.doc_ids)
    except ArityMismatchError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    try:
        tokens = reshape_conllu(result.conllu)
    except MalformedRowError as exc:
        logger.error("Engine output could not be reshaped: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))

    return AnnotationResponse(
        doc_ids=result.doc_ids,
        errors=result.errors,
        row_count=len(tokens),
        rows=_to_rows(tokens),
    )


# ---------------------------------------------------------------------------
# Informational
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    tags=["info"],
    summary="List available output formats",
    response_model=List[FormatInfo],
)
def list_formats() -> List[FormatInfo]:
    return [
        FormatInfo(key=key, name=formatter_cls().name, suffix=formatter_cls.suffix)
        for key, formatter_cls in FORMATTERS.items()
    ]


@app.get(
    "/health",
    tags=["info"],
    summary="Health check",
    response_model=HealthResponse,
)
def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, engine=_engine_name())


def run_api() -> None:
    """Serve the API with uvicorn (host/port from config)."""
    import uvicorn

    logging.basicConfig(level=config.UDPIPE_LOG_LEVEL, format=config.LOG_FORMAT)
    uvicorn.run(app, host=config.UDPIPE_API_HOST, port=config.UDPIPE_API_PORT)
