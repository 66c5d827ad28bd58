"""JSON records formatter, validated against the packaged schema.

WHY: Web clients and document stores want the token table as a JSON
array of objects rather than a delimited file. A schema keeps the
shape of that array explicit and checked.

HOW: Each AnnotatedToken becomes a column-ordered object. The array is
validated with jsonschema against annotated_tokens.schema.json before
it is serialized.

RULES:
- One object per token, keys in COLUMNS order
- None context values are written as null
- Output suffix: "-tokens.json"
- Validate output against the schema before returning; raise on failure
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Sequence

import jsonschema

from udpipe_converter.core.ir import AnnotatedToken
from udpipe_converter.formatters.base import BaseFormatter, FormatterOutput

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "annotated_tokens.schema.json"

_CACHED_SCHEMA: Optional[dict[str, Any]] = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


class JSONRecordsFormatter(BaseFormatter):
    """Formatter that produces a JSON array of token records.

    RULES:
    - Schema validation is mandatory; raises on invalid output
    """

    suffix = "-tokens.json"
    media_type = "application/json"

    @property
    def name(self) -> str:
        return "JSON records"

    def format(self, tokens: Sequence[AnnotatedToken]) -> FormatterOutput:
        """Render the rows as a JSON array.

        Raises:
            jsonschema.ValidationError: If the generated records do not
                conform to the annotated token schema.
        """
        records = [token.as_record() for token in tokens]
        jsonschema.validate(instance=records, schema=_get_schema())

        return self._output(json.dumps(records, indent=2, ensure_ascii=False))
