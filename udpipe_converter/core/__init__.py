"""Core reshaping modules.

WHY: The core package is the stable heart of the converter: the row
dataclasses and the CONLL-U reshaping fold. Formatters, the CLI and
the HTTP API all consume what it produces.

HOW: ir.py defines the data structures, reshaper.py builds them from
a CONLL-U text blob.

RULES:
- Row dataclasses are the contract; change with care
- Reshaping is format-agnostic: no formatter-specific logic here
"""

from udpipe_converter.core.ir import COLUMNS, TOKEN_FIELDS, AnnotatedToken, DocumentRows, ParseContext
from udpipe_converter.core.reshaper import (
    LineKind,
    MalformedRowError,
    advance,
    classify_line,
    iter_tokens,
    reshape_conllu,
    reshape_documents,
)

__all__ = [
    "COLUMNS",
    "TOKEN_FIELDS",
    "AnnotatedToken",
    "DocumentRows",
    "LineKind",
    "MalformedRowError",
    "ParseContext",
    "advance",
    "classify_line",
    "iter_tokens",
    "reshape_conllu",
    "reshape_documents",
]
