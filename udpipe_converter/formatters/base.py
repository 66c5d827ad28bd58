"""Formatter interface for the tidy token table.

WHY: The token table is written in several shapes (delimited tables,
JSON, a sentence listing) from the same AnnotatedToken rows. The CLI
saves them as files and the HTTP API returns them as response bodies,
so both need to know a formatter's file suffix and media type without
rendering anything.

HOW: A formatter declares ``suffix`` and ``media_type`` as class
attributes and implements ``name`` and ``format(tokens)``.
FormatterOutput carries the rendered text with the same two values.

RULES:
- One formatter renders exactly one output for the whole token list
- ``suffix`` starts with a hyphen and is appended to the output stem
  (corpus + ``-tokens.tsv`` → corpus-tokens.tsv)
- Rows are rendered in the order given; formatters never reorder them
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Sequence

from udpipe_converter.core.ir import AnnotatedToken


@dataclass
class FormatterOutput:
    """Rendered token table plus the suffix and media type it is saved or served with."""

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Renders AnnotatedToken rows into a single text output.

    Concrete formatters are registered by key in formatters/__init__.py.
    """

    suffix: ClassVar[str]
    media_type: ClassVar[str]

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'TSV table'."""

    @abstractmethod
    def format(self, tokens: Sequence[AnnotatedToken]) -> FormatterOutput:
        """Render the rows, in document/paragraph/sentence/token order."""

    def _output(self, content: str) -> FormatterOutput:
        return FormatterOutput(suffix=self.suffix, content=content, media_type=self.media_type)
