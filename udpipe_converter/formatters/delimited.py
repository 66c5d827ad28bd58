"""Delimited table formatters: TSV and CSV, one row per token.

WHY: The tidy token table is mostly consumed by spreadsheet tools,
R and pandas. TSV and CSV are the lowest-friction formats for all of
them.

HOW: Both write a header with COLUMNS followed by one row per
AnnotatedToken. CSV goes through the csv module, which quotes only the
fields that contain a comma, a quote character, or a line break. TSV
has no quoting convention, so cells are joined with tabs as they are.

RULES:
- Header row is always written, even for zero tokens
- None (doc_id before any # newdoc, missing sentence markers) → empty cell
- paragraph_id is written as its decimal string
- TSV cells are never quoted or escaped: the 10 token columns equal the
  CONLL-U fields exactly; a tab inside sentence_text becomes a space
- Line terminator is "\\n"
"""

from __future__ import annotations

import csv
import io
from typing import List, Sequence

from udpipe_converter.core.ir import COLUMNS, AnnotatedToken
from udpipe_converter.formatters.base import BaseFormatter, FormatterOutput


def _cell(value: object) -> str:
    return "" if value is None else str(value)


def _cells(token: AnnotatedToken) -> List[str]:
    return [_cell(getattr(token, column)) for column in COLUMNS]


class TSVTableFormatter(BaseFormatter):
    """Tab-separated token table (``-tokens.tsv``)."""

    suffix = "-tokens.tsv"
    media_type = "text/tab-separated-values"

    @property
    def name(self) -> str:
        return "TSV table"

    def format(self, tokens: Sequence[AnnotatedToken]) -> FormatterOutput:
        lines = ["\t".join(COLUMNS)]
        for token in tokens:
            # Token columns cannot hold a tab; only the sentence text can.
            lines.append("\t".join(cell.replace("\t", " ") for cell in _cells(token)))
        return self._output("\n".join(lines) + "\n")


class CSVTableFormatter(BaseFormatter):
    """Comma-separated token table (``-tokens.csv``)."""

    suffix = "-tokens.csv"
    media_type = "text/csv"

    @property
    def name(self) -> str:
        return "CSV table"

    def format(self, tokens: Sequence[AnnotatedToken]) -> FormatterOutput:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(COLUMNS)
        for token in tokens:
            writer.writerow(_cells(token))
        return self._output(buffer.getvalue())
