"""Output formatter registry.

WHY: The CLI and HTTP API need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["tsv_table"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API paths)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from udpipe_converter.formatters.delimited import CSVTableFormatter, TSVTableFormatter
from udpipe_converter.formatters.json_records import JSONRecordsFormatter
from udpipe_converter.formatters.sentences import SentencesFormatter

if TYPE_CHECKING:
    from udpipe_converter.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "tsv_table": TSVTableFormatter,
    "csv_table": CSVTableFormatter,
    "json_records": JSONRecordsFormatter,
    "sentences": SentencesFormatter,
}
