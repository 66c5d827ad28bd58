"""Row and parse-state dataclasses for reshaped CONLL-U annotation.

WHY: CONLL-U only records document, paragraph and sentence membership
as comment markers that precede the token lines. Downstream analysis
(TSV/CSV/JSON tables, sentence listings) needs every token to carry
that context explicitly. These dataclasses are the single, well-typed
form that the reshaper produces and all formatters consume.

HOW: Three dataclasses:
  AnnotatedToken: one output row, context fields + the 10 token columns
  ParseContext: the "currently active" context threaded through the
                fold over lines; immutable, replaced on every marker
  DocumentRows: rows (or an error) for one document of an isolating parse

RULES:
- AnnotatedToken is the contract between reshaping and formatting
- All token columns are kept as raw strings ("_" stays "_")
- paragraph_id is a 1-based int; doc_id/sentence_id/sentence_text are
  None only when no marker of their kind has been seen yet
- ParseContext is frozen: a transition returns a new context
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

TOKEN_FIELDS: tuple[str, ...] = (
    "id", "form", "lemma", "upostag", "xpostag",
    "feats", "head", "deprel", "deps", "misc",
)
"""The 10 CONLL-U columns, in file order."""

CONTEXT_FIELDS: tuple[str, ...] = (
    "doc_id", "paragraph_id", "sentence_id", "sentence_text",
)

COLUMNS: tuple[str, ...] = CONTEXT_FIELDS + TOKEN_FIELDS
"""Column order of the tidy output table."""


@dataclass(frozen=True)
class AnnotatedToken:
    """One token line of CONLL-U output with its reconstructed context.

    WHY: Analysts want a flat table (one row per token) rather than a
    nested document → paragraph → sentence → token structure.

    HOW: Built by the reshaper from a data line plus the active
    ParseContext at the moment the line is read.

    RULES:
    - id: "1", "2-3" (multiword range) or "4.1" (empty node), as written
    - head, deps, misc etc. are never converted; "_" means unspecified
    - token_line() reproduces the original tab-separated data line
    """

    doc_id: Optional[str]
    paragraph_id: int
    sentence_id: Optional[str]
    sentence_text: Optional[str]
    id: str
    form: str
    lemma: str
    upostag: str
    xpostag: str
    feats: str
    head: str
    deprel: str
    deps: str
    misc: str

    def token_fields(self) -> list[str]:
        """The 10 CONLL-U columns of this row, in file order."""
        return [getattr(self, name) for name in TOKEN_FIELDS]

    def token_line(self) -> str:
        """Rejoin the token columns into the original data line."""
        return "\t".join(self.token_fields())

    def as_record(self) -> dict:
        """Column-ordered dict of all 14 fields."""
        return {name: getattr(self, name) for name in COLUMNS}


@dataclass(frozen=True)
class ParseContext:
    """The context active at a given line of a CONLL-U blob.

    WHY: Document, paragraph and sentence membership is implicit: a
    value holds from its marker line until the next marker of the same
    kind. Keeping that state in one immutable object makes the
    last-observed-value behaviour testable line by line.

    HOW: The reshaper folds advance(context, line) over all lines.
    paragraph_counts remembers the last paragraph number per doc_id so
    a doc_id that shows up again resumes its own numbering.

    RULES:
    - paragraph_id == 0 means "no paragraph opened yet in this document"
    - doc_id, sentence_id and sentence_text survive blank lines,
      unrelated comments and document boundaries
    """

    doc_id: Optional[str] = None
    paragraph_id: int = 0
    sentence_id: Optional[str] = None
    sentence_text: Optional[str] = None
    paragraph_counts: Mapping[Optional[str], int] = field(default_factory=dict)

    def with_document(self, doc_id: str) -> ParseContext:
        counts = {**self.paragraph_counts, self.doc_id: self.paragraph_id}
        return replace(
            self,
            doc_id=doc_id,
            paragraph_id=counts.get(doc_id, 0),
            paragraph_counts=counts,
        )

    def with_paragraph(self, paragraph_id: int) -> ParseContext:
        return replace(self, paragraph_id=paragraph_id)

    def next_paragraph(self) -> ParseContext:
        return self.with_paragraph(self.paragraph_id + 1)


@dataclass
class DocumentRows:
    """Result of reshaping one document in isolation.

    RULES:
    - error is None when every data line of the document was well formed
    - when error is set, rows is empty; the document is dropped as a whole
    """

    doc_id: Optional[str]
    rows: list[AnnotatedToken] = field(default_factory=list)
    error: Optional[str] = None
