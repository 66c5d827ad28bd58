"""CONLL-U line classification and reshaping into tidy token rows.

WHY: UDPipe returns one CONLL-U blob for a whole batch of documents.
Document, paragraph and sentence membership is only implied by the
order of comment markers (# newdoc, # newpar, # sent_id, # text).
Analysis needs one row per token with that membership spelled out.
This module is the bridge between the blob and the AnnotatedToken rows.

HOW: A single forward pass. Each line is classified by prefix, then a
ParseContext is advanced through the line (a fold). Marker lines
replace one field of the context; data lines are split into their 10
columns and emitted with a snapshot of the context.

RULES:
- Lines are split on "\\n" and never trimmed; "" is a sentence boundary
- A marker keyword matches as a whole word only, which is stricter than
  a plain prefix test: "# text_en = ..." and "# newdocument" are
  ordinary comments, so a translation line never overwrites
  sentence_text
- doc_id/sentence_id/sentence_text carry forward until the next marker
  of the same kind, across blank lines, comments and documents
- paragraph_id counts # newpar markers per doc_id; a data line seen
  before any # newpar opens paragraph 1
- A data line must have exactly 10 tab-separated fields, otherwise
  MalformedRowError; nothing is padded or truncated
- Data lines before the first # newdoc get doc_id=None (logged once)
- Output order equals input line order
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import replace
from functools import reduce
from typing import Iterable, Iterator, List, Optional

from udpipe_converter.core.ir import (
    TOKEN_FIELDS,
    AnnotatedToken,
    DocumentRows,
    ParseContext,
)

logger = logging.getLogger(__name__)

# Leading "id =" (newdoc) or "=" (sent_id, text) plus the spaces around it.
_NEWDOC_VALUE_RE = re.compile(r"^\s*(?:id\s*=)?\s*")
_ASSIGNMENT_RE = re.compile(r"^\s*=?\s*")


class LineKind(str, enum.Enum):
    """What a single CONLL-U line contributes to the parse."""

    BLANK = "blank"
    NEWDOC = "newdoc"
    NEWPAR = "newpar"
    SENT_ID = "sent_id"
    TEXT = "text"
    COMMENT = "comment"
    DATA = "data"


# Checked in this order; the first whole-word match wins.
_MARKERS = (
    (LineKind.NEWDOC, "# newdoc"),
    (LineKind.NEWPAR, "# newpar"),
    (LineKind.SENT_ID, "# sent_id"),
    (LineKind.TEXT, "# text"),
)


class MalformedRowError(ValueError):
    """Raised when a data line does not have exactly 10 tab-separated fields.

    WHY: Padding or truncating a short/long line would shift every
    following column silently. A hard failure that names the line is
    the only safe outcome.

    RULES:
    - line_index is the 0-based index into conllu.split("\\n")
    - line is the raw offending line, unmodified
    - doc_id is the document active when the line was read (may be None)
    """

    def __init__(
        self,
        line_index: int,
        line: str,
        doc_id: Optional[str] = None,
    ) -> None:
        self.line_index = line_index
        self.line = line
        self.doc_id = doc_id
        self.field_count = len(line.split("\t"))
        super().__init__(
            "Malformed CONLL-U data line at index {} (document {}): "
            "expected {} tab-separated fields, found {}: {!r}".format(
                line_index,
                doc_id if doc_id is not None else "<none>",
                len(TOKEN_FIELDS),
                self.field_count,
                line,
            )
        )


def classify_line(line: str) -> LineKind:
    """Classify one CONLL-U line by its prefix.

    RULES:
    - "" → BLANK (whitespace-only lines are not blank)
    - "# newdoc", "# newpar", "# sent_id", "# text" followed by end of
      line, whitespace or "=" → the corresponding marker
    - any other line starting with "#" → COMMENT
    - everything else → DATA
    """
    if line == "":
        return LineKind.BLANK
    if not line.startswith("#"):
        return LineKind.DATA
    for kind, marker in _MARKERS:
        if line.startswith(marker):
            rest = line[len(marker):]
            if rest == "" or rest[0] in " \t=":
                return kind
    return LineKind.COMMENT


def _marker_value(kind: LineKind, line: str) -> str:
    """Extract the value carried by a # newdoc, # sent_id or # text line."""
    marker = dict(_MARKERS)[kind]
    rest = line[len(marker):]
    if kind is LineKind.NEWDOC:
        return _NEWDOC_VALUE_RE.sub("", rest, count=1).rstrip()
    return _ASSIGNMENT_RE.sub("", rest, count=1)


def _transition(context: ParseContext, kind: LineKind, line: str) -> ParseContext:
    if kind is LineKind.NEWDOC:
        return context.with_document(_marker_value(kind, line))
    if kind is LineKind.NEWPAR:
        return context.next_paragraph()
    if kind is LineKind.SENT_ID:
        return replace(context, sentence_id=_marker_value(kind, line))
    if kind is LineKind.TEXT:
        return replace(context, sentence_text=_marker_value(kind, line))
    if kind is LineKind.DATA and context.paragraph_id == 0:
        return context.with_paragraph(1)
    return context


def advance(context: ParseContext, line: str) -> ParseContext:
    """Return the context that is active after reading ``line``.

    WHY: This is the whole of the last-observed-value rule in one pure
    step, so it can be tested (and folded) on its own.

    RULES:
    - Marker lines replace exactly one aspect of the context
    - Blank and comment lines leave the context unchanged
    - A data line only changes the context when it opens paragraph 1
    """
    return _transition(context, classify_line(line), line)


def fold_context(
    lines: Iterable[str],
    context: Optional[ParseContext] = None,
) -> ParseContext:
    """Fold advance() over ``lines`` and return the final context."""
    return reduce(advance, lines, context if context is not None else ParseContext())


def split_fields(
    line: str,
    line_index: int = 0,
    doc_id: Optional[str] = None,
) -> List[str]:
    """Split a data line into its 10 CONLL-U columns.

    Raises:
        MalformedRowError: If the line does not have exactly 10 fields.
    """
    fields = line.split("\t")
    if len(fields) != len(TOKEN_FIELDS):
        raise MalformedRowError(line_index, line, doc_id)
    return fields


def _make_token(context: ParseContext, fields: List[str]) -> AnnotatedToken:
    return AnnotatedToken(
        context.doc_id,
        context.paragraph_id,
        context.sentence_id,
        context.sentence_text,
        *fields,
    )


def _split_lines(conllu: str) -> List[str]:
    if not isinstance(conllu, str):
        raise TypeError(
            "conllu must be a str, got {}".format(type(conllu).__name__)
        )
    return conllu.split("\n")


def iter_tokens(conllu: str) -> Iterator[AnnotatedToken]:
    """Lazily yield one AnnotatedToken per data line of ``conllu``.

    Raises:
        TypeError: If conllu is not a str.
        MalformedRowError: On the first data line without 10 fields.
    """
    context = ParseContext()
    warned_orphans = False

    for index, line in enumerate(_split_lines(conllu)):
        kind = classify_line(line)
        context = _transition(context, kind, line)
        if kind is not LineKind.DATA:
            continue

        fields = split_fields(line, index, context.doc_id)
        if context.doc_id is None and not warned_orphans:
            logger.warning(
                "Token line at index %d precedes any # newdoc marker; "
                "doc_id will be None", index,
            )
            warned_orphans = True
        yield _make_token(context, fields)


def reshape_conllu(conllu: str) -> List[AnnotatedToken]:
    """Reshape a CONLL-U blob into a list of AnnotatedToken rows.

    WHY: This is the main entry point of the core: the conllu field of
    an AnnotationResult goes in, the tidy token table comes out.

    HOW: Materializes iter_tokens(). The whole blob and all rows are
    held in memory.

    RULES:
    - One row per data line, in input order
    - Fails as a whole on the first malformed data line

    Args:
        conllu: Annotation text in CONLL-U format.

    Returns:
        List of AnnotatedToken rows with doc/paragraph/sentence context.

    Raises:
        TypeError: If conllu is not a str.
        MalformedRowError: If a data line does not have 10 fields.
    """
    tokens = list(iter_tokens(conllu))
    logger.debug("Reshaped %d token rows", len(tokens))
    return tokens


def reshape_documents(conllu: str) -> List[DocumentRows]:
    """Reshape a CONLL-U blob, confining malformed lines to their document.

    WHY: A batch often holds many documents. One bad line from the
    engine should not cost the rows of every other document.

    HOW: Same fold as reshape_conllu(). Rows are collected per
    # newdoc span. When a data line is malformed, that document's rows
    are discarded, the error message is recorded, and its remaining
    lines are skipped until the next # newdoc.

    RULES:
    - One DocumentRows per # newdoc marker, in input order
    - Data lines before the first # newdoc form a leading DocumentRows
      with doc_id=None
    - Context carries across documents exactly as in reshape_conllu()

    Args:
        conllu: Annotation text in CONLL-U format.

    Returns:
        List of DocumentRows, each with rows or an error message.
    """
    results: List[DocumentRows] = []
    current: Optional[DocumentRows] = None
    context = ParseContext()

    for index, line in enumerate(_split_lines(conllu)):
        kind = classify_line(line)
        context = _transition(context, kind, line)

        if kind is LineKind.NEWDOC:
            current = DocumentRows(doc_id=context.doc_id)
            results.append(current)
            continue
        if kind is not LineKind.DATA:
            continue

        if current is None:
            logger.warning(
                "Token line at index %d precedes any # newdoc marker; "
                "doc_id will be None", index,
            )
            current = DocumentRows(doc_id=None)
            results.append(current)
        if current.error is not None:
            continue

        try:
            fields = split_fields(line, index, context.doc_id)
        except MalformedRowError as exc:
            logger.warning("Dropping document %s: %s", current.doc_id, exc)
            current.rows = []
            current.error = str(exc)
            continue
        current.rows.append(_make_token(context, fields))

    return results


def tokens_to_records(tokens: Iterable[AnnotatedToken]) -> List[dict]:
    """Convert rows to column-ordered dicts (e.g. for DataFrame construction)."""
    return [token.as_record() for token in tokens]
