"""Plain text sentence listing grouped by document and paragraph.

WHY: Reviewers checking segmentation want to see how the engine split
the text into documents, paragraphs and sentences without scanning a
token table. This is the simplest formatter and doubles as a quick
sanity check of the reshaped context.

HOW: Walks the rows in order. A new sentence starts whenever the
(doc_id, paragraph_id, sentence_id) triple changes. Each paragraph is
one line of its sentences joined by a space; paragraphs are separated
by a blank line; each document starts with a "doc_id:" header.

RULES:
- Sentence text comes from # text; when absent it is rebuilt from the
  token forms (multiword ranges replace the words they cover)
- Header for rows without a document is "<no document>:"
- Output suffix: "-sentences.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from itertools import groupby
from typing import List, Optional, Sequence, Set

from udpipe_converter.core.ir import AnnotatedToken
from udpipe_converter.formatters.base import BaseFormatter, FormatterOutput

_NO_DOCUMENT = "<no document>"


def _rebuild_text(tokens: List[AnnotatedToken]) -> str:
    """Join surface forms, preferring multiword ranges over their parts.

    Empty nodes ("4.1") carry no surface form and are skipped.
    """
    covered: Set[str] = set()
    forms: List[str] = []
    for token in tokens:
        if "." in token.id or token.id in covered:
            continue
        if "-" in token.id:
            start, _, end = token.id.partition("-")
            if start.isdigit() and end.isdigit():
                covered.update(str(i) for i in range(int(start), int(end) + 1))
        forms.append(token.form)
    return " ".join(forms)


def _sentence_key(token: AnnotatedToken) -> tuple:
    return (token.doc_id, token.paragraph_id, token.sentence_id, token.sentence_text)


class SentencesFormatter(BaseFormatter):
    """Formatter that lists sentences per paragraph per document."""

    suffix = "-sentences.txt"
    media_type = "text/plain"

    @property
    def name(self) -> str:
        return "Sentence listing"

    def format(self, tokens: Sequence[AnnotatedToken]) -> FormatterOutput:
        blocks: List[str] = []
        current_doc: Optional[str] = None
        paragraphs: List[List[str]] = []
        started = False

        def _flush() -> None:
            if not started:
                return
            header = "{}:".format(current_doc if current_doc is not None else _NO_DOCUMENT)
            body = "\n\n".join(" ".join(sentences) for sentences in paragraphs)
            blocks.append("{}\n{}".format(header, body))

        current_paragraph: Optional[int] = None
        for key, group in groupby(tokens, key=_sentence_key):
            doc_id, paragraph_id, _, sentence_text = key
            sentence_tokens = list(group)
            if not started or doc_id != current_doc:
                _flush()
                started = True
                current_doc = doc_id
                current_paragraph = None
                paragraphs = []
            if paragraph_id != current_paragraph:
                paragraphs.append([])
                current_paragraph = paragraph_id
            text = sentence_text if sentence_text is not None else _rebuild_text(sentence_tokens)
            paragraphs[-1].append(text)
        _flush()

        content = "\n\n".join(blocks)
        if content:
            content += "\n"

        return self._output(content)
