"""Request validation shared by the annotation backends.

WHY: Both the local model and the REST service accept the same
(texts, doc_ids) request. Shape errors must be caught before the
engine is called, with messages that point at the offending input.

HOW: validate_request() checks element types, fills in default
document ids, and compares lengths.

RULES:
- texts/doc_ids must be sequences of str; a bare str is rejected
- doc_ids defaults to d1..dN when omitted
- len(texts) != len(doc_ids) → ArityMismatchError
- Duplicate doc_ids are allowed (uniqueness is a convention only)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, List, Optional, Tuple

from udpipe_converter.config import default_doc_ids


class InvalidPathError(ValueError):
    """Raised when a model path is not absolute."""


class InvalidModelError(ValueError):
    """Raised when a handle does not reference a successfully loaded model."""


class ArityMismatchError(ValueError):
    """Raised when texts and doc_ids differ in length.

    RULES:
    - Raised before any engine call
    - n_texts and n_doc_ids carry both lengths for the caller
    """

    def __init__(self, n_texts: int, n_doc_ids: int) -> None:
        self.n_texts = n_texts
        self.n_doc_ids = n_doc_ids
        super().__init__(
            "texts and doc_ids must have the same length "
            "(got {} texts and {} doc_ids)".format(n_texts, n_doc_ids)
        )


def _as_text_list(values: Any, name: str) -> List[str]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise TypeError(
            "{} must be a sequence of str, got {}".format(name, type(values).__name__)
        )
    for index, value in enumerate(values):
        if not isinstance(value, str):
            raise TypeError(
                "{}[{}] must be a str, got {}".format(name, index, type(value).__name__)
            )
    return list(values)


def validate_request(
    texts: Sequence[str],
    doc_ids: Optional[Sequence[str]] = None,
) -> Tuple[List[str], List[str]]:
    """Validate an annotation request and return it as two lists.

    Raises:
        TypeError: If texts or doc_ids is not a sequence of str.
        ArityMismatchError: If the two sequences differ in length.
    """
    text_list = _as_text_list(texts, "texts")
    if doc_ids is None:
        doc_ids = default_doc_ids(len(text_list))
    doc_id_list = _as_text_list(doc_ids, "doc_ids")
    if len(text_list) != len(doc_id_list):
        raise ArityMismatchError(len(text_list), len(doc_id_list))
    return text_list, doc_id_list
