"""Engine handle and annotation result dataclasses.

WHY: The annotation engine is an external collaborator. Callers only
need two things from it: an opaque handle to a loaded model, and the
CONLL-U blob it produced for a batch together with the inputs and any
per-document errors. Typed dataclasses make both explicit.

HOW: ModelHandle wraps the engine's model object privately and exposes
only the path it was loaded from. AnnotationResult bundles the request
inputs with the engine output, index-aligned.

RULES:
- ModelHandle is immutable; the wrapped model is never inspected
  outside the engine backends
- AnnotationResult.errors[i] belongs to texts[i] / doc_ids[i]
- errors[i] is None when document i was annotated successfully
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class ModelHandle:
    """A loaded annotation model and the file it came from.

    WHY: The engine's model object is a native pointer with no useful
    Python surface. Wrapping it keeps the rest of the package free of
    engine-specific types.

    RULES:
    - path: the expanded, absolute path passed to load_model()
    - is_loaded is False for a handle whose model could not be loaded
    """

    path: str
    _model: Any = field(default=None, repr=False, compare=False)

    @property
    def is_loaded(self) -> bool:
        return self._model is not None


@dataclass
class AnnotationResult:
    """The engine output for one batch of documents.

    WHY: One engine call covers many documents. Some may fail while
    others succeed, so failures travel as data next to the blob rather
    than as an exception that would discard the whole batch.

    RULES:
    - conllu covers all successfully annotated documents, in request order
    - texts, doc_ids and errors have the same length
    """

    texts: List[str]
    doc_ids: List[str]
    conllu: str
    errors: List[Optional[str]]

    @property
    def failed_doc_ids(self) -> List[str]:
        """Document ids whose annotation reported an error."""
        return [
            doc_id for doc_id, error in zip(self.doc_ids, self.errors)
            if error is not None
        ]

    @property
    def ok(self) -> bool:
        return all(error is None for error in self.errors)
