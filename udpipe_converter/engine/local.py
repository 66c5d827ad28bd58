"""Local UDPipe engine: model loading and batch annotation.

WHY: The converter needs to load a UDPipe model from disk once and run
tokenization, tagging and dependency parsing over a batch of documents.
This module hides the ufal.udpipe binding behind load_model() and
annotate() so callers (CLI, HTTP API, tests) never touch native types.

HOW: load_model() validates the path and calls Model.load(). annotate()
validates the request, then runs one tokenizer over every document in
turn, resetting it with the document id so the CONLL-U output carries
"# newdoc id = <doc_id>" and "# newpar" markers. Sentences are tagged,
parsed and written with the "conllu" output format.

RULES:
- Paths are ~-expanded; missing file → FileNotFoundError, relative
  path → InvalidPathError, unloadable file → InvalidModelError
- Request errors are raised before the engine is touched
- A failure inside one document is recorded in errors[i] and logged;
  the remaining documents are still annotated
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional, Sequence, Tuple, Union

from ufal.udpipe import Model, OutputFormat, ProcessingError, Sentence

from udpipe_converter.engine.models import AnnotationResult, ModelHandle
from udpipe_converter.engine.request import (
    InvalidModelError,
    InvalidPathError,
    validate_request,
)

logger = logging.getLogger(__name__)

_OUTPUT_FORMAT = "conllu"


def load_model(path: Union[str, "os.PathLike[str]"]) -> ModelHandle:
    """Load a UDPipe model file and return an opaque handle.

    WHY: Loading is expensive (tens of MB), so it happens once and the
    handle is passed to every annotate() call.

    HOW: Expands ~, checks the file exists and the path is absolute,
    then asks the engine to load it.

    RULES:
    - Existence is checked first, then absoluteness
    - Model.load() returning None means the file is not a UDPipe model

    Args:
        path: Absolute path to a .udpipe model file.

    Returns:
        ModelHandle referencing the loaded model.

    Raises:
        TypeError: If path is not a str or os.PathLike.
        FileNotFoundError: If the file does not exist.
        InvalidPathError: If the path is not absolute.
        InvalidModelError: If the engine cannot load the file.
    """
    if not isinstance(path, (str, os.PathLike)):
        raise TypeError("path must be a str or os.PathLike, got {}".format(type(path).__name__))
    file = os.path.expanduser(os.fspath(path))

    if not os.path.isfile(file):
        raise FileNotFoundError(
            "File {} containing the language model does not exist".format(file)
        )
    if not os.path.isabs(file):
        raise InvalidPathError(
            "You should provide the full path to the file {}, as in {}".format(
                file, os.path.join(os.getcwd(), file)
            )
        )

    model = Model.load(file)
    if model is None:
        raise InvalidModelError("Cannot load UDPipe model from {}".format(file))

    logger.info("Loaded UDPipe model %s", file)
    return ModelHandle(path=file, _model=model)


def _tokenize_tag_parse(
    model: Model,
    texts: List[str],
    doc_ids: List[str],
) -> Tuple[str, List[Optional[str]]]:
    """Run the engine over the whole batch; return (conllu, errors)."""
    tokenizer = model.newTokenizer(Model.DEFAULT)
    if tokenizer is None:
        raise InvalidModelError("The loaded model does not contain a tokenizer")
    output = OutputFormat.newOutputFormat(_OUTPUT_FORMAT)

    parts: List[str] = []
    errors: List[Optional[str]] = []
    sentence = Sentence()

    for text, doc_id in zip(texts, doc_ids):
        error = ProcessingError()
        tokenizer.resetDocument(doc_id)
        tokenizer.setText(text)
        while tokenizer.nextSentence(sentence, error):
            if not model.tag(sentence, Model.DEFAULT, error):
                break
            if not model.parse(sentence, Model.DEFAULT, error):
                break
            parts.append(output.writeSentence(sentence))
        parts.append(output.finishDocument())
        errors.append(error.message if error.occurred() else None)

    return "".join(parts), errors


def annotate(
    handle: ModelHandle,
    texts: Sequence[str],
    doc_ids: Optional[Sequence[str]] = None,
) -> AnnotationResult:
    """Tokenize, tag and dependency-parse a batch of documents.

    WHY: The reshaper needs one CONLL-U blob with document markers for
    the whole batch, plus a per-document error channel so one bad text
    does not cost the others.

    HOW: Validates the handle and the request, then makes one batch
    call into the engine.

    RULES:
    - Handle check first, then element types, then lengths
    - doc_ids defaults to d1..dN
    - Per-document failures end up in errors[i], never raised

    Args:
        handle: ModelHandle returned by load_model().
        texts: One raw UTF-8 text per document.
        doc_ids: One identifier per document, same length as texts.

    Returns:
        AnnotationResult with the inputs, the CONLL-U blob and errors.

    Raises:
        InvalidModelError: If handle is not a loaded ModelHandle.
        TypeError: If texts or doc_ids is not a sequence of str.
        ArityMismatchError: If texts and doc_ids differ in length.
    """
    if not isinstance(handle, ModelHandle) or not handle.is_loaded:
        raise InvalidModelError(
            "handle should be a ModelHandle as returned by load_model()"
        )
    text_list, doc_id_list = validate_request(texts, doc_ids)

    logger.info("Annotating %d document(s) with %s", len(text_list), handle.path)
    conllu, errors = _tokenize_tag_parse(handle._model, text_list, doc_id_list)

    for doc_id, error in zip(doc_id_list, errors):
        if error is not None:
            logger.warning("Annotation failed for document %s: %s", doc_id, error)

    return AnnotationResult(
        texts=text_list,
        doc_ids=doc_id_list,
        conllu=conllu,
        errors=errors,
    )
