"""Annotation engine adapters: local UDPipe model and UDPipe REST service.

WHY: The converter does no linguistic analysis itself. It hands raw
texts to UDPipe and receives one CONLL-U blob back. This package
encapsulates both ways of reaching the engine behind the same
annotate(texts, doc_ids) -> AnnotationResult contract.

HOW: local.py wraps the ufal.udpipe binding (load_model + annotate).
service.py talks to the REST service with httpx. request.py holds the
shared request validation and error types.

RULES:
- All engine calls go through this package
- Request-shape errors are raised before the engine is called
- Per-document failures are data (AnnotationResult.errors), not exceptions
"""

from udpipe_converter.engine.models import AnnotationResult, ModelHandle
from udpipe_converter.engine.request import (
    ArityMismatchError,
    InvalidModelError,
    InvalidPathError,
    validate_request,
)

__all__ = [
    "AnnotationResult",
    "ArityMismatchError",
    "InvalidModelError",
    "InvalidPathError",
    "ModelHandle",
    "validate_request",
]
