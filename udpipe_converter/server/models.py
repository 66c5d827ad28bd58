"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: Each endpoint pair (request + response) has its own model. All
models include Field descriptions for rich OpenAPI docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- TokenRow mirrors AnnotatedToken field for field
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class ReshapeRequest(BaseModel):
    """A CONLL-U blob to reshape into token rows."""

    conllu: str = Field(description="Annotation text in CONLL-U format.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "conllu": (
                    "# newdoc id = d1\n# newpar\n# sent_id = 1\n# text = Hi.\n"
                    "1\tHi\thi\tINTJ\t_\t_\t0\troot\t_\t_\n"
                    "2\t.\t.\tPUNCT\t_\t_\t1\tpunct\t_\t_\n"
                ),
            }
        ]
    }}


class AnnotateRequest(BaseModel):
    """A batch of documents to annotate.

    RULES:
    - doc_ids is optional and defaults to d1..dN
    - when given, doc_ids must have the same length as texts
    """

    texts: List[str] = Field(description="One raw UTF-8 text per document.")
    doc_ids: Optional[List[str]] = Field(
        default=None,
        description="One identifier per document. Defaults to d1, d2, ...",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TokenRow(BaseModel):
    """One token with its document, paragraph and sentence context."""

    doc_id: Optional[str] = Field(description="Document identifier from # newdoc.")
    paragraph_id: int = Field(description="1-based paragraph number within the document.")
    sentence_id: Optional[str] = Field(description="Sentence identifier from # sent_id.")
    sentence_text: Optional[str] = Field(description="Sentence text from # text.")
    id: str = Field(description="Token index, range (2-3) or empty node (4.1).")
    form: str = Field(description="Word form or punctuation symbol.")
    lemma: str = Field(description="Lemma or stem of the word form.")
    upostag: str = Field(description="Universal part-of-speech tag.")
    xpostag: str = Field(description="Language-specific part-of-speech tag.")
    feats: str = Field(description="Morphological features.")
    head: str = Field(description="Head of the current word.")
    deprel: str = Field(description="Universal dependency relation to the head.")
    deps: str = Field(description="Enhanced dependency graph.")
    misc: str = Field(description="Any other annotation.")


class ReshapeResponse(BaseModel):
    """Rows produced from a CONLL-U blob."""

    row_count: int = Field(description="Number of token rows.")
    rows: List[TokenRow] = Field(description="Token rows in input order.")


class AnnotationResponse(BaseModel):
    """Engine output for a batch, reshaped into token rows.

    RULES:
    - errors[i] belongs to doc_ids[i]; null means success
    """

    doc_ids: List[str] = Field(description="Document identifiers, in request order.")
    errors: List[Optional[str]] = Field(description="Per-document error messages (null on success).")
    row_count: int = Field(description="Number of token rows.")
    rows: List[TokenRow] = Field(description="Token rows in document order.")


class FormatInfo(BaseModel):
    """Description of an available output format."""

    key: str = Field(description="Format identifier used in API paths.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-tokens.tsv').")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
    engine: Optional[str] = Field(
        default=None,
        description="Configured engine ('local', 'service') or null when none is configured.",
    )
