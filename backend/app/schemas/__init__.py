"""API schemas."""

from app.schemas.common import ErrorResponse
from app.schemas.note import Note, NoteCreate, RewriteResponse, SummaryResponse

__all__ = [
    "ErrorResponse",
    "Note",
    "NoteCreate",
    "SummaryResponse",
    "RewriteResponse",
]
