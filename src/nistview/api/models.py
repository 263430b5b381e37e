"""Composition DTOs for API layer.

These are thin wrappers around the catalog models. Do not duplicate Control
fields here - reuse the model directly.
"""

from typing import Optional

from pydantic import BaseModel

from ..catalog.models import ExportFormat


class CatalogStats(BaseModel):
    """Summary counts shown above the control list."""
    total_controls: int
    displayed_controls: int
    total_families: int
    total_enhancements: int
    selected_family: Optional[str] = None


class ExportArtifact(BaseModel):
    """Serialized export ready for delivery by an output sink."""
    filename: str
    format: ExportFormat
    content: str
    record_count: int

    @property
    def media_type(self) -> str:
        return self.format.media_type

    def to_bytes(self) -> bytes:
        return self.content.encode("utf-8")
