from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class ImpactLevel(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class Priority(str, Enum):
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


class ControlEnhancement(BaseModel):
    id: str
    title: str


class Control(BaseModel):
    """A single catalog record (one SP 800-53 control).

    Field declaration order is the export field order. Optional fields are
    None when absent so that predicates can tell "missing" from "empty".
    """
    id: str
    title: Optional[str] = None
    family: Optional[str] = None
    priority: Optional[Priority] = None
    baseline: List[ImpactLevel] = Field(default_factory=list)
    description: Optional[str] = None
    control_text: Optional[str] = None
    supplemental_guidance: Optional[str] = None
    control_enhancements: List[ControlEnhancement] = Field(default_factory=list)

    @field_validator("baseline", "control_enhancements", mode="before")
    @classmethod
    def _null_list_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("priority", mode="before")
    @classmethod
    def _blank_priority_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class QueryPredicates(BaseModel):
    """Active search/filter criteria at a point in time."""
    text: str = ""
    family: Optional[str] = None
    baseline: Optional[ImpactLevel] = None
    priority: Optional[Priority] = None

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())

    def is_empty(self) -> bool:
        return not (self.has_text or self.family or self.baseline or self.priority)


class ExportScope(str, Enum):
    ALL = "all"
    CURRENT_VIEW = "filtered"


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    MARKDOWN = "md"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]


_MEDIA_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
    ExportFormat.MARKDOWN: "text/markdown",
}


class ExportRequest(BaseModel):
    scope: ExportScope
    format: ExportFormat
    family: Optional[str] = None  # selected family, only used for file naming
