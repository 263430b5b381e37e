from .models import (
    Control,
    ControlEnhancement,
    ExportFormat,
    ExportRequest,
    ExportScope,
    ImpactLevel,
    Priority,
    QueryPredicates,
)

__all__ = [
    "Control",
    "ControlEnhancement",
    "ExportFormat",
    "ExportRequest",
    "ExportScope",
    "ImpactLevel",
    "Priority",
    "QueryPredicates",
]
