"""Export API: JSON, CSV and Markdown serializers for control lists.

Serializers only produce text. Delivering the file is the job of an output sink
(see nistview.output.sinks).
"""

import csv
import json
import re
from datetime import date, datetime, timezone
from io import StringIO
from typing import List, Optional, Sequence

from ..catalog.models import Control, ExportFormat, ExportRequest, ExportScope
from ..utils.time import to_utc_z, utc_today
from .models import ExportArtifact

CSV_COLUMNS = [
    "ID",
    "Title",
    "Family",
    "Priority",
    "Baseline",
    "Description",
    "Control Text",
    "Supplemental Guidance",
    "Enhancements",
]

MARKDOWN_TITLE = "NIST 800-53 Rev 5 Security Controls"


def _text(value) -> str:
    """Render an optional scalar, never as 'None'."""
    if value is None:
        return ""
    return str(getattr(value, "value", value))


def _joined_baseline(control: Control, sep: str) -> str:
    return sep.join(level.value for level in control.baseline)


def render_json(records: Sequence[Control]) -> str:
    """Pretty-printed JSON array, fields in declaration order."""
    data = [control.model_dump(mode="json") for control in records]
    return json.dumps(data, indent=2, ensure_ascii=False)


def render_csv(records: Sequence[Control]) -> str:
    """
    CSV with a fixed header and one row per control.

    Every cell is quoted; baseline and enhancements are flattened with "; ".
    """
    output_buffer = StringIO()
    writer = csv.writer(output_buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for control in records:
        writer.writerow([
            _text(control.id),
            _text(control.title),
            _text(control.family),
            _text(control.priority),
            _joined_baseline(control, "; "),
            _text(control.description),
            _text(control.control_text),
            _text(control.supplemental_guidance),
            "; ".join(f"{e.id}: {e.title}" for e in control.control_enhancements),
        ])
    return output_buffer.getvalue()


def render_markdown(records: Sequence[Control], generated_at: Optional[datetime] = None) -> str:
    """Render controls as a Markdown document, one level-2 section per control."""
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)

    lines: List[str] = []
    lines.append(f"# {MARKDOWN_TITLE}")
    lines.append("")
    lines.append(f"Generated on: {to_utc_z(generated_at)}")
    lines.append("")
    lines.append(f"Total Controls: {len(records)}")
    lines.append("")
    lines.append("---")
    lines.append("")

    for control in records:
        lines.append(f"## {control.id} - {_text(control.title)}")
        lines.append("")
        lines.append(f"**Family:** {_text(control.family)}")
        lines.append("")

        if control.priority:
            lines.append(f"**Priority:** {_text(control.priority)}")
            lines.append("")

        if control.baseline:
            lines.append(f"**Baseline:** {_joined_baseline(control, ', ')}")
            lines.append("")

        lines.append(f"**Description:** {_text(control.description)}")
        lines.append("")

        if control.control_text:
            lines.append("**Control Text:**")
            lines.append("")
            lines.append(control.control_text)
            lines.append("")

        if control.supplemental_guidance:
            lines.append("**Supplemental Guidance:**")
            lines.append("")
            lines.append(control.supplemental_guidance)
            lines.append("")

        if control.control_enhancements:
            lines.append("**Control Enhancements:**")
            lines.append("")
            for enhancement in control.control_enhancements:
                lines.append(f"- **{enhancement.id}:** {enhancement.title}")
            lines.append("")

        lines.append("---")
        lines.append("")

    return "\n".join(lines) + "\n"


def export_scope_label(scope: ExportScope, family: Optional[str] = None) -> str:
    """'all', the hyphenated lowercase family name, or 'filtered'."""
    if scope == ExportScope.ALL:
        return "all"
    if family:
        return re.sub(r"\s+", "-", family.lower())
    return "filtered"


def export_filename(
    scope: ExportScope,
    fmt: ExportFormat,
    family: Optional[str] = None,
    today: Optional[date] = None,
) -> str:
    """nist-800-53-<scope>-controls-<YYYY-MM-DD>.<ext>"""
    return f"nist-800-53-{export_scope_label(scope, family)}-controls-{utc_today(today)}.{fmt.extension}"


def render(records: Sequence[Control], fmt: ExportFormat, generated_at: Optional[datetime] = None) -> str:
    if fmt == ExportFormat.JSON:
        return render_json(records)
    elif fmt == ExportFormat.CSV:
        return render_csv(records)
    elif fmt == ExportFormat.MARKDOWN:
        return render_markdown(records, generated_at=generated_at)
    else:
        raise ValueError(f"Unsupported format: {fmt}")


def build_export(
    records: Sequence[Control],
    request: ExportRequest,
    today: Optional[date] = None,
    generated_at: Optional[datetime] = None,
) -> ExportArtifact:
    """
    Serialize records for an export request.

    Args:
        records: Records already selected for the request's scope
        request: Export scope, format and selected family
        today: Date used in the filename (defaults to today, UTC)
        generated_at: Timestamp printed in Markdown output

    Returns:
        ExportArtifact with filename, format and content
    """
    return ExportArtifact(
        filename=export_filename(request.scope, request.format, request.family, today),
        format=request.format,
        content=render(records, request.format, generated_at=generated_at),
        record_count=len(records),
    )
