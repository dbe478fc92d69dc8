"""JSON renderer: produces the machine-readable comparison report."""

from __future__ import annotations

import json
from typing import Any, Optional

from aura_report.report_data import ReportDraft, SavedReport, resolve_report_id


def render_json(report: ReportDraft, report_id: Optional[str] = None, indent: int = 2) -> str:
    """Render the report as a JSON string."""
    return json.dumps(build_json_dict(report, report_id), indent=indent, ensure_ascii=False)


def build_json_dict(report: ReportDraft, report_id: Optional[str] = None) -> dict[str, Any]:
    """Build a JSON-serializable dict of the full report, id first."""
    body = report.model_dump(mode="json", by_alias=True, exclude={"id"})
    return {"id": resolve_report_id(report, report_id), **body}


def parse_json(text: str) -> SavedReport:
    """Decode a document produced by render_json back into a report."""
    return SavedReport.model_validate_json(text)
