"""CSV renderer: flattens a comparison report into a spreadsheet table.

Layout:
    Report ID / Report Title / Generated At
    (blank)
    Property, Model A, Model B   + one row per model property
    (blank)
    Chart Data Comparison
    Name, Energy Value, Unit     + one row per chart entry
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from aura_report.report_data import (
    MODEL_A,
    MODEL_B,
    ModelReportDetails,
    ReportDraft,
    framework_display_name,
    resolve_report_id,
)

GENERATED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"

_PROPERTY_ROWS = (
    ("Selected Base Model", "selected_base_model"),
    ("Framework", "selected_framework"),
    ("Architecture", "architecture"),
    ("Data Size", "data_size"),
    ("Predicted Energy Consumption (Raw)", "predicted_energy_consumption_raw"),
    ("Parsed Energy Value", "parsed_energy_value"),
    ("Energy Unit", "energy_unit"),
    ("Confidence Level", "confidence_level"),
)

_SPECIAL_CHARS = (",", '"', "\n")


def escape_csv_cell(cell: Any) -> str:
    """Render one cell, quoting it when it holds a comma, quote or newline."""
    if cell is None:
        return ""
    text = _cell_text(cell)
    if any(ch in text for ch in _SPECIAL_CHARS):
        return '"' + text.replace('"', '""') + '"'
    return text


def rows_to_csv(rows: Sequence[Sequence[Any]]) -> str:
    """Join escaped cells with commas and rows with newlines."""
    return "\n".join(",".join(escape_csv_cell(cell) for cell in row) for row in rows)


def build_csv_rows(report: ReportDraft, report_id: Optional[str] = None) -> list[list[Any]]:
    """Build the table rows of a report, in export order."""
    rows: list[list[Any]] = [
        ["Report ID", resolve_report_id(report, report_id)],
        ["Report Title", report.title],
        ["Generated At", report.generated_at.strftime(GENERATED_AT_FORMAT)],
        [],
        ["Property", MODEL_A, MODEL_B],
    ]
    for label, attr in _PROPERTY_ROWS:
        rows.append([label, _property(report.model_a, attr), _property(report.model_b, attr)])

    rows.append([])
    rows.append(["Chart Data Comparison"])
    rows.append(["Name", "Energy Value", "Unit"])
    for entry in report.chart_data:
        rows.append([entry.name, entry.energy, entry.unit])
    return rows


def render_csv(report: ReportDraft, report_id: Optional[str] = None) -> str:
    """Render the report as CSV text."""
    return rows_to_csv(build_csv_rows(report, report_id))


def _property(details: ModelReportDetails, attr: str) -> Any:
    if attr == "selected_framework":
        return framework_display_name(details.selected_framework)
    return getattr(details, attr)


def _cell_text(cell: Any) -> str:
    # Whole floats print without a fraction, matching the dashboard (150, not 150.0).
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)
