"""Export: encode a report into a file the host application can save.

Exporting does not save the report; an unsaved draft is given a fresh id
for the exported file only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from aura_report.config import settings
from aura_report.csv_renderer import render_csv
from aura_report.ids import IdGenerator, UuidIdGenerator
from aura_report.json_renderer import render_json
from aura_report.report_data import ReportDraft, SavedReport

logger = logging.getLogger(__name__)

CSV_MIME_TYPE = "text/csv"
JSON_MIME_TYPE = "application/json"


@dataclass(frozen=True)
class ExportedFile:
    """Encoded report content plus the metadata needed to save it."""

    filename: str
    mime_type: str
    content: bytes

    def save_to(self, directory: Union[str, Path]) -> Path:
        """Write the file into directory and return its path."""
        target = Path(directory) / self.filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.content)
        logger.info("Exported %s (%s, %d bytes)", target, self.mime_type, len(self.content))
        return target


def export_filename(report: ReportDraft, extension: str, prefix: Optional[str] = None) -> str:
    """``<prefix>_<YYYY-MM-DD>.<extension>``, dated by report generation."""
    return f"{prefix or settings.export_prefix}_{report.generated_at.date().isoformat()}.{extension}"


def export_csv(
    report: ReportDraft,
    report_id: Optional[str] = None,
    id_generator: Optional[IdGenerator] = None,
) -> ExportedFile:
    report_id = _export_id(report, report_id, id_generator)
    return ExportedFile(
        filename=export_filename(report, "csv"),
        mime_type=CSV_MIME_TYPE,
        content=render_csv(report, report_id).encode("utf-8"),
    )


def export_json(
    report: ReportDraft,
    report_id: Optional[str] = None,
    id_generator: Optional[IdGenerator] = None,
) -> ExportedFile:
    report_id = _export_id(report, report_id, id_generator)
    return ExportedFile(
        filename=export_filename(report, "json"),
        mime_type=JSON_MIME_TYPE,
        content=render_json(report, report_id).encode("utf-8"),
    )


def _export_id(report: ReportDraft, report_id: Optional[str], id_generator: Optional[IdGenerator]) -> str:
    if report_id:
        return report_id
    if isinstance(report, SavedReport):
        return report.id
    return (id_generator or UuidIdGenerator()).next()
