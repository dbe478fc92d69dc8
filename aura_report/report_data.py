"""Report data model: the records a model comparison produces.

Models are frozen and serialize with camelCase keys, the format used both
for JSON export and for the persisted report collection:

    {
      "id": ..., "title": ..., "generatedAt": ...,
      "modelA": {...}, "modelB": {...},
      "chartData": [{"name": "Model A", "energy": 120.0, "unit": "kWh"}, ...]
    }
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from aura_report.config import settings

Framework = Literal["tensorflow", "pytorch", "scikit-learn", "other"]

MODEL_A = "Model A"
MODEL_B = "Model B"

FRAMEWORK_NAMES: dict[str, str] = {
    "tensorflow": "TensorFlow",
    "pytorch": "PyTorch",
    "scikit-learn": "scikit-learn",
    "other": "Other/Custom",
}

# Keys written by earlier dashboard releases, mapped to their current names.
_LEGACY_DETAIL_KEYS = {
    "selectedModel": "selectedBaseModel",
    "predictedEnergyConsumption": "predictedEnergyConsumptionRaw",
}
_LEGACY_REPORT_KEYS = {
    "reportTitle": "title",
}


def framework_display_name(framework: Optional[str]) -> str:
    """Human readable framework name; absent frameworks render as N/A."""
    if not framework:
        return "N/A"
    return FRAMEWORK_NAMES.get(framework, framework)


def _rename_keys(data: Any, mapping: dict[str, str]) -> Any:
    if not isinstance(data, dict):
        return data
    renamed = dict(data)
    for old, new in mapping.items():
        if old in renamed and new not in renamed:
            renamed[new] = renamed.pop(old)
    return renamed


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class ModelInput(_WireModel):
    """Metadata submitted for one side of a comparison."""

    model_config = ConfigDict(str_strip_whitespace=True)

    selected_base_model: str = settings.default_base_model
    selected_framework: Optional[Framework] = None
    architecture: str = Field(min_length=1)
    data_size: str = Field(min_length=1)

    @field_validator("selected_base_model", mode="before")
    @classmethod
    def default_base_model(cls, value: Any) -> Any:
        return value or settings.default_base_model

    @field_validator("selected_framework", mode="before")
    @classmethod
    def blank_framework(cls, value: Any) -> Any:
        return value or None


class ModelReportDetails(_WireModel):
    """One side of a comparison report."""

    name: Literal["Model A", "Model B"]
    selected_base_model: str = settings.default_base_model
    # Free text: saved reports may carry frameworks outside the selector's choices.
    selected_framework: Optional[str] = None
    architecture: str = Field(min_length=1)
    data_size: str = Field(min_length=1)
    predicted_energy_consumption_raw: str
    parsed_energy_value: float = Field(ge=0)
    energy_unit: str = Field(min_length=1)
    confidence_level: str

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_keys(cls, data: Any) -> Any:
        return _rename_keys(data, _LEGACY_DETAIL_KEYS)

    @field_validator("selected_framework", mode="before")
    @classmethod
    def blank_framework(cls, value: Any) -> Any:
        return value or None


class ReportChartData(_WireModel):
    """One row of the comparison summary."""

    name: str
    energy: float
    unit: str


class ReportDraft(_WireModel):
    """A complete comparison report that has not been given an id yet."""

    title: str
    generated_at: datetime
    model_a: ModelReportDetails
    model_b: ModelReportDetails
    chart_data: tuple[ReportChartData, ...] = Field(min_length=2, max_length=2)

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_keys(cls, data: Any) -> Any:
        data = _rename_keys(data, _LEGACY_REPORT_KEYS)
        if isinstance(data, dict) and "chartData" not in data and "chart_data" not in data:
            summary = data.get("comparisonSummary")
            if isinstance(summary, dict) and "chartData" in summary:
                data = {**data, "chartData": summary["chartData"]}
        return data

    @field_validator("generated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def chart_matches_models(self) -> "ReportDraft":
        names = [row.name for row in self.chart_data]
        if names != [self.model_a.name, self.model_b.name]:
            raise ValueError(
                f"chart data {names} does not match models "
                f"[{self.model_a.name!r}, {self.model_b.name!r}]"
            )
        return self

    def with_id(self, report_id: str) -> "SavedReport":
        """Return a SavedReport carrying these fields and the given id."""
        fields = {name: getattr(self, name) for name in ReportDraft.model_fields}
        return SavedReport(id=report_id, **fields)


class SavedReport(ReportDraft):
    """A report with its identifier, as persisted and exported."""

    id: str = Field(min_length=1)


def resolve_report_id(report: ReportDraft, report_id: Optional[str] = None) -> str:
    """Pick the id to encode: an explicit id wins over the report's own."""
    if report_id:
        return report_id
    if isinstance(report, SavedReport):
        return report.id
    raise ValueError("A report id is required to encode a report that has not been saved")
