"""Report builder: turns two completed predictions into a report draft."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from aura_report.energy_parser import parse_energy_value
from aura_report.errors import IncompleteInputError
from aura_report.estimator import EnergyPrediction
from aura_report.report_data import (
    MODEL_A,
    MODEL_B,
    ModelInput,
    ModelReportDetails,
    ReportChartData,
    ReportDraft,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_report(
    model_a: ModelInput,
    prediction_a: Optional[EnergyPrediction],
    model_b: ModelInput,
    prediction_b: Optional[EnergyPrediction],
    title: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> ReportDraft:
    """Assemble an immutable report draft from both sides of a comparison.

    Raises IncompleteInputError when either prediction is missing.
    """
    missing = [
        name
        for name, prediction in ((MODEL_A, prediction_a), (MODEL_B, prediction_b))
        if prediction is None
    ]
    if missing:
        raise IncompleteInputError(
            f"Cannot build report: prediction for {' and '.join(missing)} has not completed"
        )

    details_a = _model_details(MODEL_A, model_a, prediction_a)
    details_b = _model_details(MODEL_B, model_b, prediction_b)
    if not title or not title.strip():
        title = f"Comparison: {details_a.architecture} vs {details_b.architecture}"

    report = ReportDraft(
        title=title,
        generated_at=(clock or utc_now)(),
        model_a=details_a,
        model_b=details_b,
        chart_data=tuple(
            ReportChartData(name=d.name, energy=d.parsed_energy_value, unit=d.energy_unit)
            for d in (details_a, details_b)
        ),
    )
    logger.info(
        "Report built: %r, %s %s vs %s %s",
        report.title,
        details_a.parsed_energy_value, details_a.energy_unit,
        details_b.parsed_energy_value, details_b.energy_unit,
    )
    return report


def _model_details(name: str, model: ModelInput, prediction: EnergyPrediction) -> ModelReportDetails:
    parsed = parse_energy_value(prediction.predicted_energy_consumption)
    return ModelReportDetails(
        name=name,
        selected_base_model=model.selected_base_model,
        selected_framework=model.selected_framework,
        architecture=model.architecture,
        data_size=model.data_size,
        predicted_energy_consumption_raw=prediction.predicted_energy_consumption,
        parsed_energy_value=parsed.value,
        energy_unit=parsed.unit,
        confidence_level=prediction.confidence_level,
    )
