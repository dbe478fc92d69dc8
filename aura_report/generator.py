"""Comparison orchestrator: wires two concurrent predictions into a report.

Usage:
    orchestrator = ComparisonOrchestrator(estimator, store=ReportStore.from_settings())
    report = await orchestrator.compare(model_a, model_b)
    saved = orchestrator.save_current()
    csv_file = orchestrator.export_current_csv()

States: IDLE -> COMPARING -> READY. A failed comparison returns to IDLE and
keeps nothing; a new submission from READY starts over in COMPARING.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from aura_report.builder import Clock, build_report
from aura_report.config import settings
from aura_report.errors import (
    ComparisonInProgressError,
    NoComparisonError,
    PredictionFailure,
    StoreNotConfiguredError,
)
from aura_report.estimator import EnergyEstimator, EnergyPrediction
from aura_report.exporter import ExportedFile, export_csv, export_json
from aura_report.ids import IdGenerator, UuidIdGenerator
from aura_report.presets import resolve_base_model
from aura_report.report_data import MODEL_A, MODEL_B, ModelInput, ReportDraft, SavedReport
from aura_report.store import ReportStore

logger = logging.getLogger(__name__)


class ComparisonState(str, Enum):
    IDLE = "idle"
    COMPARING = "comparing"
    READY = "ready"


StateListener = Callable[[ComparisonState], None]


class ComparisonOrchestrator:
    """Runs model comparisons and holds the current comparison report."""

    def __init__(
        self,
        estimator: EnergyEstimator,
        store: Optional[ReportStore] = None,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.estimator = estimator
        self.store = store
        self.id_generator = id_generator or UuidIdGenerator()
        self.clock = clock
        self._state = ComparisonState.IDLE
        self._current: Optional[ReportDraft] = None
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ComparisonState:
        return self._state

    @property
    def current_report(self) -> Optional[ReportDraft]:
        return self._current

    @property
    def primary_unit(self) -> str:
        """Unit used to label a chart of the current comparison."""
        if self._current is None:
            return settings.default_unit
        return self._current.model_a.energy_unit or self._current.model_b.energy_unit or settings.default_unit

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call listener with every new state; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def compare(
        self,
        model_a: ModelInput,
        model_b: ModelInput,
        title: Optional[str] = None,
    ) -> ReportDraft:
        """Predict both models concurrently and build the comparison report.

        Base model presets are applied to both inputs before prediction.

        Raises PredictionFailure if either prediction fails; the other
        result is discarded and no report is kept.
        """
        if self._state is ComparisonState.COMPARING:
            raise ComparisonInProgressError("A comparison is already running; wait for it to finish")

        model_a = resolve_base_model(model_a)
        model_b = resolve_base_model(model_b)
        self._current = None
        self._transition(ComparisonState.COMPARING)
        logger.info(
            "Comparing %r (%s) with %r (%s)",
            model_a.architecture, model_a.data_size, model_b.architecture, model_b.data_size,
        )
        report: Optional[ReportDraft] = None
        try:
            prediction_a, prediction_b = await asyncio.gather(
                self._predict(MODEL_A, model_a),
                self._predict(MODEL_B, model_b),
            )
            report = build_report(model_a, prediction_a, model_b, prediction_b, title=title, clock=self.clock)
        except PredictionFailure as exc:
            logger.error("Comparison failed: %s", exc)
            raise
        finally:
            # Failure, cancellation or a builder error all end the comparison.
            if report is None:
                self._transition(ComparisonState.IDLE)

        self._current = report
        self._transition(ComparisonState.READY)
        return report

    def save_current(self) -> SavedReport:
        """Append the current report to the store."""
        report = self._require_report()
        if self.store is None:
            raise StoreNotConfiguredError("No report store is configured")
        return self.store.append(report)

    def export_current_csv(self) -> ExportedFile:
        return export_csv(self._require_report(), id_generator=self.id_generator)

    def export_current_json(self) -> ExportedFile:
        return export_json(self._require_report(), id_generator=self.id_generator)

    async def _predict(self, name: str, model: ModelInput) -> EnergyPrediction:
        try:
            return await self.estimator.predict(model.architecture, model.data_size)
        except Exception as exc:
            raise PredictionFailure(f"Energy prediction for {name} failed: {exc}") from exc

    def _require_report(self) -> ReportDraft:
        if self._state is not ComparisonState.READY or self._current is None:
            raise NoComparisonError("No comparison report available; run a comparison first")
        return self._current

    def _transition(self, state: ComparisonState) -> None:
        self._state = state
        logger.debug("Comparison state -> %s", state.value)
        for listener in list(self._listeners):
            listener(state)
