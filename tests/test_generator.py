"""Tests for the comparison orchestrator and estimator adapters."""

import asyncio
from datetime import datetime, timezone

import pytest

from aura_report.errors import (
    ComparisonInProgressError,
    NoComparisonError,
    PredictionFailure,
    StoreNotConfiguredError,
)
from aura_report.estimator import CallableEstimator, EnergyEstimator, EnergyPrediction
from aura_report.generator import ComparisonOrchestrator, ComparisonState
from aura_report.ids import SequentialIdGenerator
from aura_report.report_data import ModelInput
from aura_report.store import InMemoryStorage, ReportStore

CNN = ModelInput(architecture="CNN", data_size="1GB")
TRANSFORMER = ModelInput(architecture="Transformer", data_size="10GB")


class FakeEstimator(EnergyEstimator):
    """Answers by architecture; an Exception response is raised instead."""

    def __init__(self, responses, delays=None):
        self.responses = responses
        self.delays = delays or {}
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def predict(self, model_architecture, data_size):
        self.calls.append((model_architecture, data_size))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(model_architecture, 0.01))
            response = self.responses[model_architecture]
            if isinstance(response, Exception):
                raise response
            return EnergyPrediction.model_validate(response)
        finally:
            self.in_flight -= 1


def _responses():
    return {
        "CNN": {"predictedEnergyConsumption": "120 kWh", "confidenceLevel": "high", "visualizationType": "bar"},
        "Transformer": {"predictedEnergyConsumption": "480 kWh", "confidenceLevel": "medium", "visualizationType": "bar"},
    }


def _orchestrator(estimator, store=None):
    return ComparisonOrchestrator(
        estimator,
        store=store,
        id_generator=SequentialIdGenerator("export-"),
        clock=lambda: datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )


def _store():
    return ReportStore(InMemoryStorage(), id_generator=SequentialIdGenerator())


def test_end_to_end_comparison():
    orchestrator = _orchestrator(FakeEstimator(_responses()))
    report = asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    assert report.title == "Comparison: CNN vs Transformer"
    assert [row.model_dump() for row in report.chart_data] == [
        {"name": "Model A", "energy": 120.0, "unit": "kWh"},
        {"name": "Model B", "energy": 480.0, "unit": "kWh"},
    ]
    assert report.model_a.confidence_level == "high"
    assert report.model_b.confidence_level == "medium"
    assert orchestrator.state is ComparisonState.READY
    assert orchestrator.current_report == report


def test_predictions_run_concurrently():
    estimator = FakeEstimator(_responses())
    asyncio.run(_orchestrator(estimator).compare(CNN, TRANSFORMER))
    assert estimator.max_in_flight == 2
    assert sorted(estimator.calls) == [("CNN", "1GB"), ("Transformer", "10GB")]


def test_explicit_title():
    orchestrator = _orchestrator(FakeEstimator(_responses()))
    report = asyncio.run(orchestrator.compare(CNN, TRANSFORMER, title="Vision vs language"))
    assert report.title == "Vision vs language"


def test_failure_is_all_or_nothing():
    responses = _responses()
    responses["Transformer"] = RuntimeError("model overloaded")
    estimator = FakeEstimator(responses, delays={"CNN": 0, "Transformer": 0.02})
    store = _store()
    orchestrator = _orchestrator(estimator, store=store)

    with pytest.raises(PredictionFailure, match="Model B.*model overloaded"):
        asyncio.run(orchestrator.compare(CNN, TRANSFORMER))

    assert orchestrator.state is ComparisonState.IDLE
    assert orchestrator.current_report is None
    assert store.load_all() == []
    with pytest.raises(NoComparisonError):
        orchestrator.save_current()


def test_failure_clears_previous_report():
    responses = _responses()
    estimator = FakeEstimator(responses)
    orchestrator = _orchestrator(estimator)
    asyncio.run(orchestrator.compare(CNN, TRANSFORMER))

    responses["CNN"] = ValueError("bad input")
    with pytest.raises(PredictionFailure, match="Model A"):
        asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    assert orchestrator.current_report is None


def test_failure_is_chained():
    responses = _responses()
    cause = RuntimeError("quota exceeded")
    responses["CNN"] = cause
    orchestrator = _orchestrator(FakeEstimator(responses))
    with pytest.raises(PredictionFailure) as excinfo:
        asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    assert excinfo.value.__cause__ is cause


def test_state_transitions_are_published():
    orchestrator = _orchestrator(FakeEstimator(_responses()))
    seen = []
    orchestrator.subscribe(seen.append)
    asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    assert seen == [ComparisonState.COMPARING, ComparisonState.READY]


def test_failed_transitions_are_published():
    responses = _responses()
    responses["CNN"] = RuntimeError("boom")
    orchestrator = _orchestrator(FakeEstimator(responses))
    seen = []
    orchestrator.subscribe(seen.append)
    with pytest.raises(PredictionFailure):
        asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    assert seen == [ComparisonState.COMPARING, ComparisonState.IDLE]


def test_unsubscribe():
    orchestrator = _orchestrator(FakeEstimator(_responses()))
    seen = []
    unsubscribe = orchestrator.subscribe(seen.append)
    unsubscribe()
    asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    assert seen == []


def test_resubmit_while_comparing_is_rejected():
    orchestrator = _orchestrator(FakeEstimator(_responses()))

    async def scenario():
        first = asyncio.create_task(orchestrator.compare(CNN, TRANSFORMER))
        await asyncio.sleep(0)
        assert orchestrator.state is ComparisonState.COMPARING
        with pytest.raises(ComparisonInProgressError):
            await orchestrator.compare(CNN, TRANSFORMER)
        return await first

    report = asyncio.run(scenario())
    assert orchestrator.state is ComparisonState.READY
    assert orchestrator.current_report == report


def test_resubmit_after_ready():
    orchestrator = _orchestrator(FakeEstimator(_responses()))
    first = asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    second = asyncio.run(orchestrator.compare(TRANSFORMER, CNN))
    assert second.title == "Comparison: Transformer vs CNN"
    assert orchestrator.current_report == second
    assert first != second


def test_save_current():
    store = _store()
    orchestrator = _orchestrator(FakeEstimator(_responses()), store=store)
    asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    saved = orchestrator.save_current()
    assert saved.id == "report-1"
    assert store.load_all() == [saved]


def test_save_without_store():
    orchestrator = _orchestrator(FakeEstimator(_responses()))
    asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    with pytest.raises(StoreNotConfiguredError):
        orchestrator.save_current()


def test_export_does_not_save():
    store = _store()
    orchestrator = _orchestrator(FakeEstimator(_responses()), store=store)
    asyncio.run(orchestrator.compare(CNN, TRANSFORMER))

    csv_file = orchestrator.export_current_csv()
    json_file = orchestrator.export_current_json()

    assert csv_file.filename == "aura_model_comparison_report_2026-10-19.csv"
    assert csv_file.mime_type == "text/csv"
    assert csv_file.content.decode("utf-8").startswith("Report ID,export-1\n")
    assert json_file.filename == "aura_model_comparison_report_2026-10-19.json"
    assert b'"id": "export-2"' in json_file.content
    assert store.load_all() == []


def test_export_without_comparison():
    orchestrator = _orchestrator(FakeEstimator(_responses()))
    with pytest.raises(NoComparisonError):
        orchestrator.export_current_csv()
    with pytest.raises(NoComparisonError):
        orchestrator.export_current_json()


def test_primary_unit():
    orchestrator = _orchestrator(FakeEstimator(_responses()))
    assert orchestrator.primary_unit == "units"
    asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    assert orchestrator.primary_unit == "kWh"


def test_callable_estimator():
    requests = []

    async def call(request):
        requests.append(request)
        return {"predictedEnergyConsumption": "3.5 MWh", "confidenceLevel": "low", "visualizationType": "pie chart"}

    prediction = asyncio.run(CallableEstimator(call).predict("GPT", "500GB"))
    assert requests == [{"modelArchitecture": "GPT", "dataSize": "500GB"}]
    assert prediction.predicted_energy_consumption == "3.5 MWh"
    assert prediction.visualization_type == "pie chart"


def test_callable_estimator_bad_response_fails_comparison():
    async def call(request):
        return {"confidenceLevel": "low"}

    orchestrator = _orchestrator(CallableEstimator(call))
    with pytest.raises(PredictionFailure):
        asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    assert orchestrator.state is ComparisonState.IDLE


def test_cancelled_comparison_can_be_resubmitted():
    estimator = FakeEstimator(_responses(), delays={"CNN": 10, "Transformer": 10})
    orchestrator = _orchestrator(estimator)
    seen = []
    orchestrator.subscribe(seen.append)

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(asyncio.wait_for(orchestrator.compare(CNN, TRANSFORMER), 0.01))

    assert orchestrator.state is ComparisonState.IDLE
    assert orchestrator.current_report is None
    assert seen == [ComparisonState.COMPARING, ComparisonState.IDLE]

    estimator.delays = {}
    report = asyncio.run(orchestrator.compare(CNN, TRANSFORMER))
    assert orchestrator.state is ComparisonState.READY
    assert orchestrator.current_report == report


def test_base_model_presets_applied_before_prediction():
    responses = _responses()
    responses["CNN (ResNet-like)"] = responses["CNN"]
    estimator = FakeEstimator(responses)
    orchestrator = _orchestrator(estimator)
    resnet = ModelInput(selected_base_model="resnet50", architecture="my net", data_size="1GB")

    report = asyncio.run(orchestrator.compare(resnet, TRANSFORMER))

    assert ("CNN (ResNet-like)", "1GB") in estimator.calls
    assert report.model_a.architecture == "CNN (ResNet-like)"
    assert report.model_a.selected_framework == "tensorflow"
    assert report.model_a.selected_base_model == "resnet50"
    assert report.title == "Comparison: CNN (ResNet-like) vs Transformer"
