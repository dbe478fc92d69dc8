"""Estimator boundary: the language-model call that predicts energy use.

The prediction itself lives outside this package. Anything that can answer
``{"modelArchitecture", "dataSize"}`` with ``{"predictedEnergyConsumption",
"confidenceLevel", "visualizationType"}`` can back a comparison.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Mapping, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EnergyPrediction(BaseModel):
    """Raw estimator response for a single model."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    predicted_energy_consumption: str
    confidence_level: str
    visualization_type: str = ""


class EnergyEstimator(ABC):
    """Abstract base class for energy prediction backends."""

    @abstractmethod
    async def predict(self, model_architecture: str, data_size: str) -> EnergyPrediction:
        """Predict the energy consumption of one model.

        May raise any exception; the orchestrator treats it as a failed
        prediction.
        """


PredictionCall = Callable[[dict[str, str]], Awaitable[Union[EnergyPrediction, Mapping[str, Any]]]]


class CallableEstimator(EnergyEstimator):
    """Adapts an async request/response callable to EnergyEstimator."""

    def __init__(self, call: PredictionCall) -> None:
        self.call = call

    async def predict(self, model_architecture: str, data_size: str) -> EnergyPrediction:
        response = await self.call({"modelArchitecture": model_architecture, "dataSize": data_size})
        if isinstance(response, EnergyPrediction):
            return response
        return EnergyPrediction.model_validate(response)
