"""Base model presets offered by the dashboard's model selector."""

from __future__ import annotations

from aura_report.report_data import ModelInput

# (substring of the base model id, architecture override, default framework)
_PRESETS = (
    ("resnet", "CNN (ResNet-like)", "tensorflow"),
    ("bert", "Transformer (BERT-like)", "pytorch"),
    ("gpt", "Transformer (GPT-like)", "pytorch"),
    ("skl_", None, "scikit-learn"),
)


def resolve_base_model(model: ModelInput) -> ModelInput:
    """Fill architecture and framework from the selected base model.

    A framework the user picked explicitly is kept. Custom models and
    unknown base model ids are returned unchanged.
    """
    for marker, architecture, framework in _PRESETS:
        if marker in model.selected_base_model:
            update = {}
            if architecture:
                update["architecture"] = architecture
            if model.selected_framework is None:
                update["selected_framework"] = framework
            return model.model_copy(update=update)
    return model
