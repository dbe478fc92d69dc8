"""Package configuration."""

from __future__ import annotations

from dataclasses import dataclass
import os


@dataclass(frozen=True)
class Settings:
    storage_key: str = "auraSavedReports"
    export_prefix: str = "aura_model_comparison_report"
    storage_path: str = os.getenv("AURA_REPORTS_PATH", "")
    default_unit: str = "units"
    default_base_model: str = "Custom"


settings = Settings()
