"""Aura Report: energy comparison reports for pairs of ML models."""

__version__ = "0.1.0"

from aura_report.builder import build_report  # noqa: F401
from aura_report.energy_parser import ParsedEnergy, parse_energy_value  # noqa: F401
from aura_report.generator import ComparisonOrchestrator, ComparisonState  # noqa: F401
from aura_report.presets import resolve_base_model  # noqa: F401
from aura_report.report_data import ModelInput, ReportDraft, SavedReport  # noqa: F401
from aura_report.store import ReportStore  # noqa: F401
