"""Exception hierarchy for the comparison report subsystem."""

from __future__ import annotations


class AuraReportError(Exception):
    """Base class for every error raised by aura_report."""


class IncompleteInputError(AuraReportError):
    """A report was requested before both predictions completed."""


class PredictionFailure(AuraReportError):
    """One of the estimator calls of a comparison failed."""


class ComparisonInProgressError(AuraReportError):
    """A comparison was submitted while another one is still running."""


class NoComparisonError(AuraReportError):
    """Save or export was requested without a ready comparison."""


class StoreNotConfiguredError(AuraReportError):
    """Save was requested on an orchestrator that has no report store."""


class StorageCorruptionError(AuraReportError):
    """Persisted report collection could not be decoded.

    Raised and recovered inside ReportStore; callers never see it.
    """
