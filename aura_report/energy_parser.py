"""Energy value parser: pulls a number and a unit out of free-text estimates.

Estimates come from a language model, so there is no guaranteed format.
Parsing never fails; text without a number yields 0 and text without a
unit yields the configured default unit.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from aura_report.config import settings

_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]+)?")
_NON_UNIT_RE = re.compile(r"[0-9.,\s]")


@dataclass(frozen=True)
class ParsedEnergy:
    """Numeric magnitude and unit extracted from an estimate."""

    value: float = 0.0
    unit: str = settings.default_unit


def parse_energy_value(text: Optional[str]) -> ParsedEnergy:
    """Parse text such as ``"150 kWh"`` into ``ParsedEnergy(150.0, "kWh")``.

    The value is the first decimal number in the text. The unit is whatever
    remains once every digit, dot, comma and whitespace character is removed.
    """
    text = text or ""
    match = _NUMBER_RE.search(text)
    value = float(match.group(0)) if match else 0.0
    unit = _NON_UNIT_RE.sub("", text) or settings.default_unit
    return ParsedEnergy(value=value, unit=unit)
