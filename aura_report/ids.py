"""Report identifier generators."""

from __future__ import annotations

import itertools
import uuid
from typing import Protocol


class IdGenerator(Protocol):
    def next(self) -> str: ...


class UuidIdGenerator:
    """Random UUID4 identifiers; collisions are treated as impossible."""

    def next(self) -> str:
        return str(uuid.uuid4())


class SequentialIdGenerator:
    """Deterministic ``<prefix><n>`` identifiers, for tests and replays."""

    def __init__(self, prefix: str = "report-", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def next(self) -> str:
        return f"{self.prefix}{next(self._counter)}"
