"""The last-operation message channel of the cart manager."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    GOOD = "good"
    BAD = "bad"
    WARNING = "warning"


@dataclass(frozen=True)
class OperationResult:
    """Message and severity left behind by the most recent cart operation."""

    message: str
    severity: Severity = Severity.GOOD

    @property
    def ok(self) -> bool:
        return self.severity != Severity.BAD
