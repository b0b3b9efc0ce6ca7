from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from cwvariables.variables.types import MetricFindValue

ResolutionStatus = Literal[
    "ok",
    "missing_precondition",
    "invalid_filter",
    "provider_error",
    "unhandled",
]


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving one variable query.

    Every non-``ok`` status carries no options; the host only ever sees the
    option list, while the status and reason feed diagnostics.
    """

    status: ResolutionStatus
    options: list[MetricFindValue] = field(default_factory=list)
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def success(cls, options: list[MetricFindValue]) -> ResolutionResult:
        return cls(status="ok", options=options)

    @classmethod
    def failure(cls, status: ResolutionStatus, reason: str) -> ResolutionResult:
        return cls(status=status, reason=reason)
