"""
Result Domain Models - Outcome of a single refresh cycle.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from sensorchart.core.domain.spec import ChartSpec

RefreshStatus = Literal["ready", "no_data", "error"]
ErrorKind = Literal["retrieval", "processing"]


@dataclass
class RefreshResult:
    """
    Result of a refresh cycle.

    Exactly one of the states applies:
    - ready: ``spec`` holds the chart to render
    - no_data: nothing to draw, ``reason`` says why
    - error: retrieval or processing failed, ``reason`` holds the message
    """

    chart_id: str
    status: RefreshStatus
    generated_at: datetime
    spec: ChartSpec | None = None
    reason: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def ready(cls, spec: ChartSpec) -> "RefreshResult":
        return cls(chart_id=spec.chart_id, status="ready", generated_at=spec.generated_at, spec=spec)

    @classmethod
    def no_data(cls, chart_id: str, generated_at: datetime, reason: str) -> "RefreshResult":
        return cls(chart_id=chart_id, status="no_data", generated_at=generated_at, reason=reason)

    @classmethod
    def failed(
        cls, chart_id: str, generated_at: datetime, kind: ErrorKind, reason: str
    ) -> "RefreshResult":
        return cls(
            chart_id=chart_id,
            status="error",
            generated_at=generated_at,
            reason=reason,
            error_kind=kind,
        )

    @property
    def ok(self) -> bool:
        return self.status == "ready"

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view for the API."""
        return {
            "chart_id": self.chart_id,
            "status": self.status,
            "generated_at": self.generated_at.isoformat(),
            "reason": self.reason,
            "error_kind": self.error_kind,
            "chart": self.spec.to_chartjs() if self.spec is not None else None,
        }
