"""
Chart Spec Domain Models - The fully resolved output of a refresh cycle.

Field names are snake_case in Python and camelCase on export, matching the
option names a Chart.js renderer expects.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ChartModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


@dataclass(frozen=True)
class AxisDomain:
    """Shared numeric range of the auto-scale group."""

    min: float
    max: float


class DataPoint(_ChartModel):
    x: str  # ISO-8601 instant
    y: float


class AxisTitle(_ChartModel):
    display: bool = False
    text: str = ""


class TickPolicy(_ChartModel):
    """Auto ticks skip freely; fixed ticks use a step size."""

    auto_skip: bool = True
    step_size: float | None = None
    max_ticks_limit: int | None = None


class TimeScale(_ChartModel):
    unit: str = "hour"
    display_formats: dict[str, str] = Field(default_factory=lambda: {"hour": "HH:mm"})
    tooltip_format: str = "dd.MM.yyyy HH:mm:ss"


class XAxisSpec(_ChartModel):
    type: Literal["time"] = "time"
    position: Literal["bottom", "top"] = "bottom"
    title: AxisTitle = Field(default_factory=AxisTitle)
    ticks: TickPolicy = Field(default_factory=TickPolicy)
    time: TimeScale = Field(default_factory=TimeScale)
    min: str
    max: str


class YAxisSpec(_ChartModel):
    id: str
    type: Literal["linear"] = "linear"
    display: bool = True
    position: Literal["left", "right"] = "left"
    title: AxisTitle = Field(default_factory=AxisTitle)
    ticks: TickPolicy = Field(default_factory=TickPolicy)
    min: float | None = None
    max: float | None = None
    unit: str | None = None  # tooltip suffix, e.g. "°C"


class DatasetSpec(_ChartModel):
    label: str
    data: list[DataPoint]
    border_color: str
    background_color: str
    y_axis_id: str = Field(alias="yAxisID")
    tension: float = 0.1
    fill: bool = False
    point_radius: float = 1
    point_hover_radius: float = 5


class LegendSpec(_ChartModel):
    display: bool = True
    labels: dict[str, str] = Field(default_factory=lambda: {"color": "#eee"})


class TooltipSpec(_ChartModel):
    """Label is the value rounded to `value_decimals`, followed by its axis unit."""

    value_decimals: int = 1
    title_format: str = "dd.MM.yyyy HH:mm:ss"
    units: dict[str, str] = Field(default_factory=dict)  # axis id -> unit


class CanvasSize(_ChartModel):
    width: int = 600
    height: int = 300


class ChartSpec(_ChartModel):
    """Datasets plus axis definitions for one refresh cycle."""

    chart_id: str
    title: str
    generated_at: datetime
    x_axis: XAxisSpec
    y_axes: list[YAxisSpec]
    datasets: list[DatasetSpec]
    legend: LegendSpec = Field(default_factory=LegendSpec)
    tooltip: TooltipSpec = Field(default_factory=TooltipSpec)
    canvas: CanvasSize = Field(default_factory=CanvasSize)

    def y_axis(self, axis_id: str) -> YAxisSpec | None:
        for axis in self.y_axes:
            if axis.id == axis_id:
                return axis
        return None

    def to_chartjs(self) -> dict[str, Any]:
        """
        Export as a Chart.js line chart configuration.

        Axis units travel in `options.plugins.tooltip.units` for the label
        callback; `canvas` is the container size in pixels.
        """
        scales: dict[str, Any] = {
            "x": self.x_axis.model_dump(by_alias=True, exclude_none=True),
        }
        for axis in self.y_axes:
            scales[axis.id] = axis.model_dump(
                by_alias=True, exclude_none=True, exclude={"id", "unit"}
            )

        return {
            "type": "line",
            "data": {
                "datasets": [d.model_dump(by_alias=True) for d in self.datasets],
            },
            "options": {
                "responsive": True,
                "maintainAspectRatio": False,
                "interaction": {"mode": "index", "intersect": False},
                "plugins": {
                    "title": {"display": False},
                    "legend": self.legend.model_dump(by_alias=True),
                    "tooltip": self.tooltip.model_dump(by_alias=True),
                },
                "scales": scales,
            },
            "canvas": self.canvas.model_dump(by_alias=True),
        }
