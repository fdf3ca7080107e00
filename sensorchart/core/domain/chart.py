"""
Chart Domain Model - Configuration for a chart session and its series.

Uses Pydantic for validation so YAML chart definitions fail fast on load.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SeriesConfig(BaseModel):
    """Configuration for one line of a chart."""

    model_config = ConfigDict(frozen=True)

    # --- Data ---
    value_field: str  # record key holding the measurement
    label: str = ""

    # --- Styling (passed through to the renderer) ---
    line_color: str = "rgb(255, 99, 132)"
    background_color: str = "rgba(255, 99, 132, 0.2)"
    fill: bool = False
    point_radius: float = 1
    point_hover_radius: float = 5

    # --- Smoothing ---
    smoothing: int = Field(default=0, ge=0)  # moving-average radius in samples

    # --- Y Axis ---
    y_axis_auto_scale: bool = True
    y_axis_min: float | None = None
    y_axis_max: float | None = None
    y_axis_show: bool = True
    y_axis_position: Literal["left", "right"] = "left"
    y_axis_index: int | None = None  # share an axis by giving series the same index and side
    y_axis_label: str = ""
    y_axis_label_show: bool = False
    y_axis_auto_ticks: bool = True
    y_axis_tick_steps: float | None = None


class ChartConfig(BaseModel):
    """
    Complete chart session configuration.

    One ChartConfig drives one ChartSession: where the records come from,
    how often they are refreshed and how the time axis is laid out.
    """

    model_config = ConfigDict(frozen=True)

    # --- Identity ---
    chart_id: str
    title: str = "Chart Title"

    # --- Data Source ---
    data_url: str = Field(min_length=1)  # http(s) URL or local file path
    update_interval: float = Field(default=60.0, gt=0)  # seconds

    # --- Time Window ---
    hours_to_display: float = Field(default=24.0, gt=0)
    max_data_points: int | None = Field(default=None, ge=0)

    # --- Timestamps ---
    x_data_id: str = "timestamp"
    x_data_time_format: str | None = None  # any value enables the fixed layout matchers
    timezone: str = "UTC"  # zone for timestamps without offset

    # --- X Axis ---
    x_axis_display_format: str = "HH:mm"
    x_axis_position: Literal["bottom", "top"] = "bottom"
    x_axis_label: str = "Record Time"
    x_axis_label_show: bool = False
    x_axis_auto_ticks: bool = True
    x_axis_tick_steps: float = 1

    # --- Canvas (passed through to the renderer) ---
    chart_width: int = 600
    chart_height: int = 300

    # --- Legend ---
    legend_show: bool = True
    legend_label_color: str = "#eee"

    # --- Series ---
    series: list[SeriesConfig] = Field(min_length=1)
