"""
Chart Spec Builder - Turns extracted series into datasets and axes.
"""

import re
from collections.abc import Sequence
from datetime import datetime

import pandas as pd

from sensorchart.core.domain.chart import ChartConfig, SeriesConfig
from sensorchart.core.domain.errors import NoDataError
from sensorchart.core.domain.spec import (
    AxisTitle,
    CanvasSize,
    ChartSpec,
    DataPoint,
    DatasetSpec,
    LegendSpec,
    TickPolicy,
    TimeScale,
    TooltipSpec,
    XAxisSpec,
    YAxisSpec,
)
from sensorchart.core.services.axes import Bounds, resolve_bounds
from sensorchart.core.services.window import as_utc, window_start

NO_SERIES_DATA = "No valid data available for the chart."
X_AXIS_MAX_TICKS = 10

_UNIT_PATTERN = re.compile(r"\(([^)]+)\)")


def axis_slot_id(index: int, config: SeriesConfig) -> str:
    """Axis id from slot index and side; equal index and side share an axis."""
    slot = config.y_axis_index if config.y_axis_index is not None else index
    return f"yAxis-{slot}-{config.y_axis_position}"


def axis_unit(label: str) -> str | None:
    """First parenthesised part of an axis label, e.g. '%' for 'Humidity (%)'."""
    found = _UNIT_PATTERN.search(label)
    return found.group(1) if found else None


def build_x_axis(chart: ChartConfig, now: datetime) -> XAxisSpec:
    """Time axis spanning the display window, not the data's own range."""
    if chart.x_axis_auto_ticks:
        ticks = TickPolicy(auto_skip=True, max_ticks_limit=X_AXIS_MAX_TICKS)
    else:
        ticks = TickPolicy(auto_skip=False, step_size=chart.x_axis_tick_steps)

    return XAxisSpec(
        position=chart.x_axis_position,
        title=AxisTitle(display=chart.x_axis_label_show, text=chart.x_axis_label),
        ticks=ticks,
        time=TimeScale(display_formats={"hour": chart.x_axis_display_format}),
        min=window_start(now, chart.hours_to_display).isoformat(),
        max=as_utc(now).isoformat(),
    )


def build_y_axis(axis_id: str, config: SeriesConfig, bounds: Bounds) -> YAxisSpec:
    if config.y_axis_auto_ticks:
        ticks = TickPolicy(auto_skip=True)
    else:
        ticks = TickPolicy(auto_skip=False, step_size=config.y_axis_tick_steps)

    y_min, y_max = bounds
    return YAxisSpec(
        id=axis_id,
        display=config.y_axis_show,
        position=config.y_axis_position,
        title=AxisTitle(display=config.y_axis_label_show, text=config.y_axis_label),
        ticks=ticks,
        min=y_min,
        max=y_max,
        unit=axis_unit(config.y_axis_label),
    )


def build_dataset(axis_id: str, config: SeriesConfig, series: pd.DataFrame) -> DatasetSpec:
    points = [
        DataPoint(x=ts.isoformat(), y=float(y))
        for ts, y in zip(series["ds"], series["y"])
    ]
    return DatasetSpec(
        label=config.label or config.value_field,
        data=points,
        border_color=config.line_color,
        background_color=config.background_color,
        y_axis_id=axis_id,
        fill=config.fill,
        point_radius=config.point_radius,
        point_hover_radius=config.point_hover_radius,
    )


def build_chart_spec(
    chart: ChartConfig,
    series: Sequence[pd.DataFrame],
    now: datetime | None = None,
) -> ChartSpec:
    """
    Assemble the chart for one refresh cycle.

    Args:
        chart: Chart configuration (series configs in display order)
        series: Smoothed series, aligned with ``chart.series``
        now: End of the display window (default: current UTC time)

    Raises:
        NoDataError: if no series has a single point
    """
    now = as_utc(now)
    bounds = resolve_bounds(chart.series, series)

    y_axes: dict[str, YAxisSpec] = {}
    datasets = []
    for index, (config, frame) in enumerate(zip(chart.series, series)):
        axis_id = axis_slot_id(index, config)
        if axis_id not in y_axes:
            y_axes[axis_id] = build_y_axis(axis_id, config, bounds[index])
        if frame.empty:
            continue
        datasets.append(build_dataset(axis_id, config, frame))

    if not datasets:
        raise NoDataError(NO_SERIES_DATA)

    units = {axis_id: axis.unit for axis_id, axis in y_axes.items() if axis.unit}
    return ChartSpec(
        chart_id=chart.chart_id,
        title=chart.title,
        generated_at=now.to_pydatetime(),
        x_axis=build_x_axis(chart, now),
        y_axes=list(y_axes.values()),
        datasets=datasets,
        legend=LegendSpec(display=chart.legend_show, labels={"color": chart.legend_label_color}),
        tooltip=TooltipSpec(units=units),
        canvas=CanvasSize(width=chart.chart_width, height=chart.chart_height),
    )
