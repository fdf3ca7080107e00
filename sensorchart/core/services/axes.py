"""
Axis Reconciler - Resolves the numeric range of every Y axis.

All auto-scaling series share one global domain, whatever side or slot
their axes sit on; the others keep their configured bounds.
"""

from collections.abc import Sequence

import pandas as pd

from sensorchart.core.domain.chart import SeriesConfig
from sensorchart.core.domain.spec import AxisDomain

Bounds = tuple[float | None, float | None]


def shared_domain(
    configs: Sequence[SeriesConfig],
    series: Sequence[pd.DataFrame],
) -> AxisDomain | None:
    """
    Min/max over the values of every auto-scaling series.

    Returns None when no auto-scaling series has any value.
    """
    values = [
        frame["y"]
        for config, frame in zip(configs, series)
        if config.y_axis_auto_scale and not frame.empty
    ]
    if not values:
        return None
    combined = pd.concat(values, ignore_index=True)
    return AxisDomain(min=float(combined.min()), max=float(combined.max()))


def resolve_bounds(
    configs: Sequence[SeriesConfig],
    series: Sequence[pd.DataFrame],
) -> list[Bounds]:
    """
    (min, max) for each series, in config order.

    Auto-scaling series take the shared domain, or fall back to their own
    configured bounds when the domain is undefined.
    """
    if len(configs) != len(series):
        raise ValueError(f"Got {len(series)} series for {len(configs)} configs")

    domain = shared_domain(configs, series)
    bounds = []
    for config in configs:
        if config.y_axis_auto_scale and domain is not None:
            bounds.append((domain.min, domain.max))
        else:
            bounds.append((config.y_axis_min, config.y_axis_max))
    return bounds
