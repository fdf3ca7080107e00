"""
Shared fixtures for SensorChart tests.
"""
import pandas as pd
import pytest

from sensorchart.core.domain.chart import ChartConfig, SeriesConfig

NOW = pd.Timestamp("2024-01-01 12:00:00", tz="UTC")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_chart():
    """Factory for chart configs with one series on field 'v' by default."""
    def _make(series=None, **overrides):
        data = {
            "chart_id": "test-chart",
            "data_url": "sensors.json",
            "series": series or [SeriesConfig(value_field="v", label="Value")],
        }
        data.update(overrides)
        return ChartConfig(**data)
    return _make
