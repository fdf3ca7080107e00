"""
Domain errors raised across the refresh pipeline.
"""


class SensorChartError(Exception):
    """Base class for sensorchart errors."""


class RetrievalError(SensorChartError):
    """Raw records could not be fetched, read or decoded."""


class NoDataError(SensorChartError):
    """A refresh produced nothing to draw."""
