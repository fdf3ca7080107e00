"""
YAML Chart Store Adapter - File-based chart configuration.

Loads chart definitions from the top-level ``charts`` list of a YAML file.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from sensorchart.core.domain.chart import ChartConfig
from sensorchart.core.ports.config_store import ChartConfigStore

logger = logging.getLogger(__name__)


class YamlChartStore(ChartConfigStore):
    """
    Config store that reads charts from a YAML file.
    """

    def __init__(self, config_path: str | Path, default_timezone: str = "UTC"):
        self.config_path = Path(config_path)
        self.default_timezone = default_timezone
        self._charts: dict[str, ChartConfig] = {}
        self._loaded = False

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self._load_charts()
            self._loaded = True

    def _load_charts(self) -> None:
        if not self.config_path.exists():
            logger.warning(f"Chart definitions file not found: {self.config_path}")
            return

        with open(self.config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        for chart_data in data.get("charts") or []:
            if not isinstance(chart_data, dict):
                logger.error(f"Chart entry must be a mapping, got: {chart_data!r}")
                continue
            chart_data = {"timezone": self.default_timezone, **chart_data}
            try:
                chart = ChartConfig(**chart_data)
            except ValidationError as e:
                logger.error(f"Error loading chart '{chart_data.get('chart_id', '?')}': {e}")
                continue
            if chart.chart_id in self._charts:
                logger.error(f"Duplicate chart id '{chart.chart_id}' ignored")
                continue
            self._charts[chart.chart_id] = chart

    async def list_charts(self) -> list[ChartConfig]:
        self._ensure_loaded()
        return list(self._charts.values())

    async def get_chart(self, chart_id: str) -> ChartConfig | None:
        self._ensure_loaded()
        return self._charts.get(chart_id)
