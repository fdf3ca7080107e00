"""
ChartConfigStore Port - Interface for loading chart configurations.

Implementations can be file-based (YAML) or anything else that yields
validated ChartConfig objects.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sensorchart.core.domain.chart import ChartConfig


class ChartConfigStore(ABC):
    """
    Abstract interface for chart configuration storage.

    Implementations:
    - YamlChartStore: File-based configuration
    """

    @abstractmethod
    async def list_charts(self) -> list["ChartConfig"]:
        """
        List all configured charts.

        Returns:
            List of ChartConfig objects
        """
        ...

    @abstractmethod
    async def get_chart(self, chart_id: str) -> "ChartConfig | None":
        """
        Get a specific chart by id.

        Args:
            chart_id: Chart identifier

        Returns:
            ChartConfig if found, None otherwise
        """
        ...
