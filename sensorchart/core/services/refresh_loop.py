"""
Refresh Loop Service - The core engine of SensorChart.

This service runs one fetch-process-build cycle for a chart:
1. Fetch raw records from the source
2. Normalize timestamps and apply the display window
3. Extract and smooth each series
4. Reconcile axis ranges and build the ChartSpec
"""

import logging
from datetime import datetime

import pandas as pd

from sensorchart.core.domain.chart import ChartConfig
from sensorchart.core.domain.errors import NoDataError, RetrievalError
from sensorchart.core.domain.records import RawRecord
from sensorchart.core.domain.result import RefreshResult
from sensorchart.core.ports.record_source import RecordSource
from sensorchart.core.services.chart_builder import build_chart_spec
from sensorchart.core.services.series import extract_series, smooth_series
from sensorchart.core.services.timestamps import parse_records
from sensorchart.core.services.window import as_utc, filter_window

logger = logging.getLogger(__name__)

NO_WINDOW_DATA = "No valid records in the display window."


class RefreshLoop:
    """
    Core service that executes a single refresh iteration for a chart.
    """

    def __init__(self, source: RecordSource):
        """
        Initialize the refresh loop.

        Args:
            source: Port to retrieve raw sensor records
        """
        self.source = source

    async def run_refresh(self, chart: ChartConfig, now: datetime | None = None) -> RefreshResult:
        """
        Execute one refresh cycle.

        Retrieval is the only awaited step; processing runs to completion
        once the payload has arrived.

        Args:
            chart: Chart configuration
            now: End of the display window (default: current UTC time)

        Returns:
            RefreshResult in the ready, no_data or error state
        """
        try:
            raw_records = await self.source.fetch()
        except RetrievalError as e:
            logger.error(f"[{chart.chart_id}] Error fetching sensor data: {e}")
            return RefreshResult.failed(chart.chart_id, as_utc(now).to_pydatetime(), "retrieval", str(e))

        # Window is anchored after the fetch so slow sources do not shift it
        now = as_utc(now)
        try:
            return self.process(chart, raw_records, now)
        except Exception as e:
            logger.exception(f"[{chart.chart_id}] Error processing sensor data")
            return RefreshResult.failed(chart.chart_id, now.to_pydatetime(), "processing", str(e))

    def process(
        self,
        chart: ChartConfig,
        raw_records: list[RawRecord],
        now: datetime | None = None,
    ) -> RefreshResult:
        """
        Run the synchronous part of the cycle on already-fetched records.
        """
        now = as_utc(now)
        generated_at = now.to_pydatetime()

        # 1. Normalize timestamps
        parsed = parse_records(
            raw_records,
            time_field=chart.x_data_id,
            format_hint=chart.x_data_time_format,
            tz=chart.timezone,
        )
        invalid = sum(1 for r in parsed if not r.is_valid)
        if invalid:
            logger.warning(
                f"[{chart.chart_id}] {invalid} entries skipped due to missing/invalid '{chart.x_data_id}'"
            )

        # 2. Apply the display window
        records = filter_window(
            parsed,
            hours=chart.hours_to_display,
            max_points=chart.max_data_points,
            now=now,
        )
        logger.info(f"[{chart.chart_id}] Sensor data filtered. Total valid entries: {len(records)}")
        if not records:
            logger.warning(f"[{chart.chart_id}] {NO_WINDOW_DATA}")
            return RefreshResult.no_data(chart.chart_id, generated_at, NO_WINDOW_DATA)

        # 3. Extract and smooth each series
        series: list[pd.DataFrame] = []
        for config in chart.series:
            frame = smooth_series(extract_series(records, config), config.smoothing)
            if config.smoothing and not frame.empty:
                logger.debug(
                    f"[{chart.chart_id}] Applied smoothing with radius {config.smoothing} to '{config.value_field}'"
                )
            series.append(frame)

        # 4. Reconcile axes and build
        try:
            spec = build_chart_spec(chart, series, now=now)
        except NoDataError as e:
            logger.warning(f"[{chart.chart_id}] {e}")
            return RefreshResult.no_data(chart.chart_id, generated_at, str(e))

        logger.info(f"[{chart.chart_id}] Chart built with {len(spec.datasets)} datasets")
        return RefreshResult.ready(spec)
