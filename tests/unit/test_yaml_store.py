import logging

import pytest

from sensorchart.adapters.config.yaml_store import YamlChartStore

CHARTS_YAML = """
charts:
  - chart_id: "livingroom"
    data_url: "http://192.168.1.20/sensors.json"
    series:
      - value_field: "temperature"
        smoothing: 2
      - value_field: "humidity"
        y_axis_position: "right"
  - chart_id: "cellar"
    data_url: "cellar.json"
    timezone: "Europe/Berlin"
    series:
      - value_field: "temperature"
"""


@pytest.fixture
def charts_file(tmp_path):
    path = tmp_path / "charts.yaml"
    path.write_text(CHARTS_YAML)
    return path


@pytest.mark.asyncio
async def test_list_charts(charts_file):
    store = YamlChartStore(charts_file)

    charts = await store.list_charts()

    assert [c.chart_id for c in charts] == ["livingroom", "cellar"]
    assert charts[0].series[0].smoothing == 2
    assert charts[0].series[1].y_axis_position == "right"


@pytest.mark.asyncio
async def test_get_chart(charts_file):
    store = YamlChartStore(charts_file)

    chart = await store.get_chart("cellar")

    assert chart is not None
    assert chart.data_url == "cellar.json"
    assert await store.get_chart("missing") is None


@pytest.mark.asyncio
async def test_default_timezone_applies_unless_set(charts_file):
    store = YamlChartStore(charts_file, default_timezone="America/New_York")

    livingroom = await store.get_chart("livingroom")
    cellar = await store.get_chart("cellar")

    assert livingroom.timezone == "America/New_York"
    assert cellar.timezone == "Europe/Berlin"


@pytest.mark.asyncio
async def test_missing_file_gives_no_charts(tmp_path, caplog):
    store = YamlChartStore(tmp_path / "absent.yaml")

    with caplog.at_level(logging.WARNING):
        assert await store.list_charts() == []

    assert "not found" in caplog.text


@pytest.mark.asyncio
async def test_invalid_entries_are_skipped(tmp_path, caplog):
    path = tmp_path / "charts.yaml"
    path.write_text("""
charts:
  - chart_id: "no-series"
    data_url: "a.json"
    series: []
  - "just a string"
  - chart_id: "ok"
    data_url: "b.json"
    series:
      - value_field: "v"
  - chart_id: "ok"
    data_url: "c.json"
    series:
      - value_field: "w"
""")
    store = YamlChartStore(path)

    with caplog.at_level(logging.ERROR):
        charts = await store.list_charts()

    assert [c.chart_id for c in charts] == ["ok"]
    assert charts[0].data_url == "b.json"
    assert "no-series" in caplog.text
    assert "Duplicate chart id 'ok'" in caplog.text


@pytest.mark.asyncio
async def test_empty_file(tmp_path):
    path = tmp_path / "charts.yaml"
    path.write_text("")

    assert await YamlChartStore(path).list_charts() == []
