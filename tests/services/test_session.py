"""
Tests for ChartSession and SessionRegistry.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from sensorchart.core.domain.errors import RetrievalError
from sensorchart.core.ports.record_source import RecordSource
from sensorchart.core.services.session import ChartSession, SessionRegistry

RECORDS = [{"timestamp": "2024-01-01T11:00:00Z", "v": 1}]


@pytest.fixture
def mock_source():
    source = MagicMock(spec=RecordSource)
    source.fetch = AsyncMock(return_value=RECORDS)
    source.close = AsyncMock()
    return source


async def _wait_for(condition, timeout=1.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        if loop.time() > deadline:
            raise AssertionError("condition not reached")
        await asyncio.sleep(0.005)


@pytest.mark.asyncio
async def test_refresh_applies_result_and_notifies(mock_source, make_chart, now):
    callback = MagicMock()
    session = ChartSession(make_chart(), mock_source, on_update=callback)

    result = await session.refresh(now=now)

    assert result.ok
    assert session.latest is result
    callback.assert_called_once_with(result)


@pytest.mark.asyncio
async def test_refresh_awaits_async_callback(mock_source, make_chart, now):
    callback = AsyncMock()
    session = ChartSession(make_chart(), mock_source, on_update=callback)

    result = await session.refresh(now=now)

    callback.assert_awaited_once_with(result)


@pytest.mark.asyncio
async def test_suspend_discards_in_flight_refresh(mock_source, make_chart, now):
    started = asyncio.Event()
    release = asyncio.Event()

    async def slow_fetch():
        started.set()
        await release.wait()
        return RECORDS

    mock_source.fetch.side_effect = slow_fetch
    callback = MagicMock()
    session = ChartSession(make_chart(), mock_source, on_update=callback)

    pending = asyncio.create_task(session.refresh(now=now))
    await started.wait()
    await session.suspend()
    release.set()
    result = await pending

    assert result.ok
    assert session.latest is None
    callback.assert_not_called()


@pytest.mark.asyncio
async def test_refreshes_never_overlap(mock_source, make_chart, now):
    active = 0
    peak = 0

    async def tracked_fetch():
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return RECORDS

    mock_source.fetch.side_effect = tracked_fetch
    session = ChartSession(make_chart(), mock_source)

    await asyncio.gather(*(session.refresh(now=now) for _ in range(3)))

    assert peak == 1
    assert mock_source.fetch.await_count == 3


@pytest.mark.asyncio
async def test_start_refreshes_periodically_until_stopped(mock_source, make_chart):
    session = ChartSession(make_chart(update_interval=0.01), mock_source)

    session.start()
    await _wait_for(lambda: mock_source.fetch.await_count >= 2)

    assert session.running
    assert session.latest is not None

    await session.stop()

    assert not session.running
    mock_source.close.assert_awaited_once()
    calls = mock_source.fetch.await_count
    await asyncio.sleep(0.03)
    assert mock_source.fetch.await_count == calls


@pytest.mark.asyncio
async def test_start_twice_keeps_one_task(mock_source, make_chart):
    session = ChartSession(make_chart(update_interval=60), mock_source)

    session.start()
    task = session._task
    session.start()

    assert session._task is task
    await session.stop()


@pytest.mark.asyncio
async def test_failing_callback_does_not_stop_schedule(mock_source, make_chart):
    callback = MagicMock(side_effect=ValueError("render failed"))
    session = ChartSession(make_chart(update_interval=0.01), mock_source, on_update=callback)

    session.start()
    await _wait_for(lambda: callback.call_count >= 2)

    assert session.running
    await session.stop()


@pytest.mark.asyncio
async def test_retrieval_failure_becomes_error_result(mock_source, make_chart, now):
    mock_source.fetch.side_effect = RetrievalError("HTTP error! status: 404")
    session = ChartSession(make_chart(), mock_source)

    result = await session.refresh(now=now)

    assert result.status == "error"
    assert session.latest is result


@pytest.mark.asyncio
async def test_suspend_then_resume(mock_source, make_chart):
    session = ChartSession(make_chart(update_interval=60), mock_source)

    session.start()
    await _wait_for(lambda: session.latest is not None)
    await session.suspend()
    assert not session.running

    await session.resume()
    await _wait_for(lambda: mock_source.fetch.await_count >= 2)
    assert session.running
    await session.stop()


@pytest.mark.asyncio
async def test_start_after_stop_raises(mock_source, make_chart):
    session = ChartSession(make_chart(), mock_source)
    await session.stop()

    with pytest.raises(RuntimeError):
        session.start()


@pytest.mark.asyncio
async def test_stopped_session_rejects_manual_refresh(mock_source, make_chart, now):
    session = ChartSession(make_chart(), mock_source)
    await session.stop()

    with pytest.raises(RuntimeError):
        await session.refresh(now=now)

    mock_source.fetch.assert_not_awaited()
    assert session.latest is None


@pytest.mark.asyncio
async def test_resume_while_running_refreshes_now(mock_source, make_chart):
    session = ChartSession(make_chart(update_interval=60), mock_source)

    session.start()
    await _wait_for(lambda: mock_source.fetch.await_count == 1)
    task = session._task

    await session.resume()

    assert mock_source.fetch.await_count == 2
    assert session._task is task
    await session.stop()


def test_registry_rejects_duplicate_ids(mock_source, make_chart):
    registry = SessionRegistry([ChartSession(make_chart(), mock_source)])

    with pytest.raises(ValueError):
        registry.add(ChartSession(make_chart(), mock_source))

    assert len(registry) == 1
    assert registry.get("test-chart") is not None
    assert registry.get("missing") is None


@pytest.mark.asyncio
async def test_registry_start_and_stop_all(mock_source, make_chart):
    registry = SessionRegistry([
        ChartSession(make_chart(chart_id="a", update_interval=60), mock_source),
        ChartSession(make_chart(chart_id="b", update_interval=60), mock_source),
    ])

    registry.start_all()
    assert all(session.running for session in registry)

    await registry.stop_all()
    assert not any(session.running for session in registry)
    assert mock_source.close.await_count == 2
