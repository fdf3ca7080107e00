import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request

from sensorchart.adapters.config.settings_loader import load_settings
from sensorchart.adapters.config.yaml_store import YamlChartStore
from sensorchart.adapters.sources.factory import build_record_source
from sensorchart.core.domain.settings import SystemSettings
from sensorchart.core.services.session import ChartSession, SessionRegistry

VERSION = "0.1.0"

# Configuration (Load from YAML with Env Overrides)
settings = load_settings()

# Logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def build_registry(settings: SystemSettings) -> SessionRegistry:
    """One session per chart defined in the charts file."""
    store = YamlChartStore(settings.charts_file, default_timezone=settings.default_timezone)
    registry = SessionRegistry()
    for chart in await store.list_charts():
        source = build_record_source(chart.data_url, timeout=settings.request_timeout)
        registry.add(ChartSession(chart, source))
    logger.info(f"Loaded {len(registry)} charts from {settings.charts_file}")
    return registry


def create_app(registry: SessionRegistry | None = None, settings: SystemSettings = settings) -> FastAPI:
    """
    Build the API. Without a registry, charts are loaded from settings on startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.registry is None:
            app.state.registry = await build_registry(settings)
        app.state.registry.start_all()
        yield
        await app.state.registry.stop_all()

    app = FastAPI(title="SensorChart", version=VERSION, lifespan=lifespan)
    app.state.registry = registry

    def _session(request: Request, chart_id: str) -> ChartSession:
        registry = request.app.state.registry
        session = registry.get(chart_id) if registry is not None else None
        if session is None:
            raise HTTPException(status_code=404, detail=f"Chart '{chart_id}' not found")
        return session

    @app.get("/health")
    def health_check():
        return {"status": "ok", "version": VERSION}

    @app.get("/charts")
    def list_charts(request: Request):
        registry = request.app.state.registry or SessionRegistry()
        return [
            {
                "chart_id": session.chart_id,
                "title": session.chart.title,
                "status": session.latest.status if session.latest else "pending",
                "running": session.running,
            }
            for session in registry
        ]

    @app.get("/charts/{chart_id}")
    def get_chart(chart_id: str, request: Request):
        """
        Latest result of a chart; 'pending' until the first refresh lands.
        """
        session = _session(request, chart_id)
        if session.latest is None:
            return {"chart_id": chart_id, "status": "pending"}
        return session.latest.to_dict()

    @app.post("/charts/{chart_id}/refresh")
    async def refresh_chart(chart_id: str, request: Request):
        session = _session(request, chart_id)
        try:
            result = await session.refresh()
        except RuntimeError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return result.to_dict()

    @app.post("/charts/{chart_id}/suspend")
    async def suspend_chart(chart_id: str, request: Request):
        session = _session(request, chart_id)
        await session.suspend()
        return {"chart_id": chart_id, "running": session.running}

    @app.post("/charts/{chart_id}/resume")
    async def resume_chart(chart_id: str, request: Request):
        session = _session(request, chart_id)
        try:
            await session.resume()
        except RuntimeError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return {"chart_id": chart_id, "running": session.running}

    return app


app = create_app()
