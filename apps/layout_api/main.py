from __future__ import annotations

from fastapi import FastAPI

from apps.layout_api.service import LayoutService
from packages.contracts.logging_utils import configure_logging
from packages.contracts.models import (
    AreaRequest,
    AreaResponse,
    ConvertRequest,
    ConvertResponse,
    GridContainer,
    GridResolution,
    TrackRequest,
    TrackResponse,
)

configure_logging()


def create_app(service: LayoutService | None = None) -> FastAPI:
    app = FastAPI(title="Layer Layout API", version="0.1.0")
    service = service or LayoutService()

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/v1/convert", response_model=ConvertResponse)
    def convert(req: ConvertRequest) -> ConvertResponse:
        return service.convert(req)

    @app.post("/v1/grid/tracks", response_model=TrackResponse)
    def tracks(req: TrackRequest) -> TrackResponse:
        return service.tracks(req)

    @app.post("/v1/grid/areas", response_model=AreaResponse)
    def areas(req: AreaRequest) -> AreaResponse:
        return service.areas(req)

    @app.post("/v1/grid/resolve", response_model=GridResolution)
    def resolve(container: GridContainer) -> GridResolution:
        return service.resolve(container)

    return app


app = create_app()
