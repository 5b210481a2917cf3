from __future__ import annotations

import httpx

from packages.contracts.models import (
    ConvertRequest,
    ConvertResponse,
    GridContainer,
    GridResolution,
)


class LayoutApiClient:
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def _post(self, path: str, payload: dict) -> dict:
        with httpx.Client(timeout=self.timeout_seconds, transport=self.transport) as client:
            resp = client.post(f"{self.base_url}{path}", json=payload)
            resp.raise_for_status()
            return resp.json()

    def convert(self, req: ConvertRequest) -> ConvertResponse:
        return ConvertResponse.model_validate(self._post("/v1/convert", req.model_dump(mode="json")))

    def resolve_grid(self, container: GridContainer) -> GridResolution:
        return GridResolution.model_validate(self._post("/v1/grid/resolve", container.model_dump(mode="json")))
