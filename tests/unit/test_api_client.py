from __future__ import annotations

import json

import httpx
import pytest

from apps.converter.client import LayoutApiClient
from packages.contracts.models import ConvertRequest, GridContainer, LayerNode


def _transport(seen: list[httpx.Request], body: dict, status: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


def test_convert_posts_request_and_parses_response() -> None:
    seen: list[httpx.Request] = []
    body = {"root": {"id": "r"}, "diagnostics": [], "trace_id": "t-9"}
    client = LayoutApiClient("http://layout.test/", transport=_transport(seen, body))

    resp = client.convert(ConvertRequest(root=LayerNode(id="r")))

    assert resp.trace_id == "t-9"
    assert str(seen[0].url) == "http://layout.test/v1/convert"
    assert json.loads(seen[0].content)["root"]["id"] == "r"


def test_resolve_grid_parses_resolution() -> None:
    seen: list[httpx.Request] = []
    body = {
        "strategy": "rows",
        "columns": None,
        "rows": None,
        "areas": None,
        "area_map": None,
        "assigned": [[]],
        "bounds": [{"start": 0, "end": 50}],
    }
    client = LayoutApiClient("http://layout.test", transport=_transport(seen, body))

    resolution = client.resolve_grid(GridContainer(total_width=50, total_height=10))

    assert resolution.strategy == "rows"
    assert seen[0].url.path == "/v1/grid/resolve"


def test_http_errors_are_raised() -> None:
    client = LayoutApiClient("http://layout.test", transport=_transport([], {"detail": "bad"}, status=400))
    with pytest.raises(httpx.HTTPStatusError):
        client.convert(ConvertRequest(root=LayerNode(id="r")))
