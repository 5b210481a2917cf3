from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import HTTPException

from packages.contracts.logging_utils import TraceAdapter
from packages.contracts.models import (
    AreaBoxModel,
    AreaRequest,
    AreaResponse,
    CellAssignmentModel,
    ConvertRequest,
    ConvertResponse,
    GridContainer,
    GridResolution,
    TrackBoundModel,
    TrackRequest,
    TrackResponse,
)
from packages.contracts.utils import new_trace_id
from packages.grid import AreaBox, build_area_map, parse_area_spec, plan_grid, resolve_placements, resolve_track_list
from packages.layers import convert_layer_tree

logger = logging.getLogger("layout_api.service")


def _area_models(area_map: dict[str, AreaBox] | None) -> dict[str, AreaBoxModel] | None:
    if area_map is None:
        return None
    return {name: AreaBoxModel(**asdict(box)) for name, box in area_map.items()}


class LayoutService:
    def convert(self, req: ConvertRequest) -> ConvertResponse:
        trace_id = req.trace_id or new_trace_id()
        log = TraceAdapter(logger, {"trace_id": trace_id})
        root = req.root.model_copy(deep=True)
        try:
            result = convert_layer_tree(root, req.options, trace_id=trace_id)
        except ValueError as exc:
            log.warning("rejected layer tree: %s", exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        failed = [d.node_id for d in result.diagnostics if d.status == "failed"]
        if failed:
            log.warning("grid conversion degraded for %s container(s)", len(failed))
        log.info("convert produced grids=%s", len(result.diagnostics))
        return ConvertResponse(root=result.root, diagnostics=result.diagnostics, trace_id=trace_id)

    def tracks(self, req: TrackRequest) -> TrackResponse:
        return TrackResponse(tracks=resolve_track_list(req.spec, req.total, req.gap))

    def areas(self, req: AreaRequest) -> AreaResponse:
        grid = parse_area_spec(req.spec)
        return AreaResponse(areas=grid, area_map=_area_models(build_area_map(grid)))

    def resolve(self, container: GridContainer) -> GridResolution:
        plan = plan_grid(container)
        columns = list(plan.columns) if plan.columns is not None else None
        placement = resolve_placements(columns or [container.total_width], container.children, container.gap_px)
        return GridResolution(
            strategy=plan.strategy,
            columns=columns,
            rows=list(plan.rows) if plan.rows is not None else None,
            areas=parse_area_spec(container.areas),
            area_map=_area_models(dict(plan.area_map) if plan.area_map is not None else None),
            assigned=[
                [
                    CellAssignmentModel(
                        node_id=cell.child.node_id,
                        start_index=cell.start_index,
                        end_index=cell.end_index,
                        span=cell.span,
                    )
                    for cell in cells
                ]
                for cells in placement.assigned
            ],
            bounds=[TrackBoundModel(start=b.start, end=b.end) for b in placement.bounds],
        )
