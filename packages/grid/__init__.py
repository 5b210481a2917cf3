"""CSS grid reconstruction as nested stacking containers."""

from .areas import AreaBox, build_area_map, parse_area_spec
from .builder import ContainerBuilder, EdgePadding
from .placement import CellAssignment, PlacementResult, TrackBound, group_rows, resolve_placements
from .stack import ConversionReport, GridToStackConverter, StackPlan, apply_stack_plan, plan_grid
from .tracks import FixedTrack, FractionalTrack, MinMaxMeta, parse_track_spec, resolve_track_list, size_tracks

__all__ = [
    "AreaBox",
    "CellAssignment",
    "ContainerBuilder",
    "ConversionReport",
    "EdgePadding",
    "FixedTrack",
    "FractionalTrack",
    "GridToStackConverter",
    "MinMaxMeta",
    "PlacementResult",
    "StackPlan",
    "TrackBound",
    "apply_stack_plan",
    "build_area_map",
    "group_rows",
    "parse_area_spec",
    "parse_track_spec",
    "plan_grid",
    "resolve_placements",
    "resolve_track_list",
    "size_tracks",
]
