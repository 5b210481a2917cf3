from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from packages.contracts.models import ChildCapture

Axis = Literal["column", "row"]
ROW_TOLERANCE_PX = 6.0


@dataclass(frozen=True, slots=True)
class TrackBound:
    start: float
    end: float


@dataclass(frozen=True, slots=True)
class CellAssignment:
    child: ChildCapture
    start_index: int
    end_index: int

    @property
    def span(self) -> int:
        return self.end_index - self.start_index + 1


@dataclass(slots=True)
class PlacementResult:
    assigned: list[list[CellAssignment]]
    bounds: list[TrackBound]


def track_bounds(widths: list[float], gap: float = 0.0) -> list[TrackBound]:
    bounds: list[TrackBound] = []
    acc = 0.0
    for i, width in enumerate(widths):
        start = acc + i * gap
        bounds.append(TrackBound(start=start, end=start + width))
        acc += width
    return bounds


def _clamp(value: int, count: int) -> int:
    return max(0, min(value, count - 1))


def _explicit(child: ChildCapture, axis: Axis) -> tuple[int | None, int | None, int | None]:
    if axis == "column":
        return child.column_start, child.column_end, child.column_span
    return child.row_start, child.row_end, child.row_span


def _extent(child: ChildCapture, axis: Axis, origin: float) -> tuple[float, float]:
    box = child.box
    if axis == "column":
        return box.x - origin, box.w
    return box.y - origin, box.h


def _geometric(bounds: list[TrackBound], lead: float, size: float) -> tuple[int, int]:
    trail = lead + size
    hits = [i for i, b in enumerate(bounds) if trail > b.start and lead < b.end]
    if hits:
        return hits[0], hits[-1]
    # walks gapped bounds, so a centre inside a gap lands in the following track
    center = lead + size / 2
    for i, b in enumerate(bounds):
        if center <= b.end:
            return i, i
    last = len(bounds) - 1
    return last, last


def place_child(
    child: ChildCapture,
    bounds: list[TrackBound],
    origin: float = 0.0,
    axis: Axis = "column",
) -> CellAssignment:
    """Resolve one child to a track range; explicit placement wins over geometry."""
    count = len(bounds)
    start, end, span = _explicit(child, axis)

    if start is not None:
        start = _clamp(start, count)
        if end is None:
            end = start + span - 1 if span is not None else start
    elif end is not None:
        end = _clamp(end, count)
        start = _clamp(end - (span or 1) + 1, count)
    else:
        lead, size = _extent(child, axis, origin)
        start, end = _geometric(bounds, lead, size)
        if span is not None:
            end = start + span - 1

    end = max(start, min(end, count - 1))
    return CellAssignment(child=child, start_index=start, end_index=end)


def resolve_placements(
    widths: list[float],
    children: list[ChildCapture],
    gap: float = 0.0,
    origin: float = 0.0,
    axis: Axis = "column",
) -> PlacementResult:
    """Bucket every child under the track it starts in.

    An empty track list is treated as a single zero-width track so that no
    child is ever left without a bucket.
    """
    bounds = track_bounds(list(widths) or [0.0], gap)
    assigned: list[list[CellAssignment]] = [[] for _ in bounds]
    for child in children:
        cell = place_child(child, bounds, origin, axis)
        assigned[cell.start_index].append(cell)
    return PlacementResult(assigned=assigned, bounds=bounds)


def group_rows(children: list[ChildCapture], tolerance: float = ROW_TOLERANCE_PX) -> list[list[ChildCapture]]:
    """Group children into visual rows by rounded y, keeping capture order."""
    rows: list[tuple[int, list[ChildCapture]]] = []
    for child in children:
        y = round(child.box.y)
        for rep_y, members in rows:
            if abs(rep_y - y) <= tolerance:
                members.append(child)
                break
        else:
            rows.append((y, [child]))
    return [members for _, members in rows]
