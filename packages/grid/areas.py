from __future__ import annotations

import re
from dataclasses import dataclass

_QUOTED_ROW = re.compile(r"'[^']+'|\"[^\"]+\"")


@dataclass(frozen=True, slots=True)
class AreaBox:
    """Inclusive 0-based row/column bounds of a named area."""

    row_start: int
    row_end: int
    col_start: int
    col_end: int

    @property
    def row_span(self) -> int:
        return self.row_end - self.row_start + 1

    @property
    def col_span(self) -> int:
        return self.col_end - self.col_start + 1


def is_null_cell(token: str) -> bool:
    return bool(token) and set(token) == {"."}


def parse_area_spec(spec: str | None) -> list[list[str]] | None:
    if not spec:
        return None
    rows = []
    for quoted in _QUOTED_ROW.findall(spec):
        tokens = quoted[1:-1].split()
        if tokens:
            rows.append(tokens)
    return rows or None


def build_area_map(grid: list[list[str]] | None) -> dict[str, AreaBox] | None:
    """Bounding box of every named area.

    A name whose cells do not form a rectangle still gets the rectangle that
    encloses all of its cells.
    """
    if not grid:
        return None
    bounds: dict[str, list[int]] = {}
    for r, row in enumerate(grid):
        for c, name in enumerate(row):
            if not name or is_null_cell(name):
                continue
            box = bounds.get(name)
            if box is None:
                bounds[name] = [r, r, c, c]
                continue
            box[0] = min(box[0], r)
            box[1] = max(box[1], r)
            box[2] = min(box[2], c)
            box[3] = max(box[3], c)
    return {name: AreaBox(*box) for name, box in bounds.items()}


def grid_dimensions(grid: list[list[str]]) -> tuple[int, int]:
    """(rows, columns) of an area grid; ragged rows count as their longest row."""
    return len(grid), max((len(row) for row in grid), default=0)
