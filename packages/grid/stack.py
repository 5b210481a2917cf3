"""Rebuild a CSS grid container as nested single-axis stacking containers.

Conversion runs in two phases. :func:`plan_grid` is pure: it resolves
tracks, areas and placements and returns an immutable :class:`StackPlan`.
:func:`apply_stack_plan` then replays that plan as builder calls against the
host surface. :class:`GridToStackConverter` ties the two together and owns
the failure policy: a broken rebuild restores the original children and is
reported, never raised, so sibling containers still convert.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Generic, Union

from packages.contracts.logging_utils import TraceAdapter
from packages.contracts.models import (
    ChildCapture,
    ConversionOptions,
    ConversionStatus,
    GridContainer,
    Strategy,
)
from packages.contracts.normalization import to_px

from .areas import AreaBox, build_area_map, grid_dimensions, parse_area_spec
from .builder import ContainerBuilder, EdgePadding, NodeT, StackAxis
from .placement import group_rows, resolve_placements
from .tracks import resolve_track_list

logger = logging.getLogger("grid.stack")


@dataclass(frozen=True, slots=True)
class ItemPlan:
    node_id: str
    size: tuple[float, float] | None = None


@dataclass(frozen=True, slots=True)
class ContainerPlan:
    name: str
    axis: StackAxis
    width: float
    height: float
    spacing: float = 0.0
    children: tuple[Union[ContainerPlan, ItemPlan], ...] = ()


@dataclass(frozen=True, slots=True)
class StackPlan:
    strategy: Strategy
    root: ContainerPlan
    columns: tuple[float, ...] | None = None
    rows: tuple[float, ...] | None = None
    area_map: Mapping[str, AreaBox] | None = None
    unplaced: tuple[str, ...] = ()

    def items(self) -> list[ItemPlan]:
        found: list[ItemPlan] = []
        pending = [self.root]
        while pending:
            plan = pending.pop()
            for child in plan.children:
                if isinstance(child, ContainerPlan):
                    pending.append(child)
                else:
                    found.append(child)
        return found


@dataclass(slots=True)
class ConversionReport:
    status: ConversionStatus
    strategy: Strategy | None = None
    message: str = ""
    unplaced: list[str] = field(default_factory=list)


def span_extent(sizes: list[float], start: int, span: int, gap: float) -> float:
    """Merged length of ``span`` consecutive tracks including the gaps between them."""
    covered = sizes[start:start + span]
    return sum(covered) + gap * max(0, len(covered) - 1)


def _even_tracks(resolved: list[float] | None, count: int, total: float) -> list[float]:
    share = total / count if count else 0.0
    sizes = []
    for i in range(count):
        if resolved and i < len(resolved) and resolved[i] > 0:
            sizes.append(resolved[i])
        else:
            sizes.append(share)
    return sizes


def _plan_areas(
    container: GridContainer,
    area_grid: list[list[str]],
    area_map: dict[str, AreaBox],
    columns: list[float] | None,
    rows: list[float] | None,
) -> tuple[ContainerPlan, list[str]]:
    gap = container.gap_px
    num_rows, num_cols = grid_dimensions(area_grid)
    col_widths = _even_tracks(columns, num_cols, container.total_width)
    # cells span the full container height; row tracks only size spanning children
    row_heights = rows[:num_rows] if rows and len(rows) >= num_rows else None

    cells: dict[tuple[int, int], list[ItemPlan]] = {}
    unplaced: list[str] = []
    for child in container.children:
        box = area_map.get(child.area_name) if child.area_name else None
        if box is None:
            unplaced.append(child.node_id)
            continue
        width = span_extent(col_widths, box.col_start, box.col_span, gap)
        if row_heights:
            height = span_extent(row_heights, box.row_start, box.row_span, gap)
        else:
            height = child.box.h
        cells.setdefault((box.row_start, box.col_start), []).append(
            ItemPlan(node_id=child.node_id, size=(width, height))
        )

    row_plans = []
    for r in range(num_rows):
        cell_plans = tuple(
            ContainerPlan(
                name=f"cell-{r}-{c}",
                axis="column",
                width=col_widths[c],
                height=container.total_height,
                spacing=gap,
                children=tuple(cells.get((r, c), [])),
            )
            for c in range(num_cols)
        )
        row_plans.append(
            ContainerPlan(
                name=f"row-{r}",
                axis="row",
                width=container.total_width,
                height=container.total_height,
                spacing=gap,
                children=cell_plans,
            )
        )
    root = ContainerPlan(
        name="grid-areas",
        axis="column",
        width=container.total_width,
        height=container.total_height,
        spacing=gap,
        children=tuple(row_plans),
    )
    return root, unplaced


def _plan_columns(container: GridContainer, columns: list[float]) -> ContainerPlan:
    gap = container.gap_px
    placement = resolve_placements(columns, container.children, gap)
    column_plans = []
    for i, cells in enumerate(placement.assigned):
        items = []
        for cell in sorted(cells, key=lambda c: c.child.box.y):
            size = None
            if cell.span > 1:
                size = (span_extent(columns, i, cell.span, gap), cell.child.box.h)
            items.append(ItemPlan(node_id=cell.child.node_id, size=size))
        column_plans.append(
            ContainerPlan(
                name=f"column-{i}",
                axis="column",
                width=columns[i],
                height=container.total_height,
                spacing=gap,
                children=tuple(items),
            )
        )
    return ContainerPlan(
        name="grid-columns",
        axis="row",
        width=container.total_width,
        height=container.total_height,
        spacing=gap,
        children=tuple(column_plans),
    )


def _explicit_row_groups(
    container: GridContainer,
    rows: list[float] | None,
) -> list[tuple[list[ChildCapture], float | None, list[float | None]]]:
    gap = container.gap_px
    if not rows:
        indices = [
            i
            for child in container.children
            for i in (child.row_start, child.row_end)
            if i is not None and i >= 0
        ]
        count = max(indices, default=0) + 1
        rows = [max(0.0, container.total_height - gap * (count - 1)) / count] * count
    placement = resolve_placements(rows, container.children, gap, axis="row")
    groups = []
    for cells in placement.assigned:
        if not cells:
            continue
        heights = [span_extent(rows, cell.start_index, cell.span, gap) if cell.span > 1 else None for cell in cells]
        groups.append(([cell.child for cell in cells], rows[cells[0].start_index], heights))
    return groups


def _plan_rows(
    container: GridContainer,
    rows: list[float] | None,
    options: ConversionOptions,
) -> ContainerPlan:
    gap = container.gap_px
    if any(child.has_explicit_row for child in container.children):
        groups = _explicit_row_groups(container, rows)
    else:
        groups = [
            (members, None, [None] * len(members))
            for members in group_rows(container.children, options.row_tolerance_px)
        ]

    row_plans = []
    for i, (members, track_height, span_heights) in enumerate(groups):
        ordered = sorted(zip(members, span_heights), key=lambda pair: pair[0].box.x)
        items = tuple(
            ItemPlan(node_id=child.node_id, size=(child.box.w, height) if height is not None else None)
            for child, height in ordered
        )
        height = track_height if track_height else max(child.box.h for child in members)
        row_plans.append(
            ContainerPlan(
                name=f"row-{i}",
                axis="row",
                width=container.total_width,
                height=height,
                spacing=gap,
                children=items,
            )
        )
    return ContainerPlan(
        name="grid-rows",
        axis="column",
        width=container.total_width,
        height=container.total_height,
        spacing=gap,
        children=tuple(row_plans),
    )


def plan_grid(container: GridContainer, options: ConversionOptions | None = None) -> StackPlan:
    options = options or ConversionOptions()
    gap = container.gap_px
    columns = resolve_track_list(container.column_template, container.total_width, gap, options.max_tracks)
    rows = resolve_track_list(container.row_template, container.total_height, gap, options.max_tracks)
    area_grid = parse_area_spec(container.areas)
    area_map = build_area_map(area_grid)

    unplaced: list[str] = []
    strategy: Strategy
    if area_grid and area_map:
        strategy = "areas"
        root, unplaced = _plan_areas(container, area_grid, area_map, columns, rows)
    elif columns and len(columns) > 1:
        strategy = "columns"
        root = _plan_columns(container, columns)
    else:
        strategy = "rows"
        root = _plan_rows(container, rows, options)

    return StackPlan(
        strategy=strategy,
        root=root,
        columns=tuple(columns) if columns is not None else None,
        rows=tuple(rows) if rows is not None else None,
        area_map=area_map,
        unplaced=tuple(unplaced),
    )


def _build(plan: ContainerPlan, nodes: Mapping[str, NodeT], builder: ContainerBuilder[NodeT]) -> NodeT:
    container = builder.create_container(plan.name)
    builder.set_stack_axis(container, plan.axis)
    builder.set_sizing(container, "hug", "fixed")
    builder.set_spacing(container, plan.spacing, EdgePadding())
    builder.resize(container, to_px(plan.width), to_px(plan.height))
    for child in plan.children:
        if isinstance(child, ContainerPlan):
            builder.append(container, _build(child, nodes, builder))
            continue
        node = nodes[child.node_id]
        builder.detach(node)
        if child.size is not None:
            builder.resize(node, to_px(child.size[0]), to_px(child.size[1]))
        builder.append(container, node)
    return container


def apply_stack_plan(
    plan: StackPlan,
    host: NodeT,
    nodes: Mapping[str, NodeT],
    builder: ContainerBuilder[NodeT],
) -> NodeT:
    """Replay a plan as builder calls; the wrapper is attached to the host last."""
    wrapper = _build(plan.root, nodes, builder)
    builder.append(host, wrapper)
    return wrapper


class GridToStackConverter(Generic[NodeT]):
    def __init__(self, builder: ContainerBuilder[NodeT], options: ConversionOptions | None = None) -> None:
        self.builder = builder
        self.options = options or ConversionOptions()

    def convert(
        self,
        host: NodeT,
        container: GridContainer,
        nodes: Mapping[str, NodeT],
        trace_id: str | None = None,
    ) -> ConversionReport:
        log = TraceAdapter(logger, {"trace_id": trace_id or "n/a"})
        if not container.children:
            return ConversionReport(status="skipped", message="grid container has no children")

        try:
            plan = plan_grid(container, self.options)
        except Exception as exc:
            log.warning("grid planning failed: %s", exc)
            return ConversionReport(status="failed", message=f"planning failed: {exc}")

        try:
            apply_stack_plan(plan, host, nodes, self.builder)
        except Exception as exc:
            log.warning("grid rebuild failed strategy=%s: %s", plan.strategy, exc)
            resized = {item.node_id for item in plan.items() if item.size is not None}
            self._restore(host, container, nodes, resized, log)
            return ConversionReport(
                status="failed",
                strategy=plan.strategy,
                message=f"rebuild failed, original children kept: {exc}",
            )

        if plan.unplaced:
            log.warning("children without a matching grid area left in place: %s", ", ".join(plan.unplaced))
        log.debug("grid converted strategy=%s children=%s", plan.strategy, len(container.children))
        return ConversionReport(status="converted", strategy=plan.strategy, unplaced=list(plan.unplaced))

    def _restore(
        self,
        host: NodeT,
        container: GridContainer,
        nodes: Mapping[str, NodeT],
        resized: set[str],
        log: TraceAdapter,
    ) -> None:
        for child in container.children:
            node = nodes.get(child.node_id)
            if node is None:
                continue
            try:
                self.builder.detach(node)
                if child.node_id in resized:
                    self.builder.resize(node, to_px(child.box.w), to_px(child.box.h))
                self.builder.append(host, node)
            except Exception as exc:
                log.warning("could not restore child %s: %s", child.node_id, exc)
