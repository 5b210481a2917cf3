from __future__ import annotations

from dataclasses import dataclass

from packages.contracts.models import AxisAlign, LayoutMeta, Padding
from packages.grid.builder import EdgePadding, StackAxis


@dataclass(frozen=True, slots=True)
class StackSettings:
    axis: StackAxis
    item_spacing: float
    primary_align: AxisAlign | None = None
    counter_align: AxisAlign | None = None


def counter_align_for(align: str | None) -> AxisAlign | None:
    if not align:
        return None
    lowered = align.lower()
    if "center" in lowered:
        return "CENTER"
    if "end" in lowered:
        return "MAX"
    return "MIN"


def primary_align_for(justify: str | None) -> AxisAlign | None:
    if not justify:
        return None
    lowered = justify.lower()
    if "center" in lowered:
        return "CENTER"
    if "space-between" in lowered:
        return "SPACE_BETWEEN"
    if "end" in lowered:
        return "MAX"
    return "MIN"


def flex_settings(meta: LayoutMeta) -> StackSettings:
    return StackSettings(
        axis="column" if meta.direction == "column" else "row",
        item_spacing=round(meta.gap),
        primary_align=primary_align_for(meta.justify),
        counter_align=counter_align_for(meta.align),
    )


def edge_padding(padding: Padding) -> EdgePadding:
    return EdgePadding(
        top=round(padding.top),
        right=round(padding.right),
        bottom=round(padding.bottom),
        left=round(padding.left),
    )
