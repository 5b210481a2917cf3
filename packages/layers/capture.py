from __future__ import annotations

from packages.contracts.models import (
    ChildCapture,
    GeometryBox,
    GridContainer,
    GridPlacement,
    LayerNode,
    LayoutMeta,
)


def capture_child(child: LayerNode, origin_x: float, origin_y: float) -> ChildCapture:
    placement = child.placement or GridPlacement()
    return ChildCapture(
        node_id=child.id,
        box=GeometryBox(x=child.x - origin_x, y=child.y - origin_y, w=child.width, h=child.height),
        column_start=placement.column_start,
        column_end=placement.column_end,
        column_span=placement.column_span,
        row_start=placement.row_start,
        row_end=placement.row_end,
        row_span=placement.row_span,
        area_name=placement.area,
    )


def capture_grid_container(node: LayerNode) -> GridContainer:
    """Describe a grid frame's content box and children for conversion.

    Layer coordinates are page-absolute; child geometry is made relative to
    the frame's content origin (its top-left corner inside the padding).
    """
    layout = node.layout or LayoutMeta(type="grid")
    pad = node.padding
    origin_x = node.x + pad.left
    origin_y = node.y + pad.top
    return GridContainer(
        total_width=max(0.0, node.width - pad.left - pad.right),
        total_height=max(0.0, node.height - pad.top - pad.bottom),
        column_template=layout.template,
        row_template=layout.rows,
        areas=layout.areas,
        gap_px=layout.gap,
        children=[capture_child(child, origin_x, origin_y) for child in node.children],
    )
