from __future__ import annotations

import logging
from dataclasses import dataclass

from packages.contracts.logging_utils import TraceAdapter
from packages.contracts.models import ConversionDiagnostic, ConversionOptions, LayerNode
from packages.grid.stack import GridToStackConverter

from .capture import capture_grid_container
from .flex import edge_padding, flex_settings
from .tree_builder import LayerTreeBuilder

logger = logging.getLogger("layers.pipeline")

CONTAINER_TYPES = {"FRAME", "GROUP"}


@dataclass(slots=True)
class ConversionResult:
    root: LayerNode
    diagnostics: list[ConversionDiagnostic]


def iter_layers(root: LayerNode) -> list[LayerNode]:
    """Pre-order snapshot of the tree, taken before anything is rebuilt."""
    ordered: list[LayerNode] = []
    pending = [root]
    while pending:
        node = pending.pop()
        ordered.append(node)
        pending.extend(reversed(node.children))
    return ordered


def _apply_flex(node: LayerNode, builder: LayerTreeBuilder) -> None:
    settings = flex_settings(node.layout)
    builder.set_stack_axis(node, settings.axis)
    builder.set_sizing(node, "hug", "fixed")
    builder.set_spacing(node, settings.item_spacing, edge_padding(node.padding))
    if settings.primary_align:
        node.primary_axis_align = settings.primary_align
    if settings.counter_align:
        node.counter_axis_align = settings.counter_align


def convert_layer_tree(
    root: LayerNode,
    options: ConversionOptions | None = None,
    trace_id: str | None = None,
) -> ConversionResult:
    """Turn flex and grid frames of a captured layer tree into stacking containers.

    The tree is rebuilt in place. Each grid frame converts independently; a
    failed one keeps its original children and is reported in the
    diagnostics.
    """
    options = options or ConversionOptions()
    log = TraceAdapter(logger, {"trace_id": trace_id or "n/a"})
    builder = LayerTreeBuilder(root)
    converter = GridToStackConverter(builder, options)
    diagnostics: list[ConversionDiagnostic] = []

    for node in iter_layers(root):
        meta = node.layout
        if meta is None or node.type not in CONTAINER_TYPES:
            continue
        if meta.type == "flex" and options.convert_flex:
            _apply_flex(node, builder)
        elif meta.type == "grid":
            builder.set_stack_axis(node, "column")
            builder.set_sizing(node, "hug", "fixed")
            builder.set_spacing(node, node.item_spacing, edge_padding(node.padding))
            container = capture_grid_container(node)
            nodes = {child.id: child for child in node.children}
            report = converter.convert(node, container, nodes, trace_id=trace_id)
            diagnostics.append(
                ConversionDiagnostic(
                    node_id=node.id,
                    status=report.status,
                    strategy=report.strategy,
                    message=report.message,
                    unplaced=report.unplaced,
                )
            )
        else:
            builder.set_spacing(node, node.item_spacing, edge_padding(node.padding))

    failed = sum(1 for d in diagnostics if d.status == "failed")
    log.info("layer tree converted grids=%s failed=%s", len(diagnostics), failed)
    return ConversionResult(root=root, diagnostics=diagnostics)
