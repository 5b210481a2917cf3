from __future__ import annotations

from packages.contracts.models import LayerNode, Padding
from packages.grid.builder import EdgePadding, SizingMode, StackAxis


class LayerTreeBuilder:
    """ContainerBuilder over an in-memory LayerNode tree.

    Parent links are indexed once from the root, so layer ids must be unique.
    """

    def __init__(self, root: LayerNode) -> None:
        self.root = root
        self._ids: set[str] = set()
        self._parents: dict[str, LayerNode] = {}
        self._index(root, None)

    def _index(self, node: LayerNode, parent: LayerNode | None) -> None:
        if node.id in self._ids:
            raise ValueError(f"duplicate layer id: {node.id}")
        self._ids.add(node.id)
        if parent is not None:
            self._parents[node.id] = parent
        for child in node.children:
            self._index(child, node)

    def create_container(self, name: str) -> LayerNode:
        return LayerNode(type="FRAME", name=name)

    def set_stack_axis(self, container: LayerNode, axis: StackAxis) -> None:
        container.layout_mode = "HORIZONTAL" if axis == "row" else "VERTICAL"

    def set_sizing(self, container: LayerNode, primary: SizingMode, counter: SizingMode) -> None:
        container.primary_axis_sizing = "AUTO" if primary == "hug" else "FIXED"
        container.counter_axis_sizing = "AUTO" if counter == "hug" else "FIXED"

    def set_spacing(self, container: LayerNode, item_spacing: float, padding: EdgePadding) -> None:
        container.item_spacing = item_spacing
        container.padding = Padding(
            top=padding.top,
            right=padding.right,
            bottom=padding.bottom,
            left=padding.left,
        )

    def detach(self, node: LayerNode) -> None:
        parent = self._parents.pop(node.id, None)
        if parent is None:
            return
        parent.children = [child for child in parent.children if child is not node]

    def resize(self, node: LayerNode, width: float, height: float) -> None:
        node.width = float(width)
        node.height = float(height)

    def append(self, container: LayerNode, node: LayerNode) -> None:
        self.detach(node)
        container.children.append(node)
        self._parents[node.id] = container
