"""Layer-tree adapters around the grid converter."""

from .capture import capture_grid_container
from .pipeline import ConversionResult, convert_layer_tree
from .tree_builder import LayerTreeBuilder

__all__ = [
    "ConversionResult",
    "LayerTreeBuilder",
    "capture_grid_container",
    "convert_layer_tree",
]
