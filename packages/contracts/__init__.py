"""Shared contracts for the layout service and converter CLI."""

from .models import (
    ChildCapture,
    ConversionDiagnostic,
    ConversionOptions,
    ConvertRequest,
    ConvertResponse,
    GeometryBox,
    GridContainer,
    GridPlacement,
    GridResolution,
    LayerNode,
    LayoutMeta,
    Padding,
)
from .normalization import parse_length
from .utils import new_trace_id

__all__ = [
    "ChildCapture",
    "ConversionDiagnostic",
    "ConversionOptions",
    "ConvertRequest",
    "ConvertResponse",
    "GeometryBox",
    "GridContainer",
    "GridPlacement",
    "GridResolution",
    "LayerNode",
    "LayoutMeta",
    "Padding",
    "new_trace_id",
    "parse_length",
]
