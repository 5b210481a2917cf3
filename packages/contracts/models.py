from __future__ import annotations

from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .normalization import parse_length

LayoutType = Literal["flex", "grid", "block"]
LayoutMode = Literal["NONE", "HORIZONTAL", "VERTICAL"]
AxisSizing = Literal["FIXED", "AUTO"]
AxisAlign = Literal["MIN", "CENTER", "MAX", "SPACE_BETWEEN"]
Strategy = Literal["areas", "columns", "rows"]
ConversionStatus = Literal["converted", "failed", "skipped"]


class Padding(BaseModel):
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0


class LayoutMeta(BaseModel):
    type: LayoutType = "block"
    direction: Literal["row", "column"] = "row"
    gap: float = Field(default=0, ge=0)
    align: str | None = None
    justify: str | None = None
    template: str | None = None
    rows: str | None = None
    areas: str | None = None

    @field_validator("gap", mode="before")
    @classmethod
    def validate_gap(cls, value):
        return parse_length(value)


class GridPlacement(BaseModel):
    """Explicit grid placement captured for a child, as 0-based inclusive track indices."""

    column_start: int | None = None
    column_end: int | None = None
    column_span: int | None = Field(default=None, ge=1)
    row_start: int | None = None
    row_end: int | None = None
    row_span: int | None = Field(default=None, ge=1)
    area: str | None = None


class LayerNode(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=lambda: uuid4().hex, min_length=1)
    type: str = "FRAME"
    name: str | None = None
    x: float = 0
    y: float = 0
    width: float = Field(default=0, ge=0)
    height: float = Field(default=0, ge=0)
    layout: LayoutMeta | None = None
    padding: Padding = Field(default_factory=Padding)
    placement: GridPlacement | None = None
    layout_mode: LayoutMode = "NONE"
    primary_axis_sizing: AxisSizing = "FIXED"
    counter_axis_sizing: AxisSizing = "FIXED"
    item_spacing: float = 0
    primary_axis_align: AxisAlign | None = None
    counter_axis_align: AxisAlign | None = None
    children: list[LayerNode] = Field(default_factory=list)


class GeometryBox(BaseModel):
    x: float
    y: float
    w: float = Field(ge=0)
    h: float = Field(ge=0)


class ChildCapture(BaseModel):
    node_id: str
    box: GeometryBox
    column_start: int | None = None
    column_end: int | None = None
    column_span: int | None = Field(default=None, ge=1)
    row_start: int | None = None
    row_end: int | None = None
    row_span: int | None = Field(default=None, ge=1)
    area_name: str | None = None

    @property
    def has_explicit_row(self) -> bool:
        return self.row_start is not None or self.row_span is not None or self.row_end is not None


class GridContainer(BaseModel):
    total_width: float = Field(ge=0)
    total_height: float = Field(ge=0)
    column_template: str | None = None
    row_template: str | None = None
    areas: str | None = None
    gap_px: float = Field(default=0, ge=0)
    children: list[ChildCapture] = Field(default_factory=list)

    @field_validator("gap_px", mode="before")
    @classmethod
    def validate_gap(cls, value):
        return parse_length(value)


class ConversionOptions(BaseModel):
    row_tolerance_px: float = Field(default=6, ge=0, le=100)
    max_tracks: int = Field(default=500, ge=1, le=5000)
    convert_flex: bool = True


class ConversionDiagnostic(BaseModel):
    node_id: str
    status: ConversionStatus
    strategy: Strategy | None = None
    message: str = ""
    unplaced: list[str] = Field(default_factory=list)


class ConvertRequest(BaseModel):
    root: LayerNode
    options: ConversionOptions = Field(default_factory=ConversionOptions)
    trace_id: str | None = None


class ConvertResponse(BaseModel):
    root: LayerNode
    diagnostics: list[ConversionDiagnostic]
    trace_id: str


class TrackRequest(BaseModel):
    spec: str | None = None
    total: float = Field(ge=0)
    gap: float = Field(default=0, ge=0)

    @field_validator("gap", mode="before")
    @classmethod
    def validate_gap(cls, value):
        return parse_length(value)


class TrackResponse(BaseModel):
    tracks: list[float] | None


class AreaRequest(BaseModel):
    spec: str | None = None


class AreaBoxModel(BaseModel):
    row_start: int
    row_end: int
    col_start: int
    col_end: int


class AreaResponse(BaseModel):
    areas: list[list[str]] | None
    area_map: dict[str, AreaBoxModel] | None


class TrackBoundModel(BaseModel):
    start: float
    end: float


class CellAssignmentModel(BaseModel):
    node_id: str
    start_index: int
    end_index: int
    span: int = Field(ge=1)


class GridResolution(BaseModel):
    strategy: Strategy
    columns: list[float] | None
    rows: list[float] | None
    areas: list[list[str]] | None
    area_map: dict[str, AreaBoxModel] | None
    assigned: list[list[CellAssignmentModel]]
    bounds: list[TrackBoundModel]


LayerNode.model_rebuild()
