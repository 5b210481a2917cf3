from __future__ import annotations

from dataclasses import dataclass, field

from packages.contracts.models import ChildCapture, GeometryBox, GridContainer
from packages.grid.builder import EdgePadding
from packages.grid.stack import ContainerPlan, GridToStackConverter, ItemPlan, plan_grid, span_extent


@dataclass(eq=False)
class FakeNode:
    name: str
    width: float = 0
    height: float = 0
    axis: str | None = None
    sizing: tuple[str, str] | None = None
    spacing: float | None = None
    parent: FakeNode | None = None
    children: list[FakeNode] = field(default_factory=list)


class FakeBuilder:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def create_container(self, name: str) -> FakeNode:
        self.calls.append(("create", name))
        return FakeNode(name=name)

    def set_stack_axis(self, container: FakeNode, axis: str) -> None:
        container.axis = axis

    def set_sizing(self, container: FakeNode, primary: str, counter: str) -> None:
        container.sizing = (primary, counter)

    def set_spacing(self, container: FakeNode, item_spacing: float, padding: EdgePadding) -> None:
        container.spacing = item_spacing

    def detach(self, node: FakeNode) -> None:
        if node.parent is not None:
            node.parent.children.remove(node)
            node.parent = None

    def resize(self, node: FakeNode, width: float, height: float) -> None:
        self.calls.append(("resize", node.name, width, height))
        node.width, node.height = width, height

    def append(self, container: FakeNode, node: FakeNode) -> None:
        self.detach(node)
        container.children.append(node)
        node.parent = container
        self.calls.append(("append", container.name, node.name))


class FailOnceBuilder(FakeBuilder):
    def __init__(self, fail_node: str) -> None:
        super().__init__()
        self.fail_node = fail_node

    def resize(self, node: FakeNode, width: float, height: float) -> None:
        if node.name == self.fail_node:
            self.fail_node = ""
            raise RuntimeError("resize rejected by surface")
        super().resize(node, width, height)


def _child(node_id: str, x: float, y: float, w: float, h: float, **extra) -> ChildCapture:
    return ChildCapture(node_id=node_id, box=GeometryBox(x=x, y=y, w=w, h=h), **extra)


def _columns_container() -> GridContainer:
    return GridContainer(
        total_width=300,
        total_height=200,
        column_template="100px 100px 100px",
        children=[
            _child("a", 0, 0, 100, 40),
            _child("b", 100, 0, 100, 40),
            _child("wide", 0, 100, 200, 40),
            _child("c", 200, 0, 100, 40),
            _child("d", 0, 50, 100, 40),
        ],
    )


def _host_with(container: GridContainer) -> tuple[FakeNode, dict[str, FakeNode]]:
    host = FakeNode(name="host", width=container.total_width, height=container.total_height)
    nodes = {}
    for child in container.children:
        node = FakeNode(name=child.node_id, width=child.box.w, height=child.box.h, parent=host)
        host.children.append(node)
        nodes[child.node_id] = node
    return host, nodes


def _ids(plan: ContainerPlan) -> list[str]:
    return [item.node_id for item in plan.children if isinstance(item, ItemPlan)]


def test_span_extent_adds_inner_gaps() -> None:
    assert span_extent([100, 50, 80], 0, 3, 10) == 250
    assert span_extent([100, 50, 80], 2, 1, 10) == 80


def test_column_plan_orders_each_column_top_to_bottom() -> None:
    plan = plan_grid(_columns_container())
    assert plan.strategy == "columns"
    assert plan.root.axis == "row"
    columns = plan.root.children
    assert [c.name for c in columns] == ["column-0", "column-1", "column-2"]
    assert [c.width for c in columns] == [100, 100, 100]
    assert all(c.height == 200 and c.axis == "column" for c in columns)
    assert _ids(columns[0]) == ["a", "d", "wide"]
    assert _ids(columns[1]) == ["b"]
    assert _ids(columns[2]) == ["c"]
    wide = columns[0].children[2]
    assert wide.size == (200, 40)
    assert columns[0].children[0].size is None


def test_column_plan_merges_span_width_with_gap() -> None:
    container = GridContainer(
        total_width=320,
        total_height=100,
        column_template="1fr 1fr 1fr",
        gap_px="10px",
        children=[_child("x", 0, 0, 10, 30, column_start=0, column_end=2)],
    )
    plan = plan_grid(container)
    assert plan.columns == (100, 100, 100)
    assert plan.root.spacing == 10
    assert plan.root.children[0].children[0].size == (320, 30)


def test_area_plan_places_children_in_top_left_cells() -> None:
    container = GridContainer(
        total_width=300,
        total_height=200,
        column_template="100px 100px 100px",
        row_template="100px 100px",
        areas="'head head side' 'main main side'",
        children=[
            _child("header", 0, 0, 200, 100, area_name="head"),
            _child("sidebar", 200, 0, 100, 200, area_name="side"),
            _child("content", 0, 100, 200, 100, area_name="main"),
            _child("stray", 0, 0, 10, 10, area_name="footer"),
            _child("loose", 0, 0, 10, 10),
        ],
    )
    plan = plan_grid(container)
    assert plan.strategy == "areas"
    assert plan.unplaced == ("stray", "loose")
    rows = plan.root.children
    assert [r.name for r in rows] == ["row-0", "row-1"]
    assert all(r.axis == "row" for r in rows)
    cells = {cell.name: cell for row in rows for cell in row.children}
    assert len(cells) == 6
    assert cells["cell-0-0"].children == (ItemPlan("header", (200, 100)),)
    assert cells["cell-0-2"].children == (ItemPlan("sidebar", (100, 200)),)
    assert cells["cell-1-0"].children == (ItemPlan("content", (200, 100)),)
    assert cells["cell-1-1"].children == ()
    assert cells["cell-0-1"].width == 100


def test_area_cells_take_full_container_height_even_with_row_tracks() -> None:
    container = GridContainer(
        total_width=300,
        total_height=200,
        column_template="100px 100px 100px",
        row_template="100px 100px",
        areas="'a a b' 'c c b'",
        children=[_child("tall", 200, 0, 100, 200, area_name="b")],
    )
    plan = plan_grid(container)
    cells = [cell for row in plan.root.children for cell in row.children]
    assert [cell.height for cell in cells] == [200] * 6
    assert [cell.width for cell in cells] == [100] * 6
    assert cells[2].children == (ItemPlan("tall", (100, 200)),)


def test_area_plan_without_rows_uses_full_height_cells() -> None:
    container = GridContainer(
        total_width=200,
        total_height=120,
        areas='"a b"',
        children=[_child("one", 0, 0, 50, 30, area_name="b")],
    )
    plan = plan_grid(container)
    cell = plan.root.children[0].children[1]
    assert (cell.width, cell.height) == (100, 120)
    assert cell.children == (ItemPlan("one", (100, 30)),)


def test_single_column_falls_back_to_rows() -> None:
    container = GridContainer(
        total_width=200,
        total_height=100,
        column_template="1fr",
        children=[
            _child("r1b", 120, 2, 50, 20),
            _child("r1a", 0, 0, 50, 30),
            _child("r2", 0, 40, 50, 20),
        ],
    )
    plan = plan_grid(container)
    assert plan.strategy == "rows"
    assert plan.root.axis == "column"
    assert [_ids(row) for row in plan.root.children] == [["r1a", "r1b"], ["r2"]]
    assert plan.root.children[0].height == 30


def test_explicit_rows_use_row_tracks() -> None:
    container = GridContainer(
        total_width=200,
        total_height=100,
        row_template="50px 50px",
        children=[
            _child("bottom", 0, 0, 50, 20, row_start=1),
            _child("right", 50, 60, 50, 20, row_start=0),
            _child("left", 0, 10, 50, 20),
            _child("tall", 100, 0, 50, 20, row_start=0, row_span=2),
        ],
    )
    plan = plan_grid(container)
    rows = plan.root.children
    assert [_ids(row) for row in rows] == [["left", "right", "tall"], ["bottom"]]
    assert rows[0].height == 50
    assert rows[0].children[2].size == (50, 100)


def test_explicit_rows_without_template_split_height_evenly() -> None:
    container = GridContainer(
        total_width=100,
        total_height=90,
        children=[_child("x", 0, 0, 10, 10, row_start=2), _child("y", 0, 0, 10, 10, row_start=0)],
    )
    plan = plan_grid(container)
    assert [_ids(row) for row in plan.root.children] == [["y"], ["x"]]
    assert plan.root.children[0].height == 30


def test_convert_replaces_children_with_stack_hierarchy() -> None:
    container = _columns_container()
    host, nodes = _host_with(container)
    builder = FakeBuilder()
    report = GridToStackConverter(builder).convert(host, container, nodes)

    assert report.status == "converted"
    assert report.strategy == "columns"
    assert [c.name for c in host.children] == ["grid-columns"]
    wrapper = host.children[0]
    assert wrapper.axis == "row"
    assert wrapper.sizing == ("hug", "fixed")
    assert [[n.name for n in col.children] for col in wrapper.children] == [["a", "d", "wide"], ["b"], ["c"]]
    assert (nodes["wide"].width, nodes["wide"].height) == (200, 40)
    assert builder.calls[-1] == ("append", "host", "grid-columns")


def test_convert_rounds_sizes_for_the_surface() -> None:
    container = GridContainer(
        total_width=100,
        total_height=50.4,
        column_template="33.3px 66.7px",
        children=[_child("only", 0, 0, 10, 10)],
    )
    host, nodes = _host_with(container)
    builder = FakeBuilder()
    GridToStackConverter(builder).convert(host, container, nodes)
    resized = [call for call in builder.calls if call[0] == "resize"]
    assert ("resize", "column-0", 33, 50) in resized
    assert ("resize", "column-1", 67, 50) in resized
    assert all(isinstance(call[2], int) and isinstance(call[3], int) for call in resized)


def test_failed_rebuild_restores_original_children() -> None:
    container = _columns_container()
    host, nodes = _host_with(container)
    report = GridToStackConverter(FailOnceBuilder("wide")).convert(host, container, nodes)

    assert report.status == "failed"
    assert "resize rejected" in report.message
    assert [c.name for c in host.children] == ["a", "b", "wide", "c", "d"]
    assert all(node.parent is host for node in nodes.values())
    assert (nodes["wide"].width, nodes["wide"].height) == (200, 40)


def test_missing_node_handle_is_reported_not_raised() -> None:
    container = _columns_container()
    host, nodes = _host_with(container)
    del nodes["c"]
    report = GridToStackConverter(FakeBuilder()).convert(host, container, nodes)
    assert report.status == "failed"
    assert report.strategy == "columns"
    assert sorted(c.name for c in host.children) == ["a", "b", "c", "d", "wide"]


def test_unplaced_area_children_stay_on_host() -> None:
    container = GridContainer(
        total_width=200,
        total_height=100,
        areas="'a b'",
        children=[_child("one", 0, 0, 10, 10, area_name="a"), _child("lost", 0, 0, 10, 10, area_name="zzz")],
    )
    host, nodes = _host_with(container)
    report = GridToStackConverter(FakeBuilder()).convert(host, container, nodes)
    assert report.status == "converted"
    assert report.unplaced == ["lost"]
    assert [c.name for c in host.children] == ["lost", "grid-areas"]


def test_empty_container_is_skipped() -> None:
    container = GridContainer(total_width=10, total_height=10, column_template="1fr 1fr")
    host, nodes = _host_with(container)
    builder = FakeBuilder()
    report = GridToStackConverter(builder).convert(host, container, nodes)
    assert report.status == "skipped"
    assert builder.calls == []
