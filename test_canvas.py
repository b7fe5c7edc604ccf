"""Tests for the CanvasState model."""

import pytest
from PySide6.QtCore import QModelIndex

from schemadraw import (
    CanvasState,
    ColumnRef,
    ColumnSpec,
    Connection,
    DuplicatePlacement,
    NodeTemplate,
    PlacedNode,
    Point,
    Size,
)


@pytest.fixture
def customers():
    return NodeTemplate(
        id="customers",
        name="Customers",
        columns=(ColumnSpec("cust_id", "ID", "integer"), ColumnSpec("cust_emp", "Owner", "integer")),
    )


class TestDataClasses:
    def test_connection_id_is_deterministic(self):
        connection = Connection("employees", "emp_dept", "departments", "dept_id")
        assert connection.id == "employees-emp_dept-departments-dept_id"
        assert connection.source == ColumnRef("employees", "emp_dept")
        assert connection.target == ColumnRef("departments", "dept_id")

    def test_template_column_index(self, employees):
        assert employees.column_index("emp_id") == 0
        assert employees.column_index("emp_dept") == 2
        assert employees.column_index("missing") == -1

    def test_placed_node_contains(self, employees):
        node = PlacedNode(employees, Point(10.0, 20.0), Size(250.0, 200.0))
        assert node.contains(10.0, 20.0)
        assert node.contains(260.0, 220.0)
        assert not node.contains(261.0, 100.0)


class TestPlacement:
    def test_empty_canvas(self, canvas):
        assert canvas.rowCount() == 0
        assert canvas.count == 0
        assert canvas.connectionList == []

    def test_place_node_uses_default_size(self, canvas, employees):
        node = canvas.placeNode(employees, Point(30.0, 40.0))
        assert node.size == Size(250.0, 200.0)
        index = canvas.index(0, 0)
        assert canvas.data(index, canvas.IdRole) == "employees"
        assert canvas.data(index, canvas.NameRole) == "Employees"
        assert canvas.data(index, canvas.XRole) == 30.0
        assert canvas.data(index, canvas.YRole) == 40.0
        assert canvas.data(index, canvas.WidthRole) == 250.0
        assert canvas.data(index, canvas.HeightRole) == 200.0

    def test_columns_role(self, canvas, employees):
        canvas.placeNode(employees, Point(0.0, 0.0))
        columns = canvas.data(canvas.index(0, 0), canvas.ColumnsRole)
        assert [c["columnId"] for c in columns] == ["emp_id", "emp_name", "emp_dept"]
        assert columns[0]["dataType"] == "integer"

    def test_duplicate_placement_leaves_state_unchanged(self, canvas, employees):
        canvas.placeNode(employees, Point(10.0, 10.0))
        with pytest.raises(DuplicatePlacement) as excinfo:
            canvas.placeNode(employees, Point(500.0, 500.0))
        assert excinfo.value.node_id == "employees"
        assert "Employees" in str(excinfo.value)
        assert canvas.count == 1
        assert canvas.getNode("employees").position == Point(10.0, 10.0)

    def test_nodes_changed_signal(self, canvas, employees):
        fired = []
        canvas.nodesChanged.connect(lambda: fired.append(True))
        canvas.placeNode(employees, Point(0.0, 0.0))
        assert fired == [True]

    def test_data_invalid_index(self, canvas):
        assert canvas.data(canvas.index(5, 0), canvas.IdRole) is None
        assert canvas.data(QModelIndex(), canvas.IdRole) is None

    def test_role_names(self, canvas):
        roles = canvas.roleNames()
        assert roles[canvas.IdRole] == b"nodeId"
        assert roles[canvas.ColumnsRole] == b"columns"


class TestMoveAndResize:
    def test_move_node_replaces_position_only(self, canvas, employees):
        canvas.placeNode(employees, Point(0.0, 0.0))
        canvas.resizeNode("employees", Size(300.0, 300.0))
        canvas.moveNode("employees", Point(120.0, 80.0))
        node = canvas.getNode("employees")
        assert node.position == Point(120.0, 80.0)
        assert node.size == Size(300.0, 300.0)

    def test_move_missing_node_is_noop(self, canvas, employees):
        canvas.placeNode(employees, Point(0.0, 0.0))
        canvas.moveNode("missing", Point(10.0, 10.0))
        assert canvas.getNode("employees").position == Point(0.0, 0.0)

    def test_move_emits_geometry_changed(self, canvas, employees):
        canvas.placeNode(employees, Point(0.0, 0.0))
        moved = []
        canvas.nodeGeometryChanged.connect(moved.append)
        canvas.moveNode("employees", Point(5.0, 5.0))
        canvas.moveNode("employees", Point(5.0, 5.0))
        assert moved == ["employees"]

    def test_resize_clamps_to_floor(self, canvas, employees):
        canvas.placeNode(employees, Point(0.0, 0.0))
        canvas.resizeNode("employees", Size(10.0, 5.0))
        assert canvas.getNode("employees").size == Size(200.0, 150.0)

    def test_resize_passes_through_large_sizes(self, canvas, employees):
        canvas.placeNode(employees, Point(0.0, 0.0))
        canvas.resizeNode("employees", Size(500.0, 500.0))
        assert canvas.getNode("employees").size == Size(500.0, 500.0)

    def test_resize_clamps_each_dimension_independently(self, canvas, employees):
        canvas.placeNode(employees, Point(0.0, 0.0))
        canvas.resizeNode("employees", Size(420.0, 20.0))
        assert canvas.getNode("employees").size == Size(420.0, 150.0)

    def test_resize_missing_node_is_noop(self, canvas):
        canvas.resizeNode("missing", Size(500.0, 500.0))
        assert canvas.count == 0


class TestConnections:
    def test_add_connection_returns_id(self, canvas, employees, departments):
        canvas.placeNode(employees, Point(0.0, 0.0))
        canvas.placeNode(departments, Point(400.0, 0.0))
        connection_id = canvas.addConnection(
            ColumnRef("employees", "emp_dept"), ColumnRef("departments", "dept_id")
        )
        assert connection_id == "employees-emp_dept-departments-dept_id"
        assert canvas.connectionList[0]["sourceColumnId"] == "emp_dept"

    def test_add_connection_twice_yields_one(self, canvas):
        source = ColumnRef("a", "c1")
        target = ColumnRef("b", "c2")
        assert canvas.addConnection(source, target) is not None
        assert canvas.addConnection(source, target) is None
        assert len(canvas.connections()) == 1

    def test_self_connection_is_rejected(self, canvas):
        assert canvas.addConnection(ColumnRef("a", "c1"), ColumnRef("a", "c2")) is None
        assert canvas.connections() == []

    def test_reverse_direction_is_a_distinct_connection(self, canvas):
        canvas.addConnection(ColumnRef("a", "c1"), ColumnRef("b", "c2"))
        canvas.addConnection(ColumnRef("b", "c2"), ColumnRef("a", "c1"))
        assert len(canvas.connections()) == 2

    def test_colliding_id_is_rejected(self, canvas):
        first = canvas.addConnection(ColumnRef("a-b", "c"), ColumnRef("d", "c"))
        assert first == "a-b-c-d-c"
        assert canvas.addConnection(ColumnRef("a", "b-c"), ColumnRef("d", "c")) is None
        assert canvas.connections() == [Connection("a-b", "c", "d", "c")]
        assert canvas.removeConnection(first) is True
        assert canvas.connections() == []

    def test_remove_connection(self, canvas):
        connection_id = canvas.addConnection(ColumnRef("a", "c1"), ColumnRef("b", "c2"))
        assert canvas.removeConnection(connection_id) is True
        assert canvas.connections() == []
        assert canvas.removeConnection(connection_id) is False


class TestRemoval:
    def test_remove_cascades_to_connections(self, canvas, employees, departments, customers):
        for offset, template in enumerate((employees, departments, customers)):
            canvas.placeNode(template, Point(offset * 300.0, 0.0))
        canvas.addConnection(ColumnRef("employees", "emp_dept"), ColumnRef("departments", "dept_id"))
        canvas.addConnection(ColumnRef("customers", "cust_emp"), ColumnRef("employees", "emp_id"))
        canvas.addConnection(ColumnRef("customers", "cust_id"), ColumnRef("departments", "dept_name"))

        assert canvas.removeNode("employees") is True

        remaining = canvas.connections()
        assert all(not c.touches("employees") for c in remaining)
        assert remaining == [Connection("customers", "cust_id", "departments", "dept_name")]
        assert [node.id for node in canvas.nodes()] == ["departments", "customers"]

    def test_remove_is_atomic_for_observers(self, canvas, employees, departments):
        canvas.placeNode(employees, Point(0.0, 0.0))
        canvas.placeNode(departments, Point(300.0, 0.0))
        canvas.addConnection(ColumnRef("employees", "emp_dept"), ColumnRef("departments", "dept_id"))
        seen = []

        def observe(*args):
            seen.append((canvas.hasNode("employees"), len(canvas.connections())))

        canvas.rowsRemoved.connect(observe)
        canvas.nodesChanged.connect(observe)
        canvas.connectionsChanged.connect(observe)
        canvas.removeNode("employees")
        assert seen and all(state == (False, 0) for state in seen)

    def test_remove_missing_node(self, canvas, employees):
        canvas.placeNode(employees, Point(0.0, 0.0))
        assert canvas.removeNode("missing") is False
        assert canvas.count == 1


class TestQueries:
    def test_node_id_at(self, canvas, employees, departments):
        canvas.placeNode(employees, Point(0.0, 0.0))
        canvas.placeNode(departments, Point(100.0, 100.0))
        assert canvas.nodeIdAt(50.0, 50.0) == "employees"
        assert canvas.nodeIdAt(150.0, 150.0) == "departments"
        assert canvas.nodeIdAt(2000.0, 2000.0) == ""

    def test_snapshot(self, canvas, employees):
        canvas.placeNode(employees, Point(1.0, 2.0))
        snapshot = canvas.getNodeSnapshot("employees")
        assert snapshot["x"] == 1.0
        assert snapshot["width"] == 250.0
        assert canvas.getNodeSnapshot("missing") == {}

    def test_clear(self, canvas, employees, departments):
        canvas.placeNode(employees, Point(0.0, 0.0))
        canvas.placeNode(departments, Point(300.0, 0.0))
        canvas.addConnection(ColumnRef("employees", "emp_dept"), ColumnRef("departments", "dept_id"))
        canvas.clear()
        assert canvas.count == 0
        assert canvas.connections() == []


def test_custom_settings_change_defaults(app, employees):
    from schemadraw import CanvasSettings

    canvas = CanvasState(CanvasSettings(default_width=320.0, default_height=240.0, min_width=100.0))
    node = canvas.placeNode(employees, Point(0.0, 0.0))
    assert node.size == Size(320.0, 240.0)
    canvas.resizeNode("employees", Size(50.0, 50.0))
    assert canvas.getNode("employees").size == Size(100.0, 150.0)
