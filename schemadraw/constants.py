"""Constants and sample data for SchemaDraw diagrams."""

from typing import Tuple

from .types import ColumnSpec, NodeTemplate


TEMPLATE_MIME_TYPE = "application/x-schemadraw-template"
TEMPLATE_PAYLOAD_FORMAT = "schemadraw-template"
TEMPLATE_PAYLOAD_VERSION = 1

DEFAULT_NODE_WIDTH = 250.0
DEFAULT_NODE_HEIGHT = 200.0
MIN_NODE_WIDTH = 200.0
MIN_NODE_HEIGHT = 150.0

# Table layout used to locate column anchors.
HEADER_HEIGHT = 40.0
COLUMN_HEIGHT = 36.0

# Control points sit at these fractions of the horizontal anchor distance.
CONTROL_POINT_NEAR = 0.4
CONTROL_POINT_FAR = 0.6

# Auto-clear delays in milliseconds.
DUPLICATE_PLACEMENT_DELAY_MS = 3000
CONNECTED_DELAY_MS = 2000
FAILURE_DELAY_MS = 3000


SAMPLE_TEMPLATES: Tuple[NodeTemplate, ...] = (
    NodeTemplate(
        id="employees",
        name="Employees",
        columns=(
            ColumnSpec("emp_id", "ID", "integer"),
            ColumnSpec("emp_name", "Name", "varchar"),
            ColumnSpec("emp_dept", "Department", "varchar"),
        ),
    ),
    NodeTemplate(
        id="departments",
        name="Departments",
        columns=(
            ColumnSpec("dept_id", "ID", "integer"),
            ColumnSpec("dept_name", "Name", "varchar"),
        ),
    ),
)
