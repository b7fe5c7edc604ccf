"""Exceptions raised by the SchemaDraw core.

None of these are fatal: the interaction controller recovers from each
one and reports it through the feedback channel.
"""


class SchemaDrawError(Exception):
    """Base class for SchemaDraw errors."""


class DuplicatePlacement(SchemaDrawError):
    """A table with the same id is already on the canvas."""

    def __init__(self, node_id: str, name: str = "") -> None:
        self.node_id = node_id
        self.name = name or node_id
        super().__init__(f"Table {self.name} already exists in the grid")


class MalformedDragPayload(SchemaDrawError):
    """A drag payload could not be decoded into a table template."""
