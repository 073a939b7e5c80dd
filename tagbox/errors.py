"""
tagbox.errors — exception types raised by the container and its helpers.

    BoxError            base class for everything below
    InvalidPathError    a path was required but none was given
    PathConflictError   a value cannot be placed because an existing
                        intermediate value is a scalar
    DiffError           a change record cannot be applied to its target

Missing paths are never errors: lookups return None, deletes are no-ops.
"""


class BoxError(Exception):
    """Base class for tagbox failures."""


class InvalidPathError(BoxError, ValueError):
    """Path is None or empty where a path is required."""


class PathConflictError(BoxError, TypeError):
    """An intermediate value on the path cannot hold children."""

    def __init__(self, path, segment, value):
        super().__init__(path, segment, value)
        self.path = path
        self.segment = segment
        self.value = value

    def __str__(self) -> str:
        return (
            f"Cannot descend into {type(self.value).__name__} at segment "
            f"{self.segment!r} of path {self.path!r}"
        )


class DiffError(BoxError, ValueError):
    """A change record does not fit the target it is applied to."""
