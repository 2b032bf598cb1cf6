from __future__ import annotations

from typing import Optional


class GraphError(Exception):
    """
    Base class for every failure raised by the graph engine.
    """


class DuplicateVertexError(GraphError):
    """Raised when a vertex key is already present in the graph."""

    def __init__(self, key: int) -> None:
        self.key = key
        super().__init__(f"vertex {key} already exists")


class MissingVertexError(GraphError):
    """Raised when an edge or query references a vertex the graph lacks."""

    def __init__(self, key: int) -> None:
        self.key = key
        super().__init__(f"vertex {key} does not exist")


class MalformedInputError(GraphError):
    """
    Raised when a graph description cannot be interpreted.

    Carries the 1-based line number and the offending token when known.
    """

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        token: Optional[str] = None,
    ) -> None:
        self.line = line
        self.token = token

        location = []
        if line is not None:
            location.append(f"line {line}")
        if token is not None:
            location.append(f"token {token!r}")

        if location:
            message = f"{message} ({', '.join(location)})"
        super().__init__(message)


class ResourceExhaustedError(GraphError):
    """Raised when a traversal exceeds its depth or memory limits."""


class SerializationError(GraphError):
    """Raised when a graph cannot be exported or written to disk."""
