from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class VisitingState(Enum):
    """
    Per-vertex progress marker used by traversal algorithms.

    IN_PROGRESS is reserved for searches that distinguish vertices still on
    the search stack from fully processed ones.
    """

    NOT_VISITED = "not_visited"
    VISITED = "visited"
    IN_PROGRESS = "in_progress"


@dataclass(eq=False)
class Vertex:
    """
    Graph node identified by an integer key.

    Incident edges are owned by the graph and looked up through it, so a
    vertex never holds references to edges or to other vertices.
    """

    key: int
    balance: float = 0.0
    visiting_state: VisitingState = field(
        default=VisitingState.NOT_VISITED,
        compare=False,
    )

    def is_visited(self) -> bool:
        return self.visiting_state is VisitingState.VISITED

    def __str__(self) -> str:
        return str(self.key)


@dataclass(frozen=True)
class Edge:
    """
    Directed arc between two vertex keys with capacity and cost.

    Equality is by (source, sink); capacity and cost are ignored so that
    removal by value matches the first arc between the same endpoints.
    """

    source: int
    sink: int
    capacity: float = field(default=1.0, compare=False)
    cost: float = field(default=0.0, compare=False)

    def __post_init__(self) -> None:
        if not self.capacity >= 0:
            raise ValueError(
                f"edge {self.source}->{self.sink} has invalid capacity {self.capacity}"
            )

    @property
    def endpoints(self) -> Tuple[int, int]:
        return (self.source, self.sink)

    def revert(self) -> "Edge":
        return Edge(
            source=self.sink,
            sink=self.source,
            capacity=self.capacity,
            cost=self.cost,
        )

    def __str__(self) -> str:
        return f"{self.source}->{self.sink}"
