"""
models.py
- Value types exchanged between the inventory, the resizer and the shift loop.
- All types are immutable; a new snapshot is taken every cycle.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable


class OperationStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"


class CycleOutcome(str, Enum):
    SHIFTED = "shifted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class NodePoolSnapshot:
    """
    Point-in-time set of node names labeled as members of a pool.

    Two snapshots taken in the same cycle come from two sequential queries
    and are not guaranteed to be consistent with each other.
    """
    pool: str
    nodes: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, pool: str, nodes: Iterable[str]) -> "NodePoolSnapshot":
        return cls(pool=pool, nodes=frozenset(nodes))

    @property
    def size(self) -> int:
        return len(self.nodes)


@dataclass(frozen=True)
class ResizeOperation:
    """Handle on an asynchronous provider operation started by a resize."""
    name: str
    target_link: str = ""
