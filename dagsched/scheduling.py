"""Shared definitions for schedulability analyses."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class PartitioningTaskOrder(Enum):
    """Order in which tasks are considered when partitioning."""

    INC_DEAD = 0
    DEC_DEAD = 1
    INC_PRIO = 2
    DEC_PRIO = 3
    INC_UTIL = 4
    DEC_UTIL = 5


class PartitioningCoresOrder(Enum):
    """Heuristic for choosing a core when partitioning."""

    FIRST_FIT = 0
    BEST_FIT = 1
    WORST_FIT = 2


def _fmt(values: list) -> str:
    return "".join(f"{v:g} " if isinstance(v, float) else f"{v} " for v in values)


@dataclass
class SSTask:
    """Self-suspending task seen by one core along a path of a DAG.

    ``suspensions`` and ``computations`` alternate; ``computation_ids``
    holds the vertex id of each computation segment.
    """

    suspensions: list[float] = field(default_factory=list)
    computations: list[float] = field(default_factory=list)
    computation_ids: list[int] = field(default_factory=list)
    sub: float = 0.0
    core_id: int = 0

    def __str__(self) -> str:
        return (
            f"Task ss (core {self.core_id}):\n"
            f"\tC: {_fmt(self.computations)}\n"
            f"\tS: {_fmt(self.suspensions)}\n"
            f"\tSub: {self.sub:g}"
        )


def demand_bound_function(
    interval: float, deadline: float, period: float, wcet: float
) -> int:
    """Demand of a sporadic job sequence in an interval, truncated to int."""
    return int((math.floor((interval - deadline) / period) + 1) * wcet)