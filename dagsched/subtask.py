"""Sub-tasks (vertices) of a DAG task and their per-vertex timing bounds."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

_DEADLINE_CEILING = 99999.0


class SubTaskMode(Enum):
    """Role of a vertex in a (possibly conditional) DAG."""

    NORMAL = 0
    C_INTERN = 1
    C_SOURCE = 2
    C_SINK = 3


@dataclass(eq=False)
class SubTask:
    """A vertex of a DAG task.

    Timing fields set to -1 have not been computed yet.
    """

    id: int = 0
    depth: int = 0
    width: int = 0
    gamma: int = 0  # type of core
    core: int = 0  # assigned core
    prio: int = 0
    c: float = 0.0  # WCET
    acc_work: float = 0.0
    r: float = 0.0  # response time
    local_o: float = -1.0  # local offset (earliest starting time)
    local_d: float = -1.0  # local deadline (latest finishing time)
    eft: float = -1.0  # earliest finishing time
    lst: float = -1.0  # latest starting time
    mode: SubTaskMode = SubTaskMode.NORMAL
    succ: list[SubTask] = field(default_factory=list, repr=False)
    pred: list[SubTask] = field(default_factory=list, repr=False)

    def cond_pred(self) -> list[int]:
        """Ids of the predecessors that are conditional sources."""
        return [p.id for p in self.pred if p.mode is SubTaskMode.C_SOURCE]

    def compute_local_offset(self) -> None:
        """Set the local offset from the predecessors' offsets and WCETs."""
        self.local_o = max((p.local_o + p.c for p in self.pred), default=0.0)
        self.local_o = max(self.local_o, 0.0)

    def compute_earliest_finishing_time(self) -> None:
        """Set the earliest finishing time; needs the local offset."""
        if self.local_o == -1:
            raise ValueError("Requires local offsets to be computed")
        self.eft = self.local_o + self.c

    def compute_local_deadline(self, task_deadline: float) -> None:
        """Set the local deadline from the successors' deadlines and WCETs."""
        if not self.succ:
            self.local_d = task_deadline
        else:
            self.local_d = min(
                min(s.local_d - s.c for s in self.succ), _DEADLINE_CEILING
            )

    def compute_latest_starting_time(self) -> None:
        """Set the latest starting time; needs the local deadline."""
        if self.local_d == -1:
            raise ValueError("Requires local deadlines to be computed")
        self.lst = self.local_d - self.c