"""
Scheduling policies: FCFS, SJF and SRTF orderings for the ready pool.
Round-Robin preemption is a per-process quantum and works under any policy.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict

from .core import Process


def sort_fcfs(proc: Process) -> int:
    """Earliest arrival first."""
    return proc.arrival


def sort_sjf(proc: Process) -> int:
    """Least total CPU time first."""
    return proc.total_burst


def sort_srtf(proc: Process) -> int:
    """Least remaining CPU time first."""
    return proc.remaining


class Policy(Enum):
    FCFS = "FCFS"   # non-preemptive First-Come, First-Served
    SJF = "SJF"     # non-preemptive Shortest Job First
    SRTF = "SRTF"   # Shortest Remaining Time First

    @property
    def sort_key(self) -> Callable[[Process], int]:
        return _SORT_KEYS[self]

    @property
    def reorders_ready(self) -> bool:
        # arrival order already is FCFS order
        return self is not Policy.FCFS

    @property
    def title(self) -> str:
        return _TITLES[self]

    @classmethod
    def parse(cls, name: str) -> "Policy":
        try:
            return cls(name.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown policy {name!r}; expected one of {', '.join(p.value for p in cls)}")


_SORT_KEYS: Dict[Policy, Callable[[Process], int]] = {
    Policy.FCFS: sort_fcfs,
    Policy.SJF: sort_sjf,
    Policy.SRTF: sort_srtf,
}

_TITLES: Dict[Policy, str] = {
    Policy.FCFS: "--- FIRST COME FIRST SERVE SCHEDULING SIMULATION ---",
    Policy.SJF: "--- SHORTEST JOB FIRST SCHEDULING SIMULATION ---",
    Policy.SRTF: "--- SHORTEST REMAINING TIME FIRST SCHEDULING SIMULATION ---",
}
