"""
Core data structures for the process state simulator.
Includes the process record, the five state pools and the transition kinds.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, Iterator, List, Optional
import sys


# Time value meaning "this never happens". Candidate times at or beyond it
# are clamped back to it so they can never win a minimum selection.
NEVER = sys.maxsize


class EmptyPoolError(IndexError):
    """Raised when the head or tail of an empty pool is accessed."""


class SimulationError(RuntimeError):
    """Raised when a run cannot reach a terminal state."""


class ProcessState(Enum):
    """Process states in the system."""
    NEW = "NEW"
    READY = "READY"
    RUNNING = "RUNNING"
    WAITING = "WAITING"
    TERMINATED = "TERMINATED"


class Transition(Enum):
    """Every move a process can make between two pools.

    The value is (source, destination, tie rank). When two transitions are
    due at the same instant the lower rank is applied first, so every
    process entering Ready at time t is queued before a dispatch at t.
    """
    WAITING_TO_READY = (ProcessState.WAITING, ProcessState.READY, 0)
    NEW_TO_READY = (ProcessState.NEW, ProcessState.READY, 1)
    RUNNING_TO_TERMINATED = (ProcessState.RUNNING, ProcessState.TERMINATED, 2)
    RUNNING_TO_READY = (ProcessState.RUNNING, ProcessState.READY, 3)
    RUNNING_TO_WAITING = (ProcessState.RUNNING, ProcessState.WAITING, 4)
    READY_TO_RUNNING = (ProcessState.READY, ProcessState.RUNNING, 5)

    @property
    def source(self) -> ProcessState:
        return self.value[0]

    @property
    def destination(self) -> ProcessState:
        return self.value[1]

    @property
    def tie_rank(self) -> int:
        return self.value[2]


def clamp_time(value: int) -> int:
    """Return value, or NEVER if it is negative or past the sentinel."""
    if value < 0 or value >= NEVER:
        return NEVER
    return value


@dataclass
class Process:
    """One simulated process.

    Use `Process.from_fields` to build a record from raw input values; it
    applies the clamping and NEVER substitution. The plain constructor
    trusts its arguments.
    """
    pid: int
    arrival: int
    total_burst: int
    io_freq: int = NEVER
    io_dur: int = NEVER
    quantum: int = NEVER
    remaining: Optional[int] = None
    last_dispatch: int = 0
    last_io_start: int = 0

    def __post_init__(self):
        self.remaining = self.total_burst if self.remaining is None else self.remaining

    @classmethod
    def from_fields(cls, pid: int, arrival: int, total_burst: int,
                    io_freq: int, io_dur: int, quantum: int) -> "Process":
        return cls(
            pid=pid,
            arrival=max(0, arrival),
            total_burst=max(0, total_burst),
            io_freq=io_freq if io_freq > 0 else NEVER,
            io_dur=io_dur if io_dur > 0 else NEVER,
            quantum=quantum if quantum > 0 else NEVER,
        )

    def copy(self) -> "Process":
        """Fresh record with the same input fields and no run history."""
        return Process(self.pid, self.arrival, self.total_burst,
                       self.io_freq, self.io_dur, self.quantum)

    @property
    def does_io(self) -> bool:
        # an I/O wait with no duration could never end
        return self.io_freq != NEVER and self.io_dur != NEVER

    @property
    def is_preemptible(self) -> bool:
        return self.quantum != NEVER


class Pool:
    """Ordered container of the processes in one state."""

    def __init__(self, state: ProcessState, items: Optional[List[Process]] = None):
        self.state = state
        self._items: Deque[Process] = deque(items or [])

    def peek_head(self) -> Process:
        if not self._items:
            raise EmptyPoolError(f"{self.state.value} pool is empty")
        return self._items[0]

    def peek_tail(self) -> Process:
        if not self._items:
            raise EmptyPoolError(f"{self.state.value} pool is empty")
        return self._items[-1]

    def append_tail(self, proc: Process) -> None:
        self._items.append(proc)

    def pop_head(self) -> Process:
        if not self._items:
            raise EmptyPoolError(f"{self.state.value} pool is empty")
        return self._items.popleft()

    def reorder(self, policy) -> None:
        """Stable sort of all members by the policy's key."""
        self._items = deque(sorted(self._items, key=policy.sort_key))

    def is_empty(self) -> bool:
        return len(self._items) == 0

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Process]:
        return iter(self._items)

    def pids(self) -> List[int]:
        return [p.pid for p in self._items]


class ProcessPools:
    """The five pools of one run. Together they partition the process set."""

    def __init__(self, processes: Optional[List[Process]] = None):
        self._pools: Dict[ProcessState, Pool] = {state: Pool(state) for state in ProcessState}
        for proc in processes or []:
            self._pools[ProcessState.NEW].append_tail(proc)
        self.total = len(self)

    def __getitem__(self, state: ProcessState) -> Pool:
        return self._pools[state]

    @property
    def new(self) -> Pool:
        return self._pools[ProcessState.NEW]

    @property
    def ready(self) -> Pool:
        return self._pools[ProcessState.READY]

    @property
    def running(self) -> Pool:
        return self._pools[ProcessState.RUNNING]

    @property
    def waiting(self) -> Pool:
        return self._pools[ProcessState.WAITING]

    @property
    def terminated(self) -> Pool:
        return self._pools[ProcessState.TERMINATED]

    def move(self, transition: Transition) -> Process:
        """Move the source head to the destination tail and return it."""
        proc = self._pools[transition.source].pop_head()
        self._pools[transition.destination].append_tail(proc)
        return proc

    def sizes(self) -> Dict[ProcessState, int]:
        return {state: len(pool) for state, pool in self._pools.items()}

    def state_of(self, pid: int) -> Optional[ProcessState]:
        for state, pool in self._pools.items():
            if pid in pool.pids():
                return state
        return None

    def all_processes(self) -> List[Process]:
        return [p for pool in self._pools.values() for p in pool]

    def reset(self) -> None:
        for pool in self._pools.values():
            pool.clear()
        self.total = 0

    def __len__(self) -> int:
        return sum(len(pool) for pool in self._pools.values())
