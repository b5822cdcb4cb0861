from __future__ import annotations

from typing import Callable, Dict, List, Optional
from dataclasses import dataclass

from .core import NEVER, Process, ProcessPools, ProcessState, SimulationError, Transition, clamp_time
from .schedulers import Policy
from .utils import (
    EventLogger,
    ProcessStats,
    TraceEvent,
    compute_avg,
    compute_cpu_utilization,
    compute_process_stats,
)


INITIAL_TIME = 0


@dataclass(frozen=True)
class Candidate:
    time: int
    transition: Transition

    @property
    def feasible(self) -> bool:
        return self.time != NEVER

    def sort_key(self):
        return (self.time, self.transition.tie_rank)


@dataclass
class SimulationResult:
    policy: Policy
    processes: List[Process]
    total_time: int
    logger: EventLogger
    stats: Dict[int, ProcessStats]
    avg_turnaround_time: float
    avg_ready_time: float
    cpu_utilization: float

    @property
    def events(self) -> List[TraceEvent]:
        return self.logger.events

    @property
    def all_terminated(self) -> bool:
        return all(s.completion_time is not None for s in self.stats.values()) and \
            len(self.stats) == len(self.processes)


def candidate_times(pools: ProcessPools, current_time: int) -> List[Candidate]:
    """Earliest time each transition could happen, NEVER when it cannot."""
    times = {t: NEVER for t in Transition}

    if not pools.new.is_empty():
        times[Transition.NEW_TO_READY] = pools.new.peek_head().arrival

    if not pools.ready.is_empty() and pools.running.is_empty():
        times[Transition.READY_TO_RUNNING] = max(current_time, pools.ready.peek_head().arrival)

    if not pools.running.is_empty():
        running = pools.running.peek_head()
        if running.does_io:
            times[Transition.RUNNING_TO_WAITING] = running.last_dispatch + running.io_freq
        times[Transition.RUNNING_TO_TERMINATED] = running.last_dispatch + running.remaining
        times[Transition.RUNNING_TO_READY] = running.last_dispatch + running.quantum

    if not pools.waiting.is_empty():
        waiting = pools.waiting.peek_head()
        # a head queued behind a longer wait leaves no earlier than now
        times[Transition.WAITING_TO_READY] = max(current_time, waiting.last_io_start + waiting.io_dur)

    return [Candidate(clamp_time(t), transition) for transition, t in times.items()]


def select_next(pools: ProcessPools, current_time: int) -> Optional[Candidate]:
    """Pick the next transition: least time, then least tie rank."""
    feasible = [c for c in candidate_times(pools, current_time) if c.feasible]
    if not feasible:
        return None
    return min(feasible, key=Candidate.sort_key)


def execute_transition(
    pools: ProcessPools,
    transition: Transition,
    current_time: int,
    policy: Policy,
    logger: Optional[EventLogger] = None,
) -> TraceEvent:
    """Apply one transition and return its trace event.

    Raises EmptyPoolError if the source pool is empty.
    """
    proc = pools.move(transition)
    must_sort = False

    if transition == Transition.NEW_TO_READY:
        must_sort = True
    elif transition == Transition.READY_TO_RUNNING:
        proc.last_dispatch = current_time
    elif transition == Transition.RUNNING_TO_TERMINATED:
        proc.remaining = 0
    elif transition == Transition.RUNNING_TO_WAITING:
        proc.remaining -= proc.io_freq
        proc.last_io_start = current_time
    elif transition == Transition.WAITING_TO_READY:
        must_sort = True
    elif transition == Transition.RUNNING_TO_READY:
        proc.remaining -= proc.quantum
        must_sort = True

    if must_sort and policy.reorders_ready:
        pools.ready.reorder(policy)

    if logger is None:
        return TraceEvent(current_time, proc.pid, transition.source, transition.destination)
    return logger.log_transition(current_time, proc.pid, transition.source, transition.destination)


def step_limit(processes: List[Process]) -> int:
    # Each non-final CPU burst takes at least one time unit and costs at most
    # three transitions; every process adds three more to arrive, run and end.
    return 3 * sum(p.total_burst for p in processes) + 3 * len(processes) + 1


def simulate(
    processes: List[Process],
    policy: Policy = Policy.FCFS,
    observer: Optional[Callable[[TraceEvent, ProcessPools], None]] = None,
    max_steps: Optional[int] = None,
) -> SimulationResult:
    """Run one policy over copies of `processes` until nothing can move.

    The caller's records are left untouched, so the same list can be run
    again or under another policy. `observer` is called after every
    transition with the event and the pools.
    """
    records = sorted((p.copy() for p in processes), key=Policy.FCFS.sort_key)
    pools = ProcessPools(records)
    logger = EventLogger()
    limit = step_limit(records) if max_steps is None else max_steps
    time_now = INITIAL_TIME

    steps = 0
    while True:
        nxt = select_next(pools, time_now)
        if nxt is None:
            break
        if steps >= limit:
            raise SimulationError(f"{policy.value} run did not finish within {limit} transitions")
        time_now = nxt.time
        event = execute_transition(pools, nxt.transition, time_now, policy, logger)
        steps += 1
        if observer is not None:
            observer(event, pools)

    stats = compute_process_stats(logger.events)
    turnarounds = [s.turnaround_time for s in stats.values() if s.turnaround_time is not None]
    result = SimulationResult(
        policy=policy,
        processes=records,
        total_time=time_now,
        logger=logger,
        stats=stats,
        avg_turnaround_time=compute_avg(turnarounds),
        avg_ready_time=compute_avg([s.ready_time for s in stats.values()]),
        cpu_utilization=compute_cpu_utilization(logger.events),
    )
    pools.reset()
    return result


def final_states(result: SimulationResult) -> Dict[int, ProcessState]:
    """Last state each pid reached in the trace."""
    states: Dict[int, ProcessState] = {p.pid: ProcessState.NEW for p in result.processes}
    for e in result.events:
        states[e.pid] = e.new_state
    return states
