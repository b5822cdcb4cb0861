from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Dict, Iterable, List, Optional, Any
import json
import csv

import pandas as pd

from .core import Process, ProcessState


TRACE_HEADER = "time\tpid\told state\tnew state"


@dataclass(frozen=True)
class TraceEvent:
    time: int
    pid: int
    old_state: ProcessState
    new_state: ProcessState

    def to_row(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "pid": self.pid,
            "old_state": self.old_state.value,
            "new_state": self.new_state.value,
        }

    def format_line(self) -> str:
        return f"{self.time}\t{self.pid}\t{self.old_state.value}\t\t{self.new_state.value}"


class EventLogger:
    def __init__(self) -> None:
        self.events: List[TraceEvent] = []

    def log_transition(self, time_s: int, pid: int, old: ProcessState, new: ProcessState) -> TraceEvent:
        event = TraceEvent(time_s, pid, old, new)
        self.events.append(event)
        return event

    def clear(self) -> None:
        self.events.clear()

    def __len__(self) -> int:
        return len(self.events)

    def format_trace(self, title: Optional[str] = None) -> List[str]:
        lines: List[str] = []
        if title:
            lines.append(title)
        lines.append(TRACE_HEADER)
        lines.extend(e.format_line() for e in self.events)
        return lines

    def write_trace(self, path: str, title: Optional[str] = None) -> None:
        with open(path, "w", encoding="utf-8") as f:
            for line in self.format_trace(title):
                f.write(line + "\n")

    def export_json(self, path: str) -> None:
        data = {"events": [e.to_row() for e in self.events]}
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def export_csv(self, path: str) -> None:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=["time", "pid", "old_state", "new_state"])
            writer.writeheader()
            for e in self.events:
                writer.writerow(e.to_row())


@dataclass
class ParseResult:
    """Processes read from an input source.

    `complete` is False when reading stopped at a malformed line; in that
    case `error_line` holds its 1-based line number and `processes` holds
    everything parsed before it.
    """
    processes: List[Process] = field(default_factory=list)
    complete: bool = True
    error_line: Optional[int] = None


def parse_process_line(line: str) -> Process:
    """Parse `pid,arrival,total,io_freq,io_dur,quantum`. Raises ValueError."""
    fields = line.split(",")
    if len(fields) != 6:
        raise ValueError(f"expected 6 comma separated values, got {len(fields)}")
    pid, arrival, total, io_freq, io_dur, quantum = (int(x.strip()) for x in fields)
    return Process.from_fields(pid, arrival, total, io_freq, io_dur, quantum)


def parse_process_lines(lines: Iterable[str]) -> ParseResult:
    result = ParseResult()
    for lineno, raw in enumerate(lines, start=1):
        if not raw.strip():
            continue
        try:
            result.processes.append(parse_process_line(raw))
        except ValueError:
            result.complete = False
            result.error_line = lineno
            break
    return result


def parse_process_file(path: str) -> ParseResult:
    """Read a process file. A missing file raises FileNotFoundError."""
    with open(path, encoding="utf-8") as f:
        return parse_process_lines(f)


@dataclass
class ProcessStats:
    """Per-process figures derived from a trace."""
    pid: int
    arrival: Optional[int] = None
    completion_time: Optional[int] = None
    cpu_time: int = 0
    ready_time: int = 0
    waiting_io_time: int = 0
    dispatches: int = 0

    @property
    def turnaround_time(self) -> Optional[int]:
        if self.completion_time is None or self.arrival is None:
            return None
        return self.completion_time - self.arrival


def compute_process_stats(events: List[TraceEvent]) -> Dict[int, ProcessStats]:
    stats: Dict[int, ProcessStats] = {}
    entered: Dict[int, int] = {}
    for e in events:
        s = stats.setdefault(e.pid, ProcessStats(pid=e.pid))
        since = entered.get(e.pid, e.time)
        spent = e.time - since
        if e.old_state == ProcessState.NEW:
            s.arrival = e.time
        elif e.old_state == ProcessState.READY:
            s.ready_time += spent
        elif e.old_state == ProcessState.RUNNING:
            s.cpu_time += spent
        elif e.old_state == ProcessState.WAITING:
            s.waiting_io_time += spent
        if e.new_state == ProcessState.RUNNING:
            s.dispatches += 1
        elif e.new_state == ProcessState.TERMINATED:
            s.completion_time = e.time
        entered[e.pid] = e.time
    return stats


def compute_avg(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_cpu_utilization(events: List[TraceEvent]) -> float:
    """Percent of the span from first to last event with a process running."""
    if not events:
        return 0.0
    span = events[-1].time - events[0].time
    if span <= 0:
        return 0.0
    busy = sum(s.cpu_time for s in compute_process_stats(events).values())
    return busy / span * 100


def trace_frame(events: List[TraceEvent]) -> pd.DataFrame:
    return pd.DataFrame([e.to_row() for e in events], columns=["time", "pid", "old_state", "new_state"])


def stats_frame(stats: Dict[int, ProcessStats]) -> pd.DataFrame:
    rows = []
    for s in sorted(stats.values(), key=lambda x: x.pid):
        row = asdict(s)
        row["turnaround_time"] = s.turnaround_time
        rows.append(row)
    columns = ["pid", "arrival", "completion_time", "turnaround_time", "cpu_time",
               "ready_time", "waiting_io_time", "dispatches"]
    return pd.DataFrame(rows, columns=columns).set_index("pid")
