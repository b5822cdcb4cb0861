from __future__ import annotations

from typing import Dict, List, Optional, Tuple
import os
import matplotlib.pyplot as plt

from .core import ProcessState
from .utils import TraceEvent


def ensure_dir(path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def state_intervals(events: List[TraceEvent], state: ProcessState) -> Dict[int, List[Tuple[int, int]]]:
    """(start, end) spans each pid spent in `state`, read off the trace."""
    spans: Dict[int, List[Tuple[int, int]]] = {}
    entered: Dict[int, int] = {}
    for e in events:
        if e.old_state == state and e.pid in entered:
            spans.setdefault(e.pid, []).append((entered.pop(e.pid), e.time))
        if e.new_state == state:
            entered[e.pid] = e.time
    return spans


def plot_gantt(events: List[TraceEvent], title: str = "CPU Gantt Chart", out_path: Optional[str] = None) -> None:
    running = state_intervals(events, ProcessState.RUNNING)
    waiting = state_intervals(events, ProcessState.WAITING)
    pids_order = sorted({e.pid for e in events})
    y_positions = {pid: i for i, pid in enumerate(pids_order)}
    colors = plt.get_cmap("tab10")

    fig, ax = plt.subplots(figsize=(12, 3 + 0.3 * max(1, len(pids_order))))

    for pid, spans in waiting.items():
        for start, end in spans:
            ax.barh(y_positions[pid], end - start, left=start, color="#dddddd", hatch="//", edgecolor="#999999")

    for pid, spans in running.items():
        for start, end in spans:
            ax.barh(y_positions[pid], end - start, left=start, color=colors(y_positions[pid] % 10), edgecolor="black", alpha=0.9)

    ax.set_yticks([y_positions[pid] for pid in pids_order])
    ax.set_yticklabels([f"pid {pid}" for pid in pids_order])
    ax.set_xlabel("Time")
    ax.set_title(title)
    ax.grid(True, axis="x", linestyle=":", alpha=0.5)
    fig.tight_layout()

    if out_path:
        ensure_dir(out_path)
        fig.savefig(out_path, dpi=150)
        plt.close(fig)
    else:
        plt.show()
