import os
import sys

import pytest

# headless plotting for visualizer tests
os.environ.setdefault("MPLBACKEND", "Agg")


def pytest_sessionstart(session):
    # Ensure repo root is on sys.path so 'process_state_simulator' can be imported
    here = os.path.dirname(os.path.abspath(__file__))
    repo_root = os.path.abspath(os.path.join(here, os.pardir, os.pardir))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


SAMPLE_LINES = [
    "1,0,22,5,1,2",
    "3,12,12,5,1,2",
    "5,17,14,5,1,2",
    "2,9,11,5,1,2",
    "4,13,11,5,1,2",
]


@pytest.fixture
def sample_lines():
    return list(SAMPLE_LINES)


@pytest.fixture
def sample_processes():
    """The bundled sample workload with I/O and a quantum of 2."""
    from process_state_simulator.backend.utils import parse_process_lines
    return parse_process_lines(SAMPLE_LINES).processes


@pytest.fixture
def cpu_only_processes():
    """Workload without I/O or preemption."""
    from process_state_simulator.backend.core import Process
    return [
        Process.from_fields(1, 0, 8, 0, 0, 0),
        Process.from_fields(2, 1, 4, 0, 0, 0),
        Process.from_fields(3, 2, 9, 0, 0, 0),
        Process.from_fields(4, 3, 5, 0, 0, 0),
    ]


@pytest.fixture
def sample_dir(tmp_path):
    for name in ("fcfs.txt", "sjf.txt", "srtf.txt"):
        (tmp_path / name).write_text("\n".join(SAMPLE_LINES) + "\n")
    return tmp_path
