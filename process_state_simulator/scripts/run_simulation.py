from __future__ import annotations

import argparse
import os
import sys

# Ensure repo root is on sys.path when running as a script
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
REPO_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, os.pardir, os.pardir))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from colorama import Fore, init as colorama_init

from process_state_simulator.backend.schedulers import Policy
from process_state_simulator.backend.simulator import simulate
from process_state_simulator.backend.utils import parse_process_file, stats_frame
from process_state_simulator.backend.visualizer import plot_gantt


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Simulate one scheduling policy over a process file")
    p.add_argument("--policy", type=Policy.parse, default=Policy.FCFS, help="FCFS, SJF or SRTF")
    p.add_argument("--input", type=str, required=True, help="Process file, one pid,arrival,burst,io_freq,io_dur,quantum per line")
    p.add_argument("--out", type=str, default=None, help="Write the tab separated trace here (default: print it)")
    p.add_argument("--json", type=str, default=None, help="Also export the trace as JSON")
    p.add_argument("--csv", type=str, default=None, help="Also export the trace as CSV")
    p.add_argument("--plot", type=str, default=None, help="Save a Gantt chart image")
    p.add_argument("--stats", action="store_true", help="Print per-process statistics")
    return p.parse_args()


def main() -> None:
    colorama_init(autoreset=True)
    args = parse_args()
    try:
        parsed = parse_process_file(args.input)
    except FileNotFoundError:
        print(Fore.RED + f"No such file: {args.input}")
        sys.exit(1)
    if not parsed.complete:
        print(Fore.YELLOW + f"Error reading! Invalid format! Stopped at line {parsed.error_line}")

    result = simulate(parsed.processes, policy=args.policy)

    if args.out:
        result.logger.write_trace(args.out, title=args.policy.title)
        print(Fore.CYAN + f"{args.policy.value} simulation trace written to: {args.out}")
    else:
        for line in result.logger.format_trace(args.policy.title):
            print(line)
    if args.json:
        result.logger.export_json(args.json)
    if args.csv:
        result.logger.export_csv(args.csv)
    if args.stats:
        print(stats_frame(result.stats).to_string())
        print(f"Avg turnaround: {result.avg_turnaround_time:.3f}, Avg ready: {result.avg_ready_time:.3f}, "
              f"CPU utilization: {result.cpu_utilization:.1f}%")
    if args.plot:
        plot_gantt(result.events, title=args.policy.title, out_path=args.plot)
        print(Fore.CYAN + f"Saved plot to {args.plot}")


if __name__ == "__main__":
    main()
