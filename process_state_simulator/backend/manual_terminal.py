from __future__ import annotations

import shlex
from typing import List, Optional
from colorama import Fore, Style, init as colorama_init

from .core import NEVER, Process
from .schedulers import Policy
from .simulator import simulate, SimulationResult
from .utils import parse_process_file, parse_process_line, stats_frame
from .visualizer import plot_gantt


def _show(value: int) -> str:
    return "-" if value == NEVER else str(value)


class ManualTerminal:
    def __init__(self) -> None:
        colorama_init(autoreset=True)
        self.processes: List[Process] = []
        self.last_result: Optional[SimulationResult] = None

    def prompt(self) -> None:
        print(Fore.CYAN + "Process state simulator. Type 'help' for commands.")
        while True:
            try:
                raw = input(Fore.GREEN + "> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if not raw.strip():
                continue
            self.handle_command(raw)

    def handle_command(self, raw: str) -> None:
        try:
            parts = shlex.split(raw)
        except ValueError as e:
            print(Fore.RED + f"Parse error: {e}")
            return
        if not parts:
            return
        cmd, *args = parts
        cmd = cmd.lower()
        if cmd == "help":
            self._help()
        elif cmd == "add":
            self._add(args)
        elif cmd == "load":
            self._load(args)
        elif cmd == "list":
            self._list()
        elif cmd == "clear":
            self.processes = []
            self.last_result = None
            print(Fore.CYAN + "Process list cleared")
        elif cmd == "run":
            self._run(args)
        elif cmd == "trace":
            self._trace()
        elif cmd == "stats":
            self._stats()
        elif cmd == "exit" or cmd == "quit":
            raise SystemExit(0)
        else:
            print(Fore.YELLOW + "Unknown command. Type 'help'.")

    def _help(self) -> None:
        print("Commands:")
        print("  add <pid>,<arrival>,<burst>,<io_freq>,<io_dur>,<quantum>")
        print("  load <path>")
        print("  list")
        print("  clear")
        print("  run [--policy FCFS|SJF|SRTF] [--out path] [--plot path]")
        print("  trace")
        print("  stats")
        print("  exit")

    def _add(self, args: List[str]) -> None:
        if not args:
            print(Fore.RED + "Usage: add <pid>,<arrival>,<burst>,<io_freq>,<io_dur>,<quantum>")
            return
        try:
            proc = parse_process_line("".join(args))
        except ValueError as e:
            print(Fore.RED + f"Invalid process: {e}")
            return
        self.processes.append(proc)
        print(Fore.CYAN + f"Process {proc.pid} added: arrival={proc.arrival}, burst={proc.total_burst}")

    def _load(self, args: List[str]) -> None:
        if len(args) != 1:
            print(Fore.RED + "Usage: load <path>")
            return
        try:
            parsed = parse_process_file(args[0])
        except OSError as e:
            print(Fore.RED + f"Cannot read {args[0]}: {e}")
            return
        self.processes.extend(parsed.processes)
        if not parsed.complete:
            print(Fore.YELLOW + f"Stopped at malformed line {parsed.error_line}")
        print(Fore.CYAN + f"Loaded {len(parsed.processes)} process(es) from {args[0]}")

    def _list(self) -> None:
        if not self.processes:
            print("No processes yet")
            return
        for p in self.processes:
            print(f"{p.pid}: arrival={p.arrival}, burst={p.total_burst}, io_freq={_show(p.io_freq)}, "
                  f"io_dur={_show(p.io_dur)}, quantum={_show(p.quantum)}")

    def _run(self, args: List[str]) -> None:
        policy = Policy.FCFS
        out_path: Optional[str] = None
        plot_path: Optional[str] = None
        it = iter(args)
        for token in it:
            if token == "--policy":
                try:
                    policy = Policy.parse(next(it, ""))
                except ValueError as e:
                    print(Fore.RED + str(e))
                    return
            elif token == "--out":
                out_path = next(it, None)
            elif token == "--plot":
                plot_path = next(it, None)

        if not self.processes:
            print(Fore.YELLOW + "No processes to run")
            return

        result = simulate(self.processes, policy=policy)
        self.last_result = result
        print(Style.BRIGHT + f"{policy.value} finished at t={result.total_time} after {len(result.events)} transitions. "
              f"Avg turnaround: {result.avg_turnaround_time:.2f}, CPU utilization: {result.cpu_utilization:.1f}%")
        if out_path:
            result.logger.write_trace(out_path, title=policy.title)
            print(Fore.CYAN + f"Saved trace to {out_path}")
        if plot_path:
            plot_gantt(result.events, title=policy.title, out_path=plot_path)
            print(Fore.CYAN + f"Saved plot to {plot_path}")

    def _trace(self) -> None:
        if not self.last_result:
            print("No simulation yet")
            return
        for line in self.last_result.logger.format_trace(self.last_result.policy.title):
            print(line)

    def _stats(self) -> None:
        if not self.last_result:
            print("No simulation yet")
            return
        r = self.last_result
        print(stats_frame(r.stats).to_string())
        print(f"Avg turnaround time: {r.avg_turnaround_time:.3f}")
        print(f"Avg ready time: {r.avg_ready_time:.3f}")
        print(f"CPU utilization: {r.cpu_utilization:.1f}%")


def main() -> None:
    ManualTerminal().prompt()


if __name__ == "__main__":
    main()
