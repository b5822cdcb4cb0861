from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from colorama import Fore, init as colorama_init

from .schedulers import Policy
from .simulator import simulate, SimulationResult
from .utils import parse_process_file


DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class Scenario:
    policy: Policy
    input_name: str
    output_name: str


DEFAULT_SCENARIOS: Tuple[Scenario, ...] = (
    Scenario(Policy.FCFS, "fcfs.txt", "fcfs_results.txt"),
    Scenario(Policy.SJF, "sjf.txt", "sjf_results.txt"),
    Scenario(Policy.SRTF, "srtf.txt", "srtf_results.txt"),
)


@dataclass
class KernelConfig:
    input_dir: Path = DATA_DIR
    output_dir: Path = field(default_factory=Path.cwd)
    scenarios: Tuple[Scenario, ...] = DEFAULT_SCENARIOS


class OSKernel:
    """Runs each configured scenario independently and writes its trace.

    Every scenario gets freshly parsed processes and fresh pools, so runs
    never see each other's state.
    """

    def __init__(self, config: KernelConfig | None = None):
        self.config = config or KernelConfig()

    def input_path(self, scenario: Scenario) -> Path:
        return Path(self.config.input_dir) / scenario.input_name

    def output_path(self, scenario: Scenario) -> Path:
        return Path(self.config.output_dir) / scenario.output_name

    def missing_inputs(self) -> List[Path]:
        return [self.input_path(s) for s in self.config.scenarios if not self.input_path(s).exists()]

    def run_scenario(self, scenario: Scenario) -> SimulationResult:
        path = self.input_path(scenario)
        parsed = parse_process_file(str(path))
        if parsed.complete:
            print(Fore.CYAN + f"Finished processing {path.name}")
        else:
            print(Fore.YELLOW + f"Error reading! Invalid format! ({path.name}, line {parsed.error_line})")

        result = simulate(parsed.processes, policy=scenario.policy)

        out = self.output_path(scenario)
        out.parent.mkdir(parents=True, exist_ok=True)
        result.logger.write_trace(str(out), title=scenario.policy.title)
        print(Fore.CYAN + f"{scenario.policy.value} simulation trace written to: {out}")
        return result

    def run(self) -> List[SimulationResult]:
        """Run every scenario. Raises FileNotFoundError before any run starts
        if an input file is missing."""
        missing = self.missing_inputs()
        if missing:
            raise FileNotFoundError(f"No such file: {', '.join(str(p) for p in missing)}")
        return [self.run_scenario(s) for s in self.config.scenarios]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run the FCFS, SJF and SRTF trace scenarios")
    p.add_argument("--input-dir", type=Path, default=DATA_DIR,
                   help="Directory holding fcfs.txt, sjf.txt and srtf.txt (default: bundled samples)")
    p.add_argument("--output-dir", type=Path, default=Path.cwd(),
                   help="Directory for the *_results.txt traces (default: current directory)")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    colorama_init(autoreset=True)
    args = parse_args(argv)
    kernel = OSKernel(KernelConfig(input_dir=args.input_dir, output_dir=args.output_dir))
    try:
        kernel.run()
    except FileNotFoundError as e:
        print(Fore.RED + str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
