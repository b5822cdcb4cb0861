from __future__ import annotations

from pathlib import Path

import pytest

from process_state_simulator.backend.os_kernel import (
    DATA_DIR, DEFAULT_SCENARIOS, KernelConfig, OSKernel, Scenario, main,
)
from process_state_simulator.backend.schedulers import Policy


def test_kernel_runs_all_scenarios(sample_dir, tmp_path):
    out = tmp_path / "out"
    kernel = OSKernel(KernelConfig(input_dir=sample_dir, output_dir=out))
    results = kernel.run()

    assert [r.policy for r in results] == [Policy.FCFS, Policy.SJF, Policy.SRTF]
    assert all(r.all_terminated for r in results)
    for scenario in DEFAULT_SCENARIOS:
        lines = (out / scenario.output_name).read_text().splitlines()
        assert lines[0] == scenario.policy.title
        assert lines[1] == "time\tpid\told state\tnew state"
        assert lines[2] == "0\t1\tNEW\t\tREADY"


def test_runs_are_independent(sample_dir, tmp_path):
    kernel = OSKernel(KernelConfig(input_dir=sample_dir, output_dir=tmp_path))
    first = kernel.run()
    second = kernel.run()
    assert [r.events for r in first] == [r.events for r in second]


def test_missing_input_stops_before_any_run(sample_dir, tmp_path):
    (sample_dir / "sjf.txt").unlink()
    out = tmp_path / "out"
    kernel = OSKernel(KernelConfig(input_dir=sample_dir, output_dir=out))
    assert kernel.missing_inputs() == [sample_dir / "sjf.txt"]
    with pytest.raises(FileNotFoundError):
        kernel.run()
    assert not (out / "fcfs_results.txt").exists()


def test_malformed_input_still_runs(sample_dir, tmp_path, capsys):
    (sample_dir / "fcfs.txt").write_text("1,0,4,0,0,0\nbroken\n2,0,4,0,0,0\n")
    kernel = OSKernel(KernelConfig(input_dir=sample_dir, output_dir=tmp_path,
                                   scenarios=(Scenario(Policy.FCFS, "fcfs.txt", "fcfs_results.txt"),)))
    [result] = kernel.run()
    assert [p.pid for p in result.processes] == [1]
    assert "Invalid format" in capsys.readouterr().out


def test_main_exit_codes(sample_dir, tmp_path):
    assert main(["--input-dir", str(sample_dir), "--output-dir", str(tmp_path)]) == 0
    assert (tmp_path / "srtf_results.txt").exists()
    assert main(["--input-dir", str(tmp_path / "empty"), "--output-dir", str(tmp_path)]) == 1


def test_bundled_samples_present():
    kernel = OSKernel()
    assert Path(kernel.config.input_dir) == DATA_DIR
    assert kernel.missing_inputs() == []
