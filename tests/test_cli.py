import json
from pathlib import Path

from schedsim.cli import main
from schedsim.settings import Settings


def test_run_sample_fcfs(capsys):
    assert main(["run", "--sample", "-a", "fcfs"]) == 0
    out = capsys.readouterr().out
    assert "First Come First Serve" in out
    assert "13.40" in out
    assert "20.60" in out


def test_run_plain_gantt(capsys):
    assert main(["run", "--sample", "-a", "sjf", "--plain"]) == 0
    out = capsys.readouterr().out
    assert "Gantt Chart:" in out
    assert "8.60" in out


def test_run_workload_file(tmp_path: Path, capsys):
    p = tmp_path / "w.json"
    p.write_text(json.dumps([
        {"pid": 1, "arrival_time": 0, "burst_time": 4},
        {"pid": 2, "arrival_time": 2, "burst_time": 2},
    ]))
    assert main(["run", "-w", str(p), "-a", "rr", "-q", "2"]) == 0
    out = capsys.readouterr().out
    assert "Quantum:" in out


def test_run_step_animation(capsys):
    assert main(["run", "--sample", "-a", "srtf", "--step", "--step-delay", "0"]) == 0
    out = capsys.readouterr().out
    assert "t= 0" in out


def test_invalid_quantum_is_reported(capsys):
    assert main(["run", "--sample", "-a", "rr", "-q", "0"]) == 2
    assert "Error" in capsys.readouterr().out


def test_missing_workload_is_reported(tmp_path: Path, capsys):
    assert main(["run", "-w", str(tmp_path / "missing.json")]) == 2
    assert "Error" in capsys.readouterr().out


def test_compare(capsys):
    assert main(["compare", "--sample", "-a", "fcfs", "srtf"]) == 0
    out = capsys.readouterr().out
    assert "13.40" in out
    assert "8.60" in out


def test_list(capsys):
    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "fcfs" in out
    assert "srtf" in out


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SCHEDSIM_DEFAULT_QUANTUM", "5")
    monkeypatch.setenv("SCHEDSIM_DEFAULT_PRIORITY_MODE", "high")
    s = Settings()
    assert s.DEFAULT_QUANTUM == 5
    assert s.DEFAULT_PRIORITY_MODE == "high"
