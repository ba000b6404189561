from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List

from .models import Process


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    Rows without a pid get their 1-based row number; a pid used twice is
    reported with the row that repeats it.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    _check_unique_pids(processes)
    return processes


def _check_unique_pids(processes: List[Process]) -> None:
    first_row: dict[int, int] = {}
    for row, p in enumerate(processes, start=1):
        if p.pid in first_row:
            raise ValueError(
                f"Row {row}: process id {p.pid} already used by row {first_row[p.pid]} "
                "(rows without a pid take their row number)"
            )
        first_row[p.pid] = row


def sample_workload() -> List[Process]:
    """
    Five-process textbook exercise used as built-in demo data.
    """
    return [
        Process(pid=1, arrival_time=0, burst_time=11, priority=2),
        Process(pid=2, arrival_time=0, burst_time=3, priority=1),
        Process(pid=3, arrival_time=5, burst_time=9, priority=5),
        Process(pid=4, arrival_time=2, burst_time=4, priority=4),
        Process(pid=5, arrival_time=1, burst_time=9, priority=3),
    ]


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if isinstance(raw, dict) or not isinstance(raw, Iterable):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry, index) for index, entry in enumerate(raw, start=1)]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for index, row in enumerate(reader, start=1):
            processes.append(_process_from_mapping(row, index))
    return processes


def _optional(mapping, key: str):
    value = mapping.get(key)
    return None if value in (None, "") else value


def _process_from_mapping(mapping, index: int) -> Process:
    try:
        pid_val = _optional(mapping, "pid")
        pid = int(pid_val) if pid_val is not None else index
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])

        priority_val = _optional(mapping, "priority")
        priority = int(priority_val) if priority_val is not None else 1
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    name_val = _optional(mapping, "name")

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
        name=str(name_val) if name_val is not None else "",
    )
