import pytest

from schedsim.engine import resolve_policy, resolve_priority_mode, run_algorithm
from schedsim.errors import (
    DuplicateProcessId,
    InvalidArrivalTime,
    InvalidBurstTime,
    InvalidPriority,
    InvalidPriorityMode,
    InvalidQuantum,
    SchedulingError,
    UnknownAlgorithm,
)
from schedsim.models import PriorityMode, Process, SchedulingPolicy
from schedsim.workload_io import sample_workload


def test_dispatches_to_requested_policy():
    res = run_algorithm("fcfs", sample_workload())
    assert res.policy == SchedulingPolicy.FCFS
    assert res.algorithm == "First Come First Serve (FCFS)"
    assert res.system.avg_waiting == pytest.approx(13.4)


def test_accepts_camel_case_aliases():
    assert resolve_policy("roundRobin") == SchedulingPolicy.ROUND_ROBIN
    assert resolve_policy("priorityPreemptive") == SchedulingPolicy.PRIORITY_PREEMPTIVE
    assert resolve_policy("priorityRoundRobin") == SchedulingPolicy.PRIORITY_ROUND_ROBIN
    assert resolve_policy(" SRTF ") == SchedulingPolicy.SRTF
    assert resolve_priority_mode("highFirst") == PriorityMode.HIGH_FIRST
    assert resolve_priority_mode(None) == PriorityMode.LOW_FIRST


def test_quantum_ignored_outside_round_robin():
    res = run_algorithm("sjf", sample_workload(), quantum=0)
    assert res.quantum is None


@pytest.mark.parametrize("name", ["fcfs", "sjf", "srtf", "rr"])
def test_priority_mode_ignored_outside_priority_policies(name):
    res = run_algorithm(name, sample_workload(), quantum=3, priority_mode="medium")
    assert len(res.processes) == 5
    assert res.priority_mode is None


@pytest.mark.parametrize("name", ["priority", "priority_preemptive", "priority_rr"])
def test_unknown_priority_mode_rejected_for_priority_policies(name):
    with pytest.raises(InvalidPriorityMode):
        run_algorithm(name, sample_workload(), quantum=3, priority_mode="medium")


def test_priority_mode_string_is_applied():
    res = run_algorithm("priority", sample_workload(), priority_mode="high")
    assert res.priority_mode == PriorityMode.HIGH_FIRST
    assert res.timeline[0].name == "P1"
    assert res.timeline[1].name == "P3"


def test_empty_process_set_is_not_an_error():
    res = run_algorithm("rr", [], quantum=2)
    assert res.timeline == []
    assert res.processes == []
    assert res.system.cpu_utilization == 0.0


@pytest.mark.parametrize(
    "process, error",
    [
        (Process(1, arrival_time=0, burst_time=0), InvalidBurstTime),
        (Process(1, arrival_time=0, burst_time=-3), InvalidBurstTime),
        (Process(1, arrival_time=-1, burst_time=2), InvalidArrivalTime),
    ],
)
def test_rejects_invalid_process(process, error):
    with pytest.raises(error):
        run_algorithm("fcfs", [process])


def test_priority_only_checked_for_priority_policies():
    procs = [Process(1, arrival_time=0, burst_time=2, priority=0)]
    assert run_algorithm("fcfs", procs).processes[0].completion_time == 2

    for name in ("priority", "priority_preemptive", "priority_rr"):
        with pytest.raises(InvalidPriority):
            run_algorithm(name, procs, quantum=2)


@pytest.mark.parametrize("name", ["rr", "priority_rr"])
@pytest.mark.parametrize("quantum", [None, 0, -2])
def test_rejects_bad_quantum(name, quantum):
    with pytest.raises(InvalidQuantum):
        run_algorithm(name, sample_workload(), quantum=quantum)


def test_rejects_duplicate_ids():
    procs = [
        Process(1, arrival_time=0, burst_time=2),
        Process(1, arrival_time=1, burst_time=2),
    ]
    with pytest.raises(DuplicateProcessId):
        run_algorithm("fcfs", procs)


def test_rejects_unknown_algorithm_and_mode():
    with pytest.raises(UnknownAlgorithm):
        run_algorithm("lottery", sample_workload())
    with pytest.raises(InvalidPriorityMode):
        run_algorithm("priority", sample_workload(), priority_mode="medium")


def test_errors_are_value_errors():
    assert issubclass(SchedulingError, ValueError)
    with pytest.raises(ValueError):
        run_algorithm("fcfs", [Process(1, arrival_time=0, burst_time=0)])


def test_rejection_is_logged(caplog):
    with caplog.at_level("WARNING", logger="schedsim.engine"):
        with pytest.raises(InvalidQuantum):
            run_algorithm("rr", sample_workload(), quantum=0)
    assert "Rejected run of 'rr'" in caplog.text


def test_accepts_any_iterable():
    res = run_algorithm("srtf", iter(sample_workload()))
    assert len(res.processes) == 5
