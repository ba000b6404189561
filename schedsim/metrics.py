from __future__ import annotations

from typing import List

from .models import Process, ProcessMetrics, ScheduleResult, SystemMetrics


def build_process_metrics(process: Process, first_start: int, completion_time: int) -> ProcessMetrics:
    """
    Derive the per-process times once a process has finished.
    """
    turnaround_time = completion_time - process.arrival_time
    return ProcessMetrics(
        process=process,
        start_time=first_start,
        completion_time=completion_time,
        waiting_time=turnaround_time - process.burst_time,
        turnaround_time=turnaround_time,
        response_time=first_start - process.arrival_time,
    )


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute utilization, throughput and the averages from a finished run and
    attach them to ``result``. Every figure is 0 for an empty run.
    """
    total_time = max((s.end_time for s in result.timeline), default=0)
    idle_time = sum(s.duration for s in result.timeline if s.is_idle)
    cpu_busy_time = total_time - idle_time

    n = len(result.processes)
    summary = summarize_process_metrics(result.processes)

    system = SystemMetrics(
        total_time=total_time,
        idle_time=idle_time,
        cpu_busy_time=cpu_busy_time,
        cpu_utilization=cpu_busy_time / total_time if total_time > 0 else 0.0,
        throughput=n / total_time if total_time > 0 else 0.0,
        avg_waiting=summary["avg_waiting"],
        avg_turnaround=summary["avg_turnaround"],
        avg_response=summary["avg_response"],
        avg_burst_time=sum(p.burst_time for p in result.processes) / n if n else 0.0,
        context_switches=max(len(result.timeline) - 1, 0),
        completed=n,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
