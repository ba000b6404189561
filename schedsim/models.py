from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional

IDLE_LABEL = "Idle"


class SchedulingPolicy(str, enum.Enum):
    FCFS = "fcfs"                                  # First Come First Served
    SJF = "sjf"                                    # Shortest Job First, non-preemptive
    SRTF = "srtf"                                  # Shortest Remaining Time First
    PRIORITY = "priority"                          # static priority, non-preemptive
    ROUND_ROBIN = "rr"                             # time-sliced FIFO
    PRIORITY_PREEMPTIVE = "priority_preemptive"    # static priority, preemptive
    PRIORITY_ROUND_ROBIN = "priority_rr"           # priority classes, RR inside a class


class PriorityMode(str, enum.Enum):
    LOW_FIRST = "low"    # smaller number = more urgent
    HIGH_FIRST = "high"  # larger number = more urgent


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 1
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", f"P{self.pid}")


@dataclass
class ScheduledSlice:
    """
    One contiguous block of the timeline. ``pid`` is None while the CPU is idle.
    """

    pid: Optional[int]
    name: str
    start_time: int
    end_time: int

    @property
    def is_idle(self) -> bool:
        return self.pid is None

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessMetrics:
    process: Process
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def name(self) -> str:
        return self.process.name

    @property
    def arrival_time(self) -> int:
        return self.process.arrival_time

    @property
    def burst_time(self) -> int:
        return self.process.burst_time

    @property
    def priority(self) -> int:
        return self.process.priority


@dataclass
class SystemMetrics:
    total_time: int
    idle_time: int
    cpu_busy_time: int
    cpu_utilization: float
    throughput: float
    avg_waiting: float
    avg_turnaround: float
    avg_response: float
    avg_burst_time: float
    context_switches: int
    completed: int


@dataclass
class ScheduleResult:
    algorithm: str
    policy: SchedulingPolicy
    quantum: Optional[int] = None
    priority_mode: Optional[PriorityMode] = None
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

    def by_pid(self) -> List[ProcessMetrics]:
        """Results in submission order, as shown in the results table."""
        return sorted(self.processes, key=lambda m: m.pid)
