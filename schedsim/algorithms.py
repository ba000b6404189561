from __future__ import annotations

import heapq
import itertools
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Tuple

from .errors import InvalidQuantum
from .metrics import build_process_metrics, compute_system_metrics
from .models import PriorityMode, Process, ProcessMetrics, ScheduleResult, SchedulingPolicy
from .timeline import TimelineBuilder


@dataclass(frozen=True)
class AlgorithmInfo:
    name: str
    description: str
    preemptive: bool = False
    uses_quantum: bool = False
    uses_priority: bool = False


ALGORITHM_INFO: Dict[SchedulingPolicy, AlgorithmInfo] = {
    SchedulingPolicy.FCFS: AlgorithmInfo(
        name="First Come First Serve (FCFS)",
        description="Runs processes in arrival order, each to completion. Simple, but long jobs "
        "hold up everything behind them (convoy effect).",
    ),
    SchedulingPolicy.SJF: AlgorithmInfo(
        name="Shortest Job First (SJF)",
        description="Picks the arrived process with the smallest burst time and runs it to "
        "completion. Low average waiting time, long jobs may starve.",
    ),
    SchedulingPolicy.SRTF: AlgorithmInfo(
        name="Shortest Remaining Time First (SRTF)",
        description="Preemptive SJF: switches to a newly arrived process whose burst is shorter "
        "than the remaining time of the running one.",
        preemptive=True,
    ),
    SchedulingPolicy.PRIORITY: AlgorithmInfo(
        name="Priority Scheduling",
        description="Runs the most urgent arrived process to completion. Lower or higher numbers "
        "can mean more urgent.",
        uses_priority=True,
    ),
    SchedulingPolicy.ROUND_ROBIN: AlgorithmInfo(
        name="Round Robin (RR)",
        description="Gives each ready process at most one time quantum in turn, in FIFO order.",
        preemptive=True,
        uses_quantum=True,
    ),
    SchedulingPolicy.PRIORITY_PREEMPTIVE: AlgorithmInfo(
        name="Preemptive Priority Scheduling",
        description="Interrupts the running process as soon as a more urgent one arrives.",
        preemptive=True,
        uses_priority=True,
    ),
    SchedulingPolicy.PRIORITY_ROUND_ROBIN: AlgorithmInfo(
        name="Priority Scheduling with Round Robin",
        description="Always serves the most urgent priority class; processes of equal priority "
        "share the CPU round-robin with a time quantum.",
        preemptive=True,
        uses_quantum=True,
        uses_priority=True,
    ),
}


@dataclass
class _RunState:
    process: Process
    remaining_time: int
    first_start: Optional[int] = None  # None until first dispatched

    def dispatch(self, time: int) -> None:
        if self.first_start is None:
            self.first_start = time


def _tie_break(p: Process) -> Tuple[int, int]:
    # Shared by every policy: earlier arrival wins, then lower pid.
    return (p.arrival_time, p.pid)


def _priority_rank(p: Process, mode: PriorityMode) -> int:
    return p.priority if mode == PriorityMode.LOW_FIRST else -p.priority


def _arrival_order(processes: List[Process]) -> List[Process]:
    return sorted(processes, key=_tie_break)


def _finish(
    policy: SchedulingPolicy,
    timeline: TimelineBuilder,
    metrics: List[ProcessMetrics],
    quantum: Optional[int] = None,
    priority_mode: Optional[PriorityMode] = None,
) -> ScheduleResult:
    result = ScheduleResult(
        algorithm=ALGORITHM_INFO[policy].name,
        policy=policy,
        quantum=quantum,
        priority_mode=priority_mode,
        processes=metrics,
        timeline=timeline.build(),
    )
    compute_system_metrics(result)
    return result


def schedule_fcfs(
    processes: List[Process],
    quantum: Optional[int] = None,
    priority_mode: PriorityMode = PriorityMode.LOW_FIRST,
) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    time = 0
    timeline = TimelineBuilder()
    metrics: List[ProcessMetrics] = []

    for p in _arrival_order(processes):
        start_time = max(time, p.arrival_time)
        timeline.idle(time, start_time)

        end_time = start_time + p.burst_time
        timeline.run(p, start_time, end_time)
        metrics.append(build_process_metrics(p, start_time, end_time))

        time = end_time

    return _finish(SchedulingPolicy.FCFS, timeline, metrics)


def _schedule_non_preemptive(
    processes: List[Process],
    key: Callable[[Process], int],
) -> Tuple[TimelineBuilder, List[ProcessMetrics]]:
    """
    At each decision point run the arrived process with the smallest ``key``
    to completion. If nothing has arrived yet, idle until the next arrival.
    """
    pending: Deque[Process] = deque(_arrival_order(processes))
    ready: List[Tuple[int, int, int, int, Process]] = []
    sequence = itertools.count()

    time = 0
    timeline = TimelineBuilder()
    metrics: List[ProcessMetrics] = []

    while pending or ready:
        while pending and pending[0].arrival_time <= time:
            p = pending.popleft()
            heapq.heappush(ready, (key(p),) + _tie_break(p) + (next(sequence), p))

        if not ready:
            next_arrival = pending[0].arrival_time
            timeline.idle(time, next_arrival)
            time = next_arrival
            continue

        p = heapq.heappop(ready)[-1]

        end_time = time + p.burst_time
        timeline.run(p, time, end_time)
        metrics.append(build_process_metrics(p, time, end_time))

        time = end_time

    return timeline, metrics


def schedule_sjf(
    processes: List[Process],
    quantum: Optional[int] = None,
    priority_mode: PriorityMode = PriorityMode.LOW_FIRST,
) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    Among processes that have arrived and are not yet completed, choose the one
    with the smallest burst time (tie-breaker: earlier arrival, then PID).
    """
    timeline, metrics = _schedule_non_preemptive(processes, key=lambda p: p.burst_time)
    return _finish(SchedulingPolicy.SJF, timeline, metrics)


def schedule_priority(
    processes: List[Process],
    quantum: Optional[int] = None,
    priority_mode: PriorityMode = PriorityMode.LOW_FIRST,
) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    With ``PriorityMode.LOW_FIRST`` the smallest priority number is the most
    urgent, with ``HIGH_FIRST`` the largest. Ties go to the earlier arrival,
    then the lower PID.
    """
    timeline, metrics = _schedule_non_preemptive(
        processes, key=lambda p: _priority_rank(p, priority_mode)
    )
    return _finish(SchedulingPolicy.PRIORITY, timeline, metrics, priority_mode=priority_mode)


def _schedule_preemptive(
    processes: List[Process],
    key: Callable[[_RunState], int],
) -> Tuple[TimelineBuilder, List[ProcessMetrics]]:
    """
    Preemptive selection by smallest ``key`` among arrived, unfinished processes.

    The choice can only change when a process arrives or finishes, so the
    selected process runs until the next of those events rather than one unit
    at a time. ``key`` must not grow for the running process as it executes.
    Consecutive runs of the same process are merged into one block.
    """
    states = [_RunState(p, p.burst_time) for p in _arrival_order(processes)]

    time = 0
    timeline = TimelineBuilder(coalesce=True)
    metrics: List[ProcessMetrics] = []

    while len(metrics) < len(states):
        ready = [s for s in states if s.process.arrival_time <= time and s.remaining_time > 0]

        if not ready:
            next_arrival = min(s.process.arrival_time for s in states if s.remaining_time > 0)
            timeline.idle(time, next_arrival)
            time = next_arrival
            continue

        current = min(ready, key=lambda s: (key(s),) + _tie_break(s.process))
        current.dispatch(time)

        # Run until completion or next arrival, whichever comes first.
        run_time = current.remaining_time
        upcoming = [s.process.arrival_time for s in states if s.process.arrival_time > time]
        if upcoming:
            run_time = min(run_time, min(upcoming) - time)

        timeline.run(current.process, time, time + run_time)
        time += run_time
        current.remaining_time -= run_time

        if current.remaining_time == 0:
            metrics.append(build_process_metrics(current.process, current.first_start, time))

    return timeline, metrics


def schedule_srtf(
    processes: List[Process],
    quantum: Optional[int] = None,
    priority_mode: PriorityMode = PriorityMode.LOW_FIRST,
) -> ScheduleResult:
    """
    Shortest Remaining Time First (preemptive SJF).
    """
    timeline, metrics = _schedule_preemptive(processes, key=lambda s: s.remaining_time)
    return _finish(SchedulingPolicy.SRTF, timeline, metrics)


def schedule_priority_preemptive(
    processes: List[Process],
    quantum: Optional[int] = None,
    priority_mode: PriorityMode = PriorityMode.LOW_FIRST,
) -> ScheduleResult:
    """
    Preemptive Priority scheduling: a more urgent arrival takes the CPU at once.
    """
    timeline, metrics = _schedule_preemptive(
        processes, key=lambda s: _priority_rank(s.process, priority_mode)
    )
    return _finish(
        SchedulingPolicy.PRIORITY_PREEMPTIVE, timeline, metrics, priority_mode=priority_mode
    )


def schedule_rr(
    processes: List[Process],
    quantum: Optional[int] = None,
    priority_mode: PriorityMode = PriorityMode.LOW_FIRST,
) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice runs join the queue ahead of the
    process that was just preempted.
    """
    if quantum is None or quantum <= 0:
        raise InvalidQuantum("Round Robin requires a positive quantum (use --quantum)")

    pending: Deque[_RunState] = deque(_RunState(p, p.burst_time) for p in _arrival_order(processes))
    ready: Deque[_RunState] = deque()

    time = 0
    timeline = TimelineBuilder()
    metrics: List[ProcessMetrics] = []

    def enqueue_new_arrivals(current_time: int) -> None:
        while pending and pending[0].process.arrival_time <= current_time:
            ready.append(pending.popleft())

    while pending or ready:
        enqueue_new_arrivals(time)

        if not ready:
            next_arrival = pending[0].process.arrival_time
            timeline.idle(time, next_arrival)
            time = next_arrival
            continue

        current = ready.popleft()
        current.dispatch(time)

        run_time = min(quantum, current.remaining_time)
        timeline.run(current.process, time, time + run_time)
        time += run_time
        current.remaining_time -= run_time

        enqueue_new_arrivals(time)

        if current.remaining_time > 0:
            ready.append(current)
        else:
            metrics.append(build_process_metrics(current.process, current.first_start, time))

    return _finish(SchedulingPolicy.ROUND_ROBIN, timeline, metrics, quantum=quantum)


def schedule_priority_rr(
    processes: List[Process],
    quantum: Optional[int] = None,
    priority_mode: PriorityMode = PriorityMode.LOW_FIRST,
) -> ScheduleResult:
    """
    Priority scheduling with Round Robin inside each priority class.

    The ready queue is a heap keyed by (priority rank, entry sequence). A
    process gets a fresh sequence number on admission and again every time it
    is re-queued after a partial quantum, so the most urgent class always runs
    first and equal priorities take turns in FIFO order.
    """
    if quantum is None or quantum <= 0:
        raise InvalidQuantum("Priority Round Robin requires a positive quantum (use --quantum)")

    pending: Deque[_RunState] = deque(_RunState(p, p.burst_time) for p in _arrival_order(processes))
    ready: List[Tuple[int, int, _RunState]] = []
    sequence = itertools.count()

    time = 0
    timeline = TimelineBuilder()
    metrics: List[ProcessMetrics] = []

    def enqueue(state: _RunState) -> None:
        heapq.heappush(ready, (_priority_rank(state.process, priority_mode), next(sequence), state))

    def enqueue_new_arrivals(current_time: int) -> None:
        while pending and pending[0].process.arrival_time <= current_time:
            enqueue(pending.popleft())

    while pending or ready:
        enqueue_new_arrivals(time)

        if not ready:
            next_arrival = pending[0].process.arrival_time
            timeline.idle(time, next_arrival)
            time = next_arrival
            continue

        _, _, current = heapq.heappop(ready)
        current.dispatch(time)

        run_time = min(quantum, current.remaining_time)
        timeline.run(current.process, time, time + run_time)
        time += run_time
        current.remaining_time -= run_time

        enqueue_new_arrivals(time)

        if current.remaining_time > 0:
            enqueue(current)
        else:
            metrics.append(build_process_metrics(current.process, current.first_start, time))

    return _finish(
        SchedulingPolicy.PRIORITY_ROUND_ROBIN,
        timeline,
        metrics,
        quantum=quantum,
        priority_mode=priority_mode,
    )


ALGORITHMS = {
    SchedulingPolicy.FCFS.value: schedule_fcfs,
    SchedulingPolicy.SJF.value: schedule_sjf,
    SchedulingPolicy.SRTF.value: schedule_srtf,
    SchedulingPolicy.PRIORITY.value: schedule_priority,
    SchedulingPolicy.ROUND_ROBIN.value: schedule_rr,
    SchedulingPolicy.PRIORITY_PREEMPTIVE.value: schedule_priority_preemptive,
    SchedulingPolicy.PRIORITY_ROUND_ROBIN.value: schedule_priority_rr,
}
