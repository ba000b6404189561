"""
Entry point for a single simulation run.

``run_algorithm`` resolves the policy, rejects invalid input with a
``SchedulingError`` subclass, and hands a snapshot of the processes to the
policy function. Nothing is kept between calls: every run works on its own
copy of the process list and its own run state.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from .algorithms import ALGORITHM_INFO, ALGORITHMS
from .errors import (
    DuplicateProcessId,
    InvalidArrivalTime,
    InvalidBurstTime,
    InvalidPriority,
    InvalidPriorityMode,
    InvalidQuantum,
    SchedulingError,
    UnknownAlgorithm,
)
from .models import PriorityMode, Process, ScheduleResult, SchedulingPolicy

logger = logging.getLogger(__name__)

# Alternative spellings accepted for policy and mode names (compared lower-cased).
_POLICY_ALIASES = {
    "roundrobin": SchedulingPolicy.ROUND_ROBIN,
    "round_robin": SchedulingPolicy.ROUND_ROBIN,
    "prioritypreemptive": SchedulingPolicy.PRIORITY_PREEMPTIVE,
    "priorityroundrobin": SchedulingPolicy.PRIORITY_ROUND_ROBIN,
    "priority_round_robin": SchedulingPolicy.PRIORITY_ROUND_ROBIN,
}

_MODE_ALIASES = {
    "lowfirst": PriorityMode.LOW_FIRST,
    "low_first": PriorityMode.LOW_FIRST,
    "highfirst": PriorityMode.HIGH_FIRST,
    "high_first": PriorityMode.HIGH_FIRST,
}


def resolve_policy(name: Union[str, SchedulingPolicy]) -> SchedulingPolicy:
    if isinstance(name, SchedulingPolicy):
        return name

    key = str(name).strip().lower()
    if key in _POLICY_ALIASES:
        return _POLICY_ALIASES[key]
    try:
        return SchedulingPolicy(key)
    except ValueError:
        raise UnknownAlgorithm(f"Unknown or unimplemented algorithm '{name}'") from None


def resolve_priority_mode(mode: Union[str, PriorityMode, None]) -> PriorityMode:
    if mode is None:
        return PriorityMode.LOW_FIRST
    if isinstance(mode, PriorityMode):
        return mode

    key = str(mode).strip().lower()
    if key in _MODE_ALIASES:
        return _MODE_ALIASES[key]
    try:
        return PriorityMode(key)
    except ValueError:
        raise InvalidPriorityMode(f"Invalid priority mode '{mode}' (use 'low' or 'high')") from None


def validate_run(processes: List[Process], policy: SchedulingPolicy, quantum: Optional[int]) -> None:
    """
    Raise the matching ``SchedulingError`` for the first problem found.

    An empty process list is valid and simply produces an empty result.
    """
    info = ALGORITHM_INFO[policy]

    if info.uses_quantum and (quantum is None or quantum <= 0):
        raise InvalidQuantum(f"{info.name} requires a positive quantum, got {quantum!r}")

    seen: set[int] = set()
    for p in processes:
        if p.pid in seen:
            raise DuplicateProcessId(f"Process id {p.pid} is used more than once")
        seen.add(p.pid)

        if p.burst_time <= 0:
            raise InvalidBurstTime(f"{p.name}: burst time must be greater than 0, got {p.burst_time}")
        if p.arrival_time < 0:
            raise InvalidArrivalTime(f"{p.name}: arrival time must be >= 0, got {p.arrival_time}")
        if info.uses_priority and p.priority <= 0:
            raise InvalidPriority(f"{p.name}: priority must be greater than 0, got {p.priority}")


def run_algorithm(
    name: Union[str, SchedulingPolicy],
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    priority_mode: Union[str, PriorityMode, None] = None,
) -> ScheduleResult:
    """
    Validate the request and dispatch to the requested algorithm.

    ``quantum`` is only used by the round-robin policies and ``priority_mode``
    only by the three priority policies; both are ignored otherwise.
    """
    snapshot = list(processes)
    try:
        policy = resolve_policy(name)
        info = ALGORITHM_INFO[policy]
        mode = resolve_priority_mode(priority_mode if info.uses_priority else None)
        validate_run(snapshot, policy, quantum)
    except SchedulingError as exc:
        logger.warning(f"Rejected run of '{name}': {exc}")
        raise

    logger.debug(
        f"Running {info.name} on {len(snapshot)} processes "
        f"(quantum={quantum if info.uses_quantum else None}, mode={mode.value})"
    )

    func = ALGORITHMS[policy.value]
    result = func(snapshot, quantum=quantum if info.uses_quantum else None, priority_mode=mode)

    logger.debug(
        f"{info.name} finished at t={result.system.total_time} "
        f"with {len(result.timeline)} blocks"
    )
    return result
