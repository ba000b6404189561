"""
Rejections raised before a simulation run starts.

Every error is a ValueError, so callers that only care about "bad input" can
catch that and still get the precise class when they need it. None of these
are retried: scheduling is deterministic and the same input fails the same way.
"""

from __future__ import annotations


class SchedulingError(ValueError):
    """Base class for all rejected runs."""


class InvalidBurstTime(SchedulingError):
    pass


class InvalidArrivalTime(SchedulingError):
    pass


class InvalidPriority(SchedulingError):
    pass


class InvalidQuantum(SchedulingError):
    pass


class InvalidPriorityMode(SchedulingError):
    pass


class DuplicateProcessId(SchedulingError):
    pass


class UnknownAlgorithm(SchedulingError):
    pass
