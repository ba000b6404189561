"""
CPU scheduling simulator.

Computes the execution timeline and per-process metrics for seven classic
scheduling policies, with a small command-line front end for experimenting
with workloads.
"""

from .engine import run_algorithm
from .models import PriorityMode, Process, ScheduleResult, SchedulingPolicy

__all__ = ["cli", "run_algorithm", "PriorityMode", "Process", "ScheduleResult", "SchedulingPolicy"]
