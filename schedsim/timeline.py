from __future__ import annotations

from typing import List, Optional

from .models import IDLE_LABEL, Process, ScheduledSlice


class TimelineBuilder:
    """
    Collects execution blocks for one run.

    With ``coalesce=True`` a block for the same subject that starts exactly
    where the previous one ended extends that block instead of adding a new one.
    """

    def __init__(self, coalesce: bool = False) -> None:
        self.coalesce = coalesce
        self._slices: List[ScheduledSlice] = []

    def run(self, process: Process, start_time: int, end_time: int) -> None:
        self._append(process.pid, process.name, start_time, end_time)

    def idle(self, start_time: int, end_time: int) -> None:
        self._append(None, IDLE_LABEL, start_time, end_time)

    def _append(self, pid: Optional[int], name: str, start_time: int, end_time: int) -> None:
        if end_time <= start_time:
            return

        last = self._slices[-1] if self._slices else None
        if self.coalesce and last is not None and last.pid == pid and last.end_time == start_time:
            last.end_time = end_time
            return

        self._slices.append(ScheduledSlice(pid=pid, name=name, start_time=start_time, end_time=end_time))

    def build(self) -> List[ScheduledSlice]:
        return list(self._slices)
