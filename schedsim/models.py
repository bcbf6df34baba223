from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


class InvalidWorkloadError(ValueError):
    """
    Raised when a workload cannot be scheduled or parsed.
    """


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass(frozen=True)
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.

    ``start_time`` is inclusive and ``end_time`` exclusive.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class ProcessMetrics:
    pid: int
    priority: int
    burst_time: int
    arrival_time: int
    waiting_time: int
    turnaround_time: int
    completion_time: int


@dataclass(frozen=True)
class ScheduleSummary:
    avg_waiting: float
    avg_turnaround: float
    throughput: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    summary: Optional[ScheduleSummary] = None
