from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ProcessDescriptor:
    """
    One process of a workload. Lower ``priority`` values are more urgent.
    """

    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 1


@dataclass(frozen=True)
class ExecutionInterval:
    """
    One contiguous slice of execution for a process in the Gantt chart.

    The range is half-open: ``[start_time, end_time)``.
    """

    pid: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class ResultRow:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    completion_time: int
    turnaround_time: int
    waiting_time: int
    response_time: int


@dataclass(frozen=True)
class ScheduleMetrics:
    rows: Tuple[ResultRow, ...]
    avg_waiting: float
    avg_turnaround: float
    avg_response: float
    cpu_utilization: float  # percent
    throughput: float
    makespan: int
    cpu_busy_time: int


@dataclass(frozen=True)
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    timeline: Tuple[ExecutionInterval, ...] = ()
    metrics: Optional[ScheduleMetrics] = None


@dataclass(frozen=True)
class Snapshot:
    """
    State of the simulated machine at one clock tick.
    """

    time: int
    running: Optional[str]
    slice_elapsed: int
    slice_length: int
    ready: Tuple[str, ...] = ()
    completed: Tuple[str, ...] = ()
