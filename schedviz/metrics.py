from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .errors import EmptySchedule, InvalidInput, InvalidParameter
from .models import ExecutionInterval, ProcessDescriptor, ResultRow, ScheduleMetrics

# Table column name -> ResultRow attribute.
SORT_COLUMNS = {
    "pid": "pid",
    "arrival": "arrival_time",
    "burst": "burst_time",
    "priority": "priority",
    "start": "start_time",
    "completion": "completion_time",
    "turnaround": "turnaround_time",
    "waiting": "waiting_time",
    "response": "response_time",
}


def compute_results(
    schedule: Sequence[ExecutionInterval], processes: Sequence[ProcessDescriptor]
) -> ScheduleMetrics:
    """
    Derive per-process rows and aggregate figures from a finished schedule.

    Rows cover every process that appears in ``schedule`` and are sorted by
    pid. CPU utilization is a percentage of the makespan.
    """
    if not schedule:
        raise EmptySchedule("Cannot compute metrics for an empty schedule")

    by_pid = {p.pid: p for p in processes}
    first_start: Dict[str, int] = {}
    completion: Dict[str, int] = {}

    for slice_ in schedule:
        if slice_.pid not in by_pid:
            raise InvalidInput(f"Schedule references unknown process {slice_.pid}")
        if slice_.start_time < 0 or slice_.end_time <= slice_.start_time:
            raise InvalidInput(f"Invalid interval for {slice_.pid}: {slice_!r}")
        first_start[slice_.pid] = min(first_start.get(slice_.pid, slice_.start_time), slice_.start_time)
        completion[slice_.pid] = max(completion.get(slice_.pid, slice_.end_time), slice_.end_time)

    rows: List[ResultRow] = []
    for pid in sorted(completion):
        p = by_pid[pid]
        turnaround_time = completion[pid] - p.arrival_time
        rows.append(
            ResultRow(
                pid=pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                priority=p.priority,
                start_time=first_start[pid],
                completion_time=completion[pid],
                turnaround_time=turnaround_time,
                waiting_time=turnaround_time - p.burst_time,
                response_time=first_start[pid] - p.arrival_time,
            )
        )

    n = len(rows)
    makespan = max(slice_.end_time for slice_ in schedule)
    total_burst = sum(r.burst_time for r in rows)

    return ScheduleMetrics(
        rows=tuple(rows),
        avg_waiting=sum(r.waiting_time for r in rows) / n,
        avg_turnaround=sum(r.turnaround_time for r in rows) / n,
        avg_response=sum(r.response_time for r in rows) / n,
        cpu_utilization=total_burst / makespan * 100,
        throughput=n / makespan,
        makespan=makespan,
        cpu_busy_time=sum(slice_.duration for slice_ in schedule),
    )


def sort_rows(rows: Sequence[ResultRow], column: str = "pid", descending: bool = False) -> Tuple[ResultRow, ...]:
    """
    Reorder result rows by one table column. Equal values keep their current order.
    """
    if column not in SORT_COLUMNS:
        raise InvalidParameter(f"Unknown column '{column}' (choose from {', '.join(SORT_COLUMNS)})")

    attr = SORT_COLUMNS[column]
    return tuple(sorted(rows, key=lambda r: getattr(r, attr), reverse=descending))
