from __future__ import annotations

from typing import Dict, Iterator, List, Sequence

from .errors import EmptySchedule
from .models import ExecutionInterval, ProcessDescriptor, Snapshot


def snapshot_at(
    schedule: Sequence[ExecutionInterval], processes: Sequence[ProcessDescriptor], time: int
) -> Snapshot:
    """
    Reconstruct the ready / executing / completed view at clock value ``time``.

    A process is completed once the work done before ``time`` equals its
    burst. Ready processes are listed in input order, completed ones in the
    order they finished.
    """
    done: Dict[str, int] = {p.pid: 0 for p in processes}
    finished_at: Dict[str, int] = {}
    running = None
    slice_elapsed = 0
    slice_length = 0

    for sl in schedule:
        if sl.start_time <= time < sl.end_time:
            running = sl.pid
            slice_elapsed = time - sl.start_time + 1
            slice_length = sl.duration
        if sl.start_time < time:
            done[sl.pid] += min(sl.end_time, time) - sl.start_time
            if sl.end_time <= time:
                finished_at[sl.pid] = sl.end_time

    completed = [p.pid for p in processes if done[p.pid] >= p.burst_time]
    completed.sort(key=lambda pid: finished_at[pid])

    ready: List[str] = [
        p.pid
        for p in processes
        if p.arrival_time <= time and p.pid != running and done[p.pid] < p.burst_time
    ]

    return Snapshot(
        time=time,
        running=running,
        slice_elapsed=slice_elapsed,
        slice_length=slice_length,
        ready=tuple(ready),
        completed=tuple(completed),
    )


def iter_snapshots(
    schedule: Sequence[ExecutionInterval], processes: Sequence[ProcessDescriptor]
) -> Iterator[Snapshot]:
    """Yield one snapshot per clock tick, from 0 up to the makespan."""
    if not schedule:
        raise EmptySchedule("Nothing to step through: the schedule is empty")

    makespan = max(sl.end_time for sl in schedule)
    for t in range(makespan):
        yield snapshot_at(schedule, processes, t)
