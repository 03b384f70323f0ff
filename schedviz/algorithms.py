from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence, Tuple

from .errors import InvalidInput, InvalidParameter
from .metrics import compute_results
from .models import ExecutionInterval, ProcessDescriptor, ScheduleResult

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_processes(processes: Sequence[ProcessDescriptor]) -> None:
    """
    Reject an empty process set or any descriptor with out-of-range fields.
    """
    if not processes:
        raise InvalidInput("At least one process is required")

    seen: set[str] = set()
    for p in processes:
        if not isinstance(p.pid, str) or not p.pid:
            raise InvalidInput(f"Process id must be a non-empty string: {p!r}")
        if p.pid in seen:
            raise InvalidInput(f"Process {p.pid} already exists")
        seen.add(p.pid)

        if not _is_int(p.arrival_time) or p.arrival_time < 0:
            raise InvalidInput(f"{p.pid}: arrival time must be a non-negative integer")
        if not _is_int(p.burst_time) or p.burst_time < 1:
            raise InvalidInput(f"{p.pid}: burst time must be a positive integer")
        if not _is_int(p.priority) or p.priority < 1:
            raise InvalidInput(f"{p.pid}: priority must be a positive integer")


def schedule_fcfs(processes: Sequence[ProcessDescriptor], quantum: Optional[int] = None) -> List[ExecutionInterval]:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    ``sorted`` is stable, so processes sharing an arrival time keep their
    input order.
    """
    validate_processes(processes)
    processes_sorted = sorted(processes, key=lambda p: p.arrival_time)

    time = 0
    timeline: List[ExecutionInterval] = []

    for p in processes_sorted:
        if time < p.arrival_time:
            time = p.arrival_time

        start_time = time
        end_time = start_time + p.burst_time
        timeline.append(ExecutionInterval(pid=p.pid, start_time=start_time, end_time=end_time))
        logger.debug("fcfs: dispatch %s at t=%d", p.pid, start_time)

        time = end_time

    return timeline


def _schedule_non_preemptive(
    processes: Sequence[ProcessDescriptor],
    key: Callable[[ProcessDescriptor], Tuple[int, ...]],
    label: str,
) -> List[ExecutionInterval]:
    """
    Shared loop for SJF and Priority.

    At each decision point, among processes that have arrived and are not yet
    scheduled, run the one with the smallest ``key`` to completion. ``min``
    returns the first minimal element, so remaining ties fall back to input
    order.
    """
    validate_processes(processes)
    # Work on a copy so we don't surprise callers.
    pending: List[ProcessDescriptor] = list(processes)

    time = 0
    timeline: List[ExecutionInterval] = []

    while pending:
        ready = [p for p in pending if p.arrival_time <= time]

        if not ready:
            # Nothing is ready: jump the clock to the next arrival.
            time = min(p.arrival_time for p in pending)
            continue

        p = min(ready, key=key)

        start_time = time
        end_time = start_time + p.burst_time
        timeline.append(ExecutionInterval(pid=p.pid, start_time=start_time, end_time=end_time))
        logger.debug("%s: dispatch %s at t=%d (%d ready)", label, p.pid, start_time, len(ready))

        pending.remove(p)
        time = end_time

    return timeline


def schedule_sjf(processes: Sequence[ProcessDescriptor], quantum: Optional[int] = None) -> List[ExecutionInterval]:
    """
    Shortest Job First (non-preemptive).

    Choose the smallest burst time; break ties by earlier arrival, then input
    order.
    """
    return _schedule_non_preemptive(processes, key=lambda p: (p.burst_time, p.arrival_time), label="sjf")


def schedule_priority(processes: Sequence[ProcessDescriptor], quantum: Optional[int] = None) -> List[ExecutionInterval]:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Among ready
    processes, choose the one with the smallest priority; break ties
    by earlier arrival time, then input order.
    """
    return _schedule_non_preemptive(processes, key=lambda p: (p.priority, p.arrival_time), label="priority")


def schedule_rr(processes: Sequence[ProcessDescriptor], quantum: Optional[int] = None) -> List[ExecutionInterval]:
    """
    Round Robin scheduling with a fixed time quantum.

    Every process enters the ready queue once, on arrival, in (arrival, input)
    order. After each slice, processes that arrived up to and including the
    slice end are queued before the preempted process goes back to the tail.
    """
    if not _is_int(quantum) or quantum <= 0:
        raise InvalidParameter("Round Robin requires a positive integer quantum (use --quantum)")
    validate_processes(processes)

    remaining: Dict[str, int] = {p.pid: p.burst_time for p in processes}
    arrivals = sorted(processes, key=lambda p: p.arrival_time)
    next_arrival = 0

    time = 0
    timeline: List[ExecutionInterval] = []
    ready: Deque[str] = deque()

    def enqueue_new_arrivals(current_time: int) -> None:
        nonlocal next_arrival
        while next_arrival < len(arrivals) and arrivals[next_arrival].arrival_time <= current_time:
            ready.append(arrivals[next_arrival].pid)
            next_arrival += 1

    # Initialize with processes that arrive at time 0
    enqueue_new_arrivals(time)

    while ready or next_arrival < len(arrivals):
        if not ready:
            # Jump to next arrival if CPU is idle
            time = arrivals[next_arrival].arrival_time
            enqueue_new_arrivals(time)
            continue

        pid = ready.popleft()
        run_time = min(quantum, remaining[pid])
        slice_start = time
        slice_end = time + run_time
        timeline.append(ExecutionInterval(pid=pid, start_time=slice_start, end_time=slice_end))

        time = slice_end
        remaining[pid] -= run_time

        enqueue_new_arrivals(time)

        if remaining[pid] > 0:
            ready.append(pid)
        logger.debug("rr: %s ran [%d, %d), %d left", pid, slice_start, slice_end, remaining[pid])

    return timeline


ALGORITHMS: Dict[str, Callable[..., List[ExecutionInterval]]] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
}

LABELS = {
    "fcfs": "FCFS",
    "sjf": "SJF (non-preemptive)",
    "priority": "Priority (non-preemptive)",
    "rr": "Round Robin",
}


def schedule(
    processes: Sequence[ProcessDescriptor], policy: str, quantum: Optional[int] = None
) -> List[ExecutionInterval]:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = policy.lower()
    if name not in ALGORITHMS:
        raise InvalidParameter(f"Unknown algorithm '{policy}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)


def run_algorithm(name: str, processes: Sequence[ProcessDescriptor], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Schedule ``processes`` and compute the metrics in one call.
    """
    timeline = schedule(processes, name, quantum=quantum)
    key = name.lower()
    return ScheduleResult(
        algorithm=LABELS[key],
        quantum=quantum if key == "rr" else None,
        timeline=tuple(timeline),
        metrics=compute_results(timeline, processes),
    )
