import random

import pytest

from schedviz.algorithms import (
    ALGORITHMS,
    run_algorithm,
    schedule,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from schedviz.errors import InvalidInput, InvalidParameter
from schedviz.metrics import compute_results
from schedviz.models import ExecutionInterval, ProcessDescriptor


def _procs():
    return [
        ProcessDescriptor("P1", arrival_time=0, burst_time=5, priority=2),
        ProcessDescriptor("P2", arrival_time=1, burst_time=3, priority=1),
        ProcessDescriptor("P3", arrival_time=2, burst_time=8, priority=3),
        ProcessDescriptor("P4", arrival_time=3, burst_time=6, priority=4),
    ]


def _spans(timeline):
    return [(s.pid, s.start_time, s.end_time) for s in timeline]


def _random_workload(seed, n=8):
    rng = random.Random(seed)
    return [
        ProcessDescriptor(
            f"P{i}",
            arrival_time=rng.randint(0, 15),
            burst_time=rng.randint(1, 9),
            priority=rng.randint(1, 4),
        )
        for i in range(n)
    ]


def test_fcfs_order():
    assert _spans(schedule_fcfs(_procs())) == [
        ("P1", 0, 5),
        ("P2", 5, 8),
        ("P3", 8, 16),
        ("P4", 16, 22),
    ]


def test_fcfs_same_schedule_for_any_order_of_distinct_arrivals():
    procs = _procs()
    expected = schedule_fcfs(procs)
    assert schedule_fcfs(list(reversed(procs))) == expected
    assert schedule_fcfs([procs[2], procs[0], procs[3], procs[1]]) == expected


def test_fcfs_ties_keep_input_order():
    a = ProcessDescriptor("A", arrival_time=0, burst_time=3)
    b = ProcessDescriptor("B", arrival_time=0, burst_time=1)
    assert [s.pid for s in schedule_fcfs([a, b])] == ["A", "B"]
    assert [s.pid for s in schedule_fcfs([b, a])] == ["B", "A"]


def test_sjf_order():
    # P4 before P3: both have arrived by t=8 and 6 < 8.
    assert _spans(schedule_sjf(_procs())) == [
        ("P1", 0, 5),
        ("P2", 5, 8),
        ("P4", 8, 14),
        ("P3", 14, 22),
    ]


def test_sjf_tie_breaks_on_arrival_then_input_order():
    procs = [
        ProcessDescriptor("Z", arrival_time=0, burst_time=4),
        ProcessDescriptor("A", arrival_time=3, burst_time=2),
        ProcessDescriptor("B", arrival_time=1, burst_time=2),
        ProcessDescriptor("C", arrival_time=1, burst_time=2),
    ]
    assert [s.pid for s in schedule_sjf(procs)] == ["Z", "B", "C", "A"]


def test_priority_static():
    assert _spans(schedule_priority(_procs())) == [
        ("P1", 0, 5),
        ("P2", 5, 8),
        ("P3", 8, 16),
        ("P4", 16, 22),
    ]


def test_priority_lower_value_wins_and_ties_break_on_arrival():
    procs = [
        ProcessDescriptor("Z", arrival_time=0, burst_time=4, priority=1),
        ProcessDescriptor("A", arrival_time=3, burst_time=2, priority=2),
        ProcessDescriptor("B", arrival_time=1, burst_time=5, priority=2),
        ProcessDescriptor("U", arrival_time=2, burst_time=1, priority=1),
    ]
    assert _spans(schedule_priority(procs)) == [
        ("Z", 0, 4),
        ("U", 4, 5),
        ("B", 5, 10),
        ("A", 10, 12),
    ]


def test_non_preemptive_policies_skip_idle_gaps():
    procs = [
        ProcessDescriptor("P1", arrival_time=0, burst_time=2),
        ProcessDescriptor("P2", arrival_time=5, burst_time=3),
    ]
    for func in (schedule_fcfs, schedule_sjf, schedule_priority):
        assert _spans(func(procs)) == [("P1", 0, 2), ("P2", 5, 8)]


def test_rr_quantum_2():
    assert _spans(schedule_rr(_procs(), quantum=2)) == [
        ("P1", 0, 2),
        ("P2", 2, 4),
        ("P3", 4, 6),
        ("P1", 6, 8),
        ("P4", 8, 10),
        ("P2", 10, 11),
        ("P3", 11, 13),
        ("P1", 13, 14),
        ("P4", 14, 16),
        ("P3", 16, 18),
        ("P4", 18, 20),
        ("P3", 20, 22),
    ]


def test_rr_new_arrivals_queue_ahead_of_preempted_process():
    procs = [
        ProcessDescriptor("P1", arrival_time=0, burst_time=4),
        ProcessDescriptor("P2", arrival_time=2, burst_time=2),
    ]
    # P2 arrives exactly when P1's first slice ends and still goes first.
    assert _spans(schedule_rr(procs, quantum=2)) == [("P1", 0, 2), ("P2", 2, 4), ("P1", 4, 6)]

    rows = {r.pid: r for r in compute_results(schedule_rr(procs, quantum=2), procs).rows}
    assert rows["P1"].waiting_time == 2
    assert rows["P2"].waiting_time == 0


def test_rr_jumps_to_next_arrival_when_idle():
    procs = [
        ProcessDescriptor("P1", arrival_time=0, burst_time=2),
        ProcessDescriptor("P2", arrival_time=5, burst_time=3),
    ]
    assert _spans(schedule_rr(procs, quantum=2)) == [("P1", 0, 2), ("P2", 5, 7), ("P2", 7, 8)]


def test_rr_admits_same_slice_arrivals_by_arrival_time():
    procs = [
        ProcessDescriptor("P1", arrival_time=0, burst_time=4),
        ProcessDescriptor("Late", arrival_time=3, burst_time=1),
        ProcessDescriptor("Early", arrival_time=1, burst_time=1),
    ]
    assert [s.pid for s in schedule_rr(procs, quantum=4)] == ["P1", "Early", "Late"]


@pytest.mark.parametrize("seed", range(5))
def test_rr_with_large_quantum_matches_fcfs(seed):
    procs = _random_workload(seed)
    big = max(p.burst_time for p in procs)
    assert schedule_rr(procs, quantum=big) == schedule_fcfs(procs)
    assert schedule_rr(_procs(), quantum=8) == schedule_fcfs(_procs())


@pytest.mark.parametrize("policy", sorted(ALGORITHMS))
@pytest.mark.parametrize("seed", range(6))
def test_schedule_invariants(policy, seed):
    procs = _random_workload(seed)
    timeline = schedule(procs, policy, quantum=3)
    by_pid = {p.pid: p for p in procs}

    work = {p.pid: 0 for p in procs}
    for sl in timeline:
        assert sl.start_time < sl.end_time
        assert sl.start_time >= by_pid[sl.pid].arrival_time
        work[sl.pid] += sl.duration
    assert work == {p.pid: p.burst_time for p in procs}

    for prev, nxt in zip(timeline, timeline[1:]):
        assert prev.end_time <= nxt.start_time

    for row in compute_results(timeline, procs).rows:
        assert row.waiting_time >= 0
        assert row.turnaround_time == row.waiting_time + row.burst_time


@pytest.mark.parametrize("policy", sorted(ALGORITHMS))
def test_schedule_is_deterministic_and_leaves_input_alone(policy):
    procs = _random_workload(42)
    before = list(procs)
    assert schedule(procs, policy, quantum=2) == schedule(list(procs), policy, quantum=2)
    assert procs == before


def test_schedule_dispatch_is_case_insensitive():
    assert schedule(_procs(), "SJF") == schedule_sjf(_procs())


def test_run_algorithm_bundles_metrics():
    res = run_algorithm("rr", _procs(), quantum=2)
    assert res.algorithm == "Round Robin"
    assert res.quantum == 2
    assert res.metrics.avg_waiting == pytest.approx(9.75)
    assert res.metrics.avg_turnaround == pytest.approx(15.25)

    res = run_algorithm("sjf", _procs(), quantum=2)
    assert res.quantum is None
    assert res.timeline[2] == ExecutionInterval("P4", 8, 14)


@pytest.mark.parametrize(
    "procs",
    [
        [],
        [ProcessDescriptor("", 0, 1)],
        [ProcessDescriptor("A", 0, 1), ProcessDescriptor("A", 1, 1)],
        [ProcessDescriptor("A", -1, 1)],
        [ProcessDescriptor("A", 0, 0)],
        [ProcessDescriptor("A", 0, 1, priority=0)],
        [ProcessDescriptor("A", 0, 1.5)],
    ],
)
@pytest.mark.parametrize("policy", sorted(ALGORITHMS))
def test_invalid_input_rejected(procs, policy):
    with pytest.raises(InvalidInput):
        schedule(procs, policy, quantum=2)


@pytest.mark.parametrize("quantum", [None, 0, -2, 1.5])
def test_rr_requires_positive_quantum(quantum):
    with pytest.raises(InvalidParameter):
        schedule_rr(_procs(), quantum=quantum)


def test_unknown_policy():
    with pytest.raises(InvalidParameter):
        schedule(_procs(), "mlfq")


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        schedule([], "fcfs")
