import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    run_algorithm,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from schedsim.models import InvalidWorkloadError, Process, ScheduledSlice


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=5, priority=2),
        Process(2, arrival_time=1, burst_time=3, priority=1),
        Process(3, arrival_time=2, burst_time=8, priority=3),
    ]


WORKLOADS = [
    _procs(),
    [Process(1, 0, 5), Process(2, 0, 3)],
    [Process(1, 0, 10, 3), Process(2, 1, 4, 1), Process(3, 2, 2, 1), Process(4, 3, 6, 2)],
    # idle gap before the second process arrives
    [Process(7, 0, 2), Process(8, 5, 2)],
    # late first arrival
    [Process(1, 3, 4, 1), Process(2, 4, 1, 0)],
]


def _slices(res):
    return [(s.pid, s.start_time, s.end_time) for s in res.timeline]


@pytest.mark.parametrize("name", list(ALGORITHMS))
@pytest.mark.parametrize("procs", WORKLOADS)
def test_schedule_invariants(name, procs):
    res = run_algorithm(name, procs)

    assert [p.pid for p in res.processes] == [p.pid for p in procs]

    timeline = sorted(res.timeline, key=lambda s: s.start_time)
    for earlier, later in zip(timeline, timeline[1:]):
        assert earlier.end_time <= later.start_time

    for proc, row in zip(procs, res.processes):
        assert row.turnaround_time == row.waiting_time + proc.burst_time
        assert row.turnaround_time == row.completion_time - proc.arrival_time
        assert row.waiting_time >= 0

        own = [s for s in res.timeline if s.pid == proc.pid]
        assert all(s.end_time > s.start_time for s in own)
        assert all(s.start_time >= proc.arrival_time for s in own)
        assert sum(s.duration for s in own) == proc.burst_time
        assert max(s.end_time for s in own) == row.completion_time

    last_completion = max(p.completion_time for p in res.processes)
    assert res.summary.throughput == len(procs) / last_completion


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_same_input_same_schedule(name):
    procs = _procs()
    first = run_algorithm(name, procs)
    second = run_algorithm(name, procs)
    assert first == second
    assert procs == _procs()


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_empty_workload_rejected(name):
    with pytest.raises(InvalidWorkloadError):
        run_algorithm(name, [])


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_non_positive_burst_rejected(name):
    with pytest.raises(InvalidWorkloadError):
        run_algorithm(name, [Process(1, 0, 3), Process(2, 1, 0)])


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_negative_arrival_rejected(name):
    with pytest.raises(InvalidWorkloadError, match="negative arrival"):
        run_algorithm(name, [Process(1, -1, 2)])


def test_fcfs_two_processes():
    res = schedule_fcfs([Process(1, 0, 5), Process(2, 1, 3)])
    assert [p.waiting_time for p in res.processes] == [0, 4]
    assert [p.turnaround_time for p in res.processes] == [5, 7]
    assert res.summary.avg_waiting == 2.0
    assert res.summary.avg_turnaround == 6.0
    assert res.summary.throughput == 2 / 8
    assert res.timeline == [ScheduledSlice(1, 0, 5), ScheduledSlice(2, 5, 8)]


def test_fcfs_order():
    res = schedule_fcfs(_procs())
    assert [s.pid for s in res.timeline] == [1, 2, 3]
    assert [p.waiting_time for p in res.processes] == [0, 4, 6]


def test_fcfs_keeps_input_order():
    # Not re-sorted by arrival: process 1 is serviced first even though 2 arrived earlier.
    res = schedule_fcfs([Process(1, 2, 3), Process(2, 0, 1)])
    assert _slices(res) == [(1, 2, 5), (2, 5, 6)]
    assert [p.waiting_time for p in res.processes] == [0, 5]


def test_fcfs_idles_until_arrival():
    res = schedule_fcfs([Process(1, 0, 2), Process(2, 5, 3)])
    assert _slices(res) == [(1, 0, 2), (2, 5, 8)]
    assert res.processes[1].waiting_time == 0
    assert res.processes[1].completion_time == 8


def test_sjf_shortest_first():
    res = schedule_sjf([Process(1, 0, 3), Process(2, 0, 1)])
    assert _slices(res) == [(2, 0, 1), (1, 1, 4)]
    assert [p.waiting_time for p in res.processes] == [1, 0]
    assert [p.completion_time for p in res.processes] == [4, 1]


def test_sjf_preempts_on_shorter_arrival():
    res = schedule_sjf([Process(1, 0, 5), Process(2, 2, 2)])
    assert _slices(res) == [(1, 0, 2), (2, 2, 4), (1, 4, 7)]
    assert [p.waiting_time for p in res.processes] == [2, 0]
    assert res.summary.avg_turnaround == (7 + 2) / 2


def test_sjf_tie_goes_to_first_listed():
    res = schedule_sjf([Process(1, 0, 2), Process(2, 0, 2)])
    assert _slices(res) == [(1, 0, 2), (2, 2, 4)]


def test_sjf_equal_remaining_arrival_takes_cpu_from_later_index():
    # At t=1 process 1 (index 0) arrives with remaining 2, equal to process 2's.
    res = schedule_sjf([Process(1, 1, 2), Process(2, 0, 3)])
    assert _slices(res) == [(2, 0, 1), (1, 1, 3), (2, 3, 5)]


def test_sjf_idles_until_first_arrival():
    res = schedule_sjf([Process(1, 3, 2)])
    assert _slices(res) == [(1, 3, 5)]
    assert res.processes[0].waiting_time == 0
    assert res.summary.throughput == 1 / 5


def test_priority_preempts_lower_priority():
    procs = [Process(1, 0, 4, 2), Process(2, 1, 2, 1), Process(3, 1, 1, 1)]
    res = schedule_priority(procs)
    assert _slices(res) == [(1, 0, 1), (2, 1, 3), (3, 3, 4), (1, 4, 7)]
    assert [p.waiting_time for p in res.processes] == [3, 0, 2]
    assert [p.completion_time for p in res.processes] == [7, 3, 4]
    assert res.summary.avg_waiting == 5 / 3
    assert res.summary.throughput == 3 / 7


def test_priority_static():
    res = schedule_priority(_procs())
    assert res.timeline[0].pid == 1
    assert res.timeline[1].pid == 2
    assert _slices(res) == [(1, 0, 1), (2, 1, 4), (1, 4, 8), (3, 8, 16)]


def test_priority_defaults_to_input_order():
    res = schedule_priority([Process(1, 0, 2), Process(2, 0, 1)])
    assert _slices(res) == [(1, 0, 2), (2, 2, 3)]


def test_priority_large_values():
    res = schedule_priority([Process(1, 0, 1, 100000), Process(2, 0, 1, 200000)])
    assert _slices(res) == [(1, 0, 1), (2, 1, 2)]


def test_rr_default_quantum():
    res = schedule_rr([Process(1, 0, 5), Process(2, 0, 3)])
    assert res.quantum == 4
    assert _slices(res) == [(1, 0, 4), (2, 4, 7), (1, 7, 8)]
    assert res.processes[1].completion_time == 7
    assert res.processes[1].waiting_time == 4
    assert res.processes[0].waiting_time == 3


def test_rr_lone_process_keeps_cpu():
    res = schedule_rr([Process(1, 0, 10), Process(2, 0, 4), Process(3, 0, 2)])
    assert _slices(res) == [(1, 0, 4), (2, 4, 8), (3, 8, 10), (1, 10, 16)]
    assert [p.waiting_time for p in res.processes] == [6, 4, 8]


def test_rr_quantum_2():
    res = schedule_rr(_procs(), quantum=2)
    assert {s.pid for s in res.timeline} == {1, 2, 3}
    assert sum(s.duration for s in res.timeline) == sum(p.burst_time for p in _procs())
    assert _slices(res)[:3] == [(1, 0, 2), (2, 2, 4), (3, 4, 6)]


def test_rr_idles_until_arrival():
    res = schedule_rr([Process(1, 0, 2), Process(2, 5, 2)])
    assert _slices(res) == [(1, 0, 2), (2, 5, 7)]
    assert res.summary.throughput == 2 / 7


def test_rr_rejects_bad_quantum():
    with pytest.raises(ValueError):
        schedule_rr(_procs(), quantum=0)


def test_run_algorithm_unknown():
    with pytest.raises(ValueError):
        run_algorithm("mlfq", _procs())


def test_run_algorithm_case_insensitive():
    assert run_algorithm("FCFS", _procs()).algorithm == "First-come, first-serve"
