from __future__ import annotations

import logging
from typing import Optional, Sequence

from .models import Process, ScheduleResult
from .simulation import Policy, SimulationState, is_ready, simulate, validate_processes

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 4


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes are serviced in the order given; they are not re-sorted by
    arrival time. If the CPU is free before a process arrives, the clock
    advances to its arrival.
    """
    validate_processes(processes)
    state = SimulationState.for_processes(processes)

    time = 0
    for index, p in enumerate(processes):
        start_time = max(time, p.arrival_time)
        time = start_time + p.burst_time

        state.close_slice(p, start_time, time)
        state.record_completion(index, p, time)

    logger.debug("FCFS: %d processes finished at t=%d", len(processes), time)
    return state.to_result("First-come, first-serve")


def _pick_shortest_remaining(
    processes: Sequence[Process], state: SimulationState, time: int
) -> Optional[int]:
    chosen = None
    shortest = float("inf")

    for index, p in enumerate(processes):
        remaining = state.remaining[index]
        if p.arrival_time <= time and remaining < shortest and remaining > 0:
            chosen = index
            shortest = remaining
        # A process arriving right now gets its own check after the general one.
        if p.arrival_time == time and remaining < shortest and remaining > 0:
            chosen = index
            shortest = remaining

    return chosen


def _pick_highest_priority(
    processes: Sequence[Process], state: SimulationState, time: int
) -> Optional[int]:
    chosen = None
    best_priority = float("inf")
    shortest = float("inf")

    for index, p in enumerate(processes):
        remaining = state.remaining[index]
        if p.arrival_time <= time and p.priority < best_priority and remaining > 0:
            chosen = index
            best_priority = p.priority
            shortest = remaining
        if (
            p.arrival_time == time
            and p.priority < best_priority
            and remaining > 0
            and remaining < shortest
        ):
            chosen = index
            best_priority = p.priority
            shortest = remaining

    return chosen


def _round_robin_policy(quantum: int) -> Policy:
    def pick(processes: Sequence[Process], state: SimulationState, time: int) -> Optional[int]:
        current = state.current
        if current is not None:
            quantum_used = state.run_length % quantum == 0
            if not quantum_used and state.remaining[current] > 0:
                return current
            start = current + 1
        else:
            start = state.cursor

        # Walk the circular cursor; a lone ready process lands back on itself
        # and simply gets a fresh quantum.
        count = len(processes)
        for offset in range(count):
            index = (start + offset) % count
            if is_ready(processes[index], state.remaining[index], time):
                state.cursor = index
                return index
        return None

    return pick


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First, preemptive (shortest remaining time first).

    Each unit of time the arrived process with the least remaining burst
    runs; ties go to the process listed first.
    """
    return simulate("Shortest-job-first", processes, _pick_shortest_remaining)


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Preemptive priority scheduling.

    Lower numeric priority value means higher priority. Among arrived
    processes with the same priority the one listed first wins.
    """
    return simulate("Priority", processes, _pick_highest_priority)


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    The ready "queue" is the input order walked as a circular list.
    """
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    if quantum <= 0:
        raise ValueError(f"Round Robin requires a positive quantum, got {quantum}")

    return simulate("Round-robin", processes, _round_robin_policy(quantum), quantum=quantum)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
}

DEFAULT_ALGORITHMS = list(ALGORITHMS)


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)
