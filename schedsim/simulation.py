"""
Time-stepped simulation loop shared by the preemptive schedulers.

A policy looks at the simulation state once per unit of simulated time and
returns the index (into the input sequence) of the process that gets the CPU
for that unit, or ``None`` if nothing is ready. The loop owns all the
bookkeeping: remaining bursts, run lengths, slice closing and the
wait/turnaround accumulators.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .metrics import compute_summary
from .models import (
    InvalidWorkloadError,
    Process,
    ProcessMetrics,
    ScheduledSlice,
    ScheduleResult,
)

logger = logging.getLogger(__name__)


@dataclass
class SimulationState:
    remaining: List[int]
    rows: List[Optional[ProcessMetrics]]
    current: Optional[int] = None
    # Units the current process has run since it last got the CPU.
    run_length: int = 0
    # Round-robin position; unused by the other policies.
    cursor: int = 0
    timeline: List[ScheduledSlice] = field(default_factory=list)
    total_waiting: int = 0
    total_turnaround: int = 0
    last_completion: int = 0

    @classmethod
    def for_processes(cls, processes: Sequence[Process]) -> "SimulationState":
        return cls(
            remaining=[p.burst_time for p in processes],
            rows=[None] * len(processes),
        )

    def has_work(self) -> bool:
        return any(rt > 0 for rt in self.remaining)

    def close_slice(self, process: Process, start_time: int, end_time: int) -> None:
        self.timeline.append(
            ScheduledSlice(pid=process.pid, start_time=start_time, end_time=end_time)
        )

    def record_completion(self, index: int, process: Process, completion_time: int) -> None:
        turnaround_time = completion_time - process.arrival_time
        # Total waiting = turnaround - burst
        waiting_time = turnaround_time - process.burst_time

        self.rows[index] = ProcessMetrics(
            pid=process.pid,
            priority=process.priority,
            burst_time=process.burst_time,
            arrival_time=process.arrival_time,
            waiting_time=waiting_time,
            turnaround_time=turnaround_time,
            completion_time=completion_time,
        )
        self.total_waiting += waiting_time
        self.total_turnaround += turnaround_time
        self.last_completion = completion_time

    def to_result(self, algorithm: str, quantum: Optional[int] = None) -> ScheduleResult:
        processes = [row for row in self.rows if row is not None]
        summary = compute_summary(
            self.total_waiting,
            self.total_turnaround,
            len(processes),
            self.last_completion,
        )
        return ScheduleResult(
            algorithm=algorithm,
            quantum=quantum,
            processes=processes,
            timeline=list(self.timeline),
            summary=summary,
        )


Policy = Callable[[Sequence[Process], SimulationState, int], Optional[int]]


def validate_processes(processes: Sequence[Process]) -> None:
    """
    Reject workloads no scheduler can run, before any simulation starts.
    """
    if not processes:
        raise InvalidWorkloadError("No processes to schedule")

    for p in processes:
        if p.burst_time <= 0:
            raise InvalidWorkloadError(
                f"Process {p.pid} has non-positive burst time {p.burst_time}"
            )
        if p.arrival_time < 0:
            raise InvalidWorkloadError(
                f"Process {p.pid} has negative arrival time {p.arrival_time}"
            )


def is_ready(process: Process, remaining: int, time: int) -> bool:
    return process.arrival_time <= time and remaining > 0


def simulate(
    algorithm: str,
    processes: Sequence[Process],
    policy: Policy,
    quantum: Optional[int] = None,
) -> ScheduleResult:
    """
    Run ``policy`` one time unit at a time until every burst is consumed.

    The CPU idles for any unit in which the policy returns ``None``; that can
    only happen while some unfinished process has not arrived yet, so the
    loop always terminates for validated input.
    """
    validate_processes(processes)
    state = SimulationState.for_processes(processes)

    time = 0
    while state.has_work():
        previous = state.current
        previous_run = state.run_length

        chosen = policy(processes, state, time)
        if chosen != previous:
            state.run_length = 0
        state.current = chosen

        if chosen is not None:
            state.remaining[chosen] -= 1
            state.run_length += 1

        # Preempted process: close its slice first so the trace stays time-ordered.
        if previous is not None and previous != chosen and state.remaining[previous] > 0:
            state.close_slice(processes[previous], time - previous_run, time)
            logger.debug(
                "%s: t=%d process %s preempted by %s",
                algorithm,
                time,
                processes[previous].pid,
                None if chosen is None else processes[chosen].pid,
            )

        if chosen is not None and state.remaining[chosen] == 0:
            completion_time = time + 1
            state.close_slice(
                processes[chosen], completion_time - state.run_length, completion_time
            )
            state.record_completion(chosen, processes[chosen], completion_time)

        time += 1

    logger.debug("%s: %d processes finished at t=%d", algorithm, len(processes), time)
    return state.to_result(algorithm, quantum=quantum)
