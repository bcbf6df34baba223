from __future__ import annotations

from typing import List

from .models import InvalidWorkloadError, ProcessMetrics, ScheduleSummary


def compute_summary(
    total_waiting: float,
    total_turnaround: float,
    count: int,
    last_completion: int,
) -> ScheduleSummary:
    """
    Turn accumulated per-process totals into average wait, average
    turnaround and throughput (processes per unit of simulated time).
    """
    if count <= 0:
        raise InvalidWorkloadError("Cannot summarize a schedule with no processes")
    if last_completion <= 0:
        raise InvalidWorkloadError(
            f"Cannot compute throughput with last completion time {last_completion}"
        )

    return ScheduleSummary(
        avg_waiting=total_waiting / count,
        avg_turnaround=total_turnaround / count,
        throughput=count / last_completion,
    )


def summarize_process_metrics(processes: List[ProcessMetrics]) -> ScheduleSummary:
    """
    Recompute the summary from a finished list of timing rows.
    """
    if not processes:
        raise InvalidWorkloadError("Cannot summarize a schedule with no processes")

    return compute_summary(
        sum(p.waiting_time for p in processes),
        sum(p.turnaround_time for p in processes),
        len(processes),
        max(p.completion_time for p in processes),
    )
