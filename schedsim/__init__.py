"""
CPU scheduling simulator.

Runs FCFS, preemptive SJF, preemptive priority and round-robin scheduling
over a fixed workload and reports per-process timings, a Gantt trace and
aggregate statistics.
"""

__all__ = ["algorithms", "cli", "models"]
