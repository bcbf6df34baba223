from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, DEFAULT_ALGORITHMS, DEFAULT_QUANTUM, run_algorithm
from .gantt import render_gantt
from .models import Process, ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, Priority, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Run scheduling algorithms on a workload and print their schedules.",
    )
    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )

    for sub in (run_parser, compare_parser):
        sub.add_argument(
            "--workload",
            "-w",
            required=True,
            help="Path to CSV (id,burst,arrival[,priority]) or JSON workload file.",
        )
        sub.add_argument(
            "--algorithms",
            "-a",
            nargs="+",
            choices=list(ALGORITHMS),
            default=DEFAULT_ALGORITHMS,
            help=f"Algorithms to run (default: {' '.join(DEFAULT_ALGORITHMS)}).",
        )
        sub.add_argument(
            "--quantum",
            "-q",
            type=int,
            default=DEFAULT_QUANTUM,
            help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
        )

    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_schedule_table(result: ScheduleResult) -> Table:
    """
    Per-process timing table with the averages and throughput in the footer.
    """
    summary = result.summary
    footers = {}
    if summary is not None:
        footers = {
            "Wait": f"Average\n{summary.avg_waiting:.2f}",
            "Turnaround": f"Average\n{summary.avg_turnaround:.2f}",
            "Completion": f"Throughput\n{summary.throughput:.2f}/t",
        }

    table = Table(title="Schedule table", box=box.SIMPLE_HEAVY, show_footer=bool(footers))
    for h in ["ID", "Priority", "Burst", "Arrival", "Wait", "Turnaround", "Completion"]:
        justify = "center" if h in {"ID", "Priority"} else "right"
        table.add_column(h, justify=justify, footer=footers.get(h, ""))

    for p in result.processes:
        table.add_row(
            str(p.pid),
            str(p.priority),
            str(p.burst_time),
            str(p.arrival_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.completion_time),
        )

    return table


def _print_result(result: ScheduleResult, console: Console) -> None:
    title = result.algorithm
    if result.quantum is not None:
        title += f" (quantum {result.quantum})"
    console.rule(f"[bold]{title}[/bold]")

    console.print(render_gantt(result.timeline))

    console.print()
    console.print(build_schedule_table(result))


def _run_compare(processes: List[Process], algorithms: List[str], quantum: int, title: str, console: Console) -> None:
    summary_table = Table(title=f"Algorithm comparison: {title}", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Throughput", justify="right")

    for alg in algorithms:
        q = quantum if alg == "rr" else None
        result = run_algorithm(alg, processes, quantum=q)
        summary = result.summary
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary.avg_waiting:.2f}",
            f"{summary.avg_turnaround:.2f}",
            f"{summary.throughput:.2f}/t",
        )

    console.print(summary_table)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        workload_path = Path(args.workload)
        processes = load_workload(workload_path)

        if args.command == "run":
            for alg in args.algorithms:
                q = args.quantum if alg == "rr" else None
                result = run_algorithm(alg, processes, quantum=q)
                _print_result(result, console)
                console.print()
            return 0

        if args.command == "compare":
            _run_compare(processes, args.algorithms, args.quantum, str(workload_path), console)
            return 0
    except (OSError, ValueError) as exc:
        logger.debug("Scheduling failed", exc_info=True)
        console.print(f"[red]Error: {exc}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
