from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional, Sequence

from rich import box
from rich.columns import Columns
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .config import LOG_LEVELS, Config, load_config
from .errors import InvalidParameter, SchedulerError
from .gantt import build_rich_gantt, legend, render_gantt
from .metrics import SORT_COLUMNS, sort_rows
from .models import ProcessDescriptor, ScheduleResult
from .timeline import iter_snapshots
from .workload_io import load_workload, sample_workload

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedviz",
        description="CPU scheduling visualizer (FCFS, SJF, Priority, Round Robin).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=config.log_level,
        help="Logging verbosity (default from SCHEDVIZ_LOG_LEVEL, else WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, priority, rr).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to JSON or CSV workload file (default: built-in sample).",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help=f"Time quantum for round-robin (default: {config.default_quantum}; ignored by other algorithms).",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a time-stepped simulation of the ready/CPU/completed queues.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=config.step_delay,
        help=f"Seconds to wait between steps when --step is used (default: {config.step_delay}).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the Gantt chart as plain text instead of a colored panel.",
    )
    run_parser.add_argument(
        "--sort-by",
        choices=list(SORT_COLUMNS),
        default="pid",
        help="Column to order the per-process table by (default: pid).",
    )
    run_parser.add_argument(
        "--desc",
        action="store_true",
        help="Sort the per-process table in descending order.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to JSON or CSV workload file (default: built-in sample).",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: fcfs sjf priority rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=config.default_quantum,
        help=f"Time quantum used for RR when included (default: {config.default_quantum}).",
    )

    return parser


def _load_processes(workload: Optional[str]) -> List[ProcessDescriptor]:
    if workload is None:
        logger.info("No workload given, using the built-in sample")
        return sample_workload()
    processes = load_workload(Path(workload))
    logger.info("Loaded %d processes from %s", len(processes), workload)
    return processes


def _print_result(
    result: ScheduleResult,
    console: Console,
    plain: bool = False,
    sort_by: str = "pid",
    descending: bool = False,
) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks, highlight=False)
        console.print(Columns(legend(result.timeline)))

    console.print()

    metrics = result.metrics
    if metrics is None:
        return

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for row in sort_rows(metrics.rows, sort_by, descending=descending):
        proc_table.add_row(
            row.pid,
            str(row.arrival_time),
            str(row.burst_time),
            str(row.priority),
            str(row.start_time),
            str(row.completion_time),
            str(row.turnaround_time),
            str(row.waiting_time),
            str(row.response_time),
        )

    console.print(proc_table)
    console.print()

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{metrics.avg_waiting:.2f}")
    sys_table.add_row("Avg turnaround", f"{metrics.avg_turnaround:.2f}")
    sys_table.add_row("Avg response", f"{metrics.avg_response:.2f}")
    sys_table.add_row("Throughput (proc/time)", f"{metrics.throughput:.2f}")
    sys_table.add_row("CPU utilization", f"{metrics.cpu_utilization:.2f}%")
    sys_table.add_row("Makespan", str(metrics.makespan))

    console.print(sys_table)


def _run_compare(
    processes: Sequence[ProcessDescriptor], algorithms: Sequence[str], quantum: int, console: Console
) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("CPU util.", justify="right")
    summary_table.add_column("Throughput", justify="right")

    for alg in algorithms:
        result = run_algorithm(alg, processes, quantum=quantum)
        metrics = result.metrics
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{metrics.avg_waiting:.2f}",
            f"{metrics.avg_turnaround:.2f}",
            f"{metrics.avg_response:.2f}",
            f"{metrics.cpu_utilization:.2f}%",
            f"{metrics.throughput:.2f}",
        )

    console.print(summary_table)


def _animate_result(
    result: ScheduleResult, processes: Sequence[ProcessDescriptor], delay: float, console: Console
) -> None:
    """
    Time-stepped textual simulation using the computed schedule.
    """
    makespan = result.metrics.makespan if result.metrics else 0
    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for snap in iter_snapshots(result.timeline, processes):
        if snap.running:
            cpu = f"[green]{snap.running}[/green] {snap.slice_elapsed}/{snap.slice_length}"
        else:
            cpu = "[dim]idle[/dim]"
        ready = " ".join(snap.ready) or "-"
        done = " ".join(snap.completed) or "-"
        console.print(f"t={snap.time:3d}  CPU: {cpu}  Ready: {ready}  Completed: {done}")
        time.sleep(delay)


def main(argv: list[str] | None = None) -> int:
    console = Console()

    try:
        config = load_config()
        parser = build_parser(config)
        args = parser.parse_args(argv)
        configure_logging(args.log_level)

        processes = _load_processes(args.workload)

        if args.command == "run":
            if args.step_delay < 0:
                raise InvalidParameter("--step-delay must not be negative")
            quantum = args.quantum if args.quantum is not None else config.default_quantum
            result = run_algorithm(args.algorithm, processes, quantum=quantum)
            if args.step:
                try:
                    _animate_result(result, processes, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console, plain=args.plain, sort_by=args.sort_by, descending=args.desc)
            return 0

        if args.command == "compare":
            _run_compare(processes, args.algorithms, args.quantum, console)
            return 0
    except SchedulerError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
