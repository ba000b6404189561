from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHM_INFO, ALGORITHMS
from .engine import resolve_policy, run_algorithm
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_process_metrics
from .models import Process, ScheduleResult
from .settings import settings
from .workload_io import load_workload, sample_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, Priority, RR, "
        "Preemptive Priority, Priority RR).",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        help=f"Logging level (default: {settings.LOG_LEVEL}).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        default=settings.DEFAULT_ALGORITHM,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}; default: {settings.DEFAULT_ALGORITHM}).",
    )
    _add_workload_arguments(run_parser)
    _add_parameter_arguments(run_parser)
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a simple time-stepped simulation in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=settings.STEP_DELAY,
        help=f"Seconds to wait between steps when --step is used (default: {settings.STEP_DELAY}).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Draw the Gantt chart as plain text instead of colored blocks.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    _add_workload_arguments(compare_parser)
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: all).",
    )
    _add_parameter_arguments(compare_parser)

    subparsers.add_parser("list", help="Describe the available algorithms.")

    return parser


def _add_workload_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--workload",
        "-w",
        help="Path to JSON or CSV workload file.",
    )
    source.add_argument(
        "--sample",
        action="store_true",
        help="Use the built-in five-process sample workload.",
    )


def _add_parameter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=settings.DEFAULT_QUANTUM,
        help=f"Time quantum for rr / priority_rr (default: {settings.DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--priority-mode",
        "-m",
        choices=["low", "high"],
        default=settings.DEFAULT_PRIORITY_MODE,
        help="Whether a lower or higher number means more urgent "
        f"(default: {settings.DEFAULT_PRIORITY_MODE}).",
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load_processes(args: argparse.Namespace) -> List[Process]:
    if args.sample:
        return sample_workload()
    return load_workload(Path(args.workload))


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")
    if result.priority_mode is not None:
        console.print(f"[bold]Priority mode:[/bold] {result.priority_mode.value} number first")

    console.print()

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks, highlight=False)

    console.print()

    headers = [
        "PID",
        "Name",
        "Arrive",
        "Burst",
        "Priority",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Name", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.by_pid():
        proc_table.add_row(
            str(p.pid),
            p.name,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.completion_time),
            str(p.turnaround_time),
            str(p.waiting_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    if result.system:
        sys = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{sys.avg_waiting:.2f}")
        sys_table.add_row("Avg turnaround", f"{sys.avg_turnaround:.2f}")
        sys_table.add_row("Avg response", f"{sys.avg_response:.2f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.2f}%")
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("Total time", str(sys.total_time))
        sys_table.add_row("Idle time", str(sys.idle_time))

        console.print(sys_table)

        state_table = Table(title="Run statistics", box=box.SIMPLE_HEAVY)
        state_table.add_column("Statistic")
        state_table.add_column("Value", justify="right")

        state_table.add_row("Total processes", str(len(result.processes)))
        state_table.add_row("Completed", str(sys.completed))
        state_table.add_row("Avg burst time", f"{sys.avg_burst_time:.2f}")
        state_table.add_row("Context switches", str(sys.context_switches))

        console.print(state_table)


def _animate_result(result: ScheduleResult, delay: float, console: Console) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    timeline = result.timeline
    if not timeline:
        console.print("[red]No execution to animate.[/red]")
        return

    makespan = timeline[-1].end_time
    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(makespan):
        sl = next(s for s in timeline if s.start_time <= t < s.end_time)
        if sl.is_idle:
            console.print(f"t={t:2d}: [dim]idle[/dim]")
        else:
            bar = f"[green]{'█' * (t - sl.start_time + 1)}[/green]"
            console.print(f"t={t:2d}: {escape(sl.name)} {bar}")
        time.sleep(delay)


def _run_compare(
    processes: List[Process],
    algorithms: List[str],
    quantum: int,
    priority_mode: str,
    console: Console,
) -> None:
    """
    Run each algorithm on the same workload and print the summary table.
    """
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("CPU util.", justify="right")

    for alg in algorithms:
        result = run_algorithm(alg, processes, quantum=quantum, priority_mode=priority_mode)
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            resolve_policy(alg).value,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            f"{result.system.cpu_utilization*100:.1f}%",
        )

    console.print(summary_table)


def _print_catalogue(console: Console) -> None:
    table = Table(title="Available algorithms", box=box.SIMPLE_HEAVY)
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Preemptive", justify="center")
    table.add_column("Parameters")
    table.add_column("Description")

    for policy, info in ALGORITHM_INFO.items():
        params = []
        if info.uses_quantum:
            params.append("quantum")
        if info.uses_priority:
            params.append("priority mode")
        table.add_row(
            policy.value,
            info.name,
            "yes" if info.preemptive else "no",
            ", ".join(params),
            info.description,
        )

    console.print(table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    console = Console()

    if args.command == "list":
        _print_catalogue(console)
        return 0

    try:
        processes = _load_processes(args)

        if args.command == "run":
            result = run_algorithm(
                args.algorithm,
                processes,
                quantum=args.quantum,
                priority_mode=args.priority_mode,
            )
            if args.step:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console, plain=args.plain)
            return 0

        if args.command == "compare":
            _run_compare(processes, args.algorithms, args.quantum, args.priority_mode, console)
            return 0
    except (OSError, ValueError) as exc:
        logger.debug("Run failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
