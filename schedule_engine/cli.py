"""
CLI interface for the scheduling engine.

Provides command-line access to critical path analysis, dependency
propagation and schedule validation over a tasks CSV.

Usage:
    python -m schedule_engine.cli analyze tasks.csv [--output-dir DIR]
    python -m schedule_engine.cli propagate tasks.csv --task-id T1 --end-date 2026-03-16
    python -m schedule_engine.cli validate tasks.csv
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from .analysis.compression import check_schedule_compression
from .analysis.critical_path import calculate_critical_path, print_critical_path_report
from .analysis.dependency_propagation import propagate_date_change
from .analysis.resource_conflicts import detect_resource_conflicts
from .analysis.schedule_variance import calculate_schedule_variance
from .analysis.validation import validate_schedule
from .config.settings import settings
from .data_loader import load_tasks
from .export import (
    compression_to_dataframe,
    conflicts_to_dataframe,
    project_summary_to_dataframe,
    schedule_to_dataframe,
    updates_to_dataframe,
    variance_to_dataframe,
    write_outputs,
)
from .utils.helpers import shift_days
from .utils.logger import configure_logging

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the whole package."""
    package_logger = configure_logging('schedule_engine')
    package_logger.setLevel(logging.DEBUG if verbose else settings.LOG_LEVEL)


def run_analyze(args: argparse.Namespace) -> int:
    tasks = load_tasks(args.tasks_csv)

    result = calculate_critical_path(tasks, max_iterations=args.max_iterations)
    conflicts = detect_resource_conflicts(tasks)
    risks = check_schedule_compression(result)
    variances = calculate_schedule_variance(tasks)

    print_critical_path_report(result)
    print(f"\nResource conflicts: {len(conflicts)}")
    for conflict in conflicts[:10]:
        print(f"  {conflict.resource_id}: {conflict.task1.id} / {conflict.task2.id} "
              f"({conflict.overlap_start} -> {conflict.overlap_end})")
    print(f"Compression risks: {len(risks)}")
    for risk in risks[:10]:
        print(f"  {risk.task_id} ({risk.duration}d): {risk.risk}")

    if args.output_dir:
        written = write_outputs({
            'task_schedule.csv': schedule_to_dataframe(result),
            'project_summary.csv': project_summary_to_dataframe(result),
            'resource_conflicts.csv': conflicts_to_dataframe(conflicts),
            'compression_risks.csv': compression_to_dataframe(risks),
            'schedule_variance.csv': variance_to_dataframe(variances),
        }, args.output_dir)
        print(f"\nWrote {len(written)} files to {args.output_dir}")

    return 0


def run_propagate(args: argparse.Namespace) -> int:
    tasks = load_tasks(args.tasks_csv)
    by_id = {t.id: t for t in tasks}
    if args.task_id not in by_id:
        logger.error(f"Task {args.task_id} not found in {args.tasks_csv}")
        return 2

    task = by_id[args.task_id]
    changes = {}
    if args.duration is not None:
        changes['duration_days'] = max(0, args.duration)
    if args.end_date:
        changes['end_date'] = args.end_date
    elif args.duration is not None:
        # A new duration alone moves the finish to start + duration
        changes['end_date'] = (
            None if task.start_date is None
            else shift_days(task.start_date, changes['duration_days'])
        )
    changed_task = task.copy(**changes)

    updates = propagate_date_change(changed_task, tasks)
    print(f"{len(updates)} suggested updates downstream of {args.task_id}:")
    for update in updates:
        print(f"  {update.id}: {update.start_date} -> {update.end_date}")

    if args.output_dir:
        write_outputs({'date_updates.csv': updates_to_dataframe(updates)}, args.output_dir)

    return 0


def run_validate(args: argparse.Namespace) -> int:
    tasks = load_tasks(args.tasks_csv)
    issues = validate_schedule(tasks)

    if not issues:
        print(f"Schedule validation: PASSED ({len(tasks)} tasks)")
        return 0

    print(f"Schedule validation: {len(issues)} issues")
    for issue in issues:
        print(f"  - {issue}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Critical-path scheduling engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Critical path, conflicts and risks")
    analyze.add_argument("tasks_csv", type=Path, help="Tasks CSV")
    analyze.add_argument("--output-dir", type=Path, default=None,
                         help="Write result tables here")
    analyze.add_argument("--max-iterations", type=int, default=None,
                         help=f"Sweep cap per pass (default: {settings.CPM_MAX_ITERATIONS})")
    analyze.set_defaults(func=run_analyze)

    propagate = subparsers.add_parser("propagate", help="Cascade a task's date change")
    propagate.add_argument("tasks_csv", type=Path, help="Tasks CSV")
    propagate.add_argument("--task-id", required=True, help="Changed task")
    propagate.add_argument("--end-date", type=date.fromisoformat, default=None, help="New end date (YYYY-MM-DD)")
    propagate.add_argument("--duration", type=int, default=None, help="New duration in days")
    propagate.add_argument("--output-dir", type=Path, default=None,
                           help="Write date_updates.csv here")
    propagate.set_defaults(func=run_propagate)

    validate = subparsers.add_parser("validate", help="Check dependencies and dates")
    validate.add_argument("tasks_csv", type=Path, help="Tasks CSV")
    validate.set_defaults(func=run_validate)

    return parser


def main(argv: list[str] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        return args.func(args)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
