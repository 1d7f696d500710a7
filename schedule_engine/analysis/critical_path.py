"""
Critical Path Analysis.

Runs the CPM engine per project over a flat task snapshot, aggregates the
results, and reports critical and near-critical tasks.
"""

import logging
from typing import Iterable

from ..config.settings import settings
from ..cpm.engine import CPMEngine
from ..cpm.models import CriticalPathResult, ProjectSchedule, Task
from ..cpm.network import TaskNetwork
from ..cpm.partition import partition_by_project

logger = logging.getLogger(__name__)


def calculate_project_schedule(
    tasks: Iterable[Task],
    project_id: str = None,
    max_iterations: int = None,
) -> ProjectSchedule:
    """
    Calculate early/late dates, float and criticality for one project.

    Args:
        tasks: Tasks belonging to a single project
        project_id: Project key reported in the result
        max_iterations: Sweep cap per pass (default: settings.CPM_MAX_ITERATIONS)

    Returns:
        ProjectSchedule with per-task annotations and longest path
    """
    network = TaskNetwork.from_tasks(tasks)
    engine = CPMEngine(network, project_id=project_id, max_iterations=max_iterations)
    return engine.run()


def calculate_critical_path(
    tasks: Iterable[Task],
    max_iterations: int = None,
) -> CriticalPathResult:
    """
    Calculate the critical path of every project in a task snapshot.

    Tasks are partitioned by project first; no task's dates are influenced
    by a task in another project.

    Args:
        tasks: Flat task collection for one or more projects
        max_iterations: Sweep cap per pass (default: settings.CPM_MAX_ITERATIONS)

    Returns:
        CriticalPathResult keyed by project
    """
    by_project = {}
    for project_id, project_tasks in partition_by_project(tasks).items():
        by_project[project_id] = calculate_project_schedule(
            project_tasks, project_id=project_id, max_iterations=max_iterations,
        )
        logger.debug(
            f"[{project_id}] {len(project_tasks)} tasks, "
            f"{len(by_project[project_id].critical_task_ids)} critical, "
            f"status={by_project[project_id].status.value}"
        )

    return CriticalPathResult(by_project=by_project)


def print_critical_path_report(
    result: CriticalPathResult,
    near_critical_threshold_days: int = None,
) -> None:
    """Print a formatted critical path report."""
    if near_critical_threshold_days is None:
        near_critical_threshold_days = settings.NEAR_CRITICAL_THRESHOLD_DAYS

    tasks = result.tasks
    print("=" * 80)
    print("CRITICAL PATH ANALYSIS REPORT")
    print("=" * 80)

    print(f"\nProjects: {len(result.by_project)}")
    print(f"Scheduled Tasks: {len(tasks)}")
    print(f"Critical Tasks: {len(result.critical_task_ids)}")
    print(f"Longest Path: {result.longest_path_days} days")

    print("\n--- Projects ---")
    for project_id, schedule in result.by_project.items():
        print(f"  {project_id:20s} | {schedule.status.value:13s} | "
              f"{schedule.project_start} -> {schedule.project_finish} | "
              f"{schedule.longest_path_days:4d}d | "
              f"sweeps {schedule.forward_iterations}/{schedule.backward_iterations}")
        for cycle in schedule.cycles[:3]:
            print(f"      cycle: {' -> '.join(cycle + cycle[:1])}")
        if schedule.unscheduled_task_ids:
            print(f"      unscheduled: {len(schedule.unscheduled_task_ids)} tasks")
        if schedule.infeasible_task_ids:
            print(f"      negative float: {len(schedule.infeasible_task_ids)} tasks")

    if tasks:
        print("\n--- Float Distribution ---")
        for bucket, count in result.float_distribution().items():
            pct = count / len(tasks) * 100
            bar = '#' * int(pct / 2)
            print(f"  {bucket:15s}: {count:5d} ({pct:5.1f}%) {bar}")

    critical = result.get_critical_tasks()
    print("\n--- Critical Path (first 20 tasks) ---")
    for i, task in enumerate(critical[:20]):
        print(f"  {i+1:3d}. {task.task_id:20s} | {task.task_name[:40]:40s} | "
              f"{task.early_start} -> {task.early_finish}")

    if len(critical) > 20:
        print(f"  ... and {len(critical) - 20} more critical tasks")

    near_critical = result.get_near_critical_tasks(near_critical_threshold_days)
    print(f"\n--- Near-Critical Tasks (<= {near_critical_threshold_days}d float, first 10) ---")
    for i, task in enumerate(near_critical[:10]):
        print(f"  {i+1:3d}. {task.task_id:20s} | Float: {task.total_float:3d}d | "
              f"{task.task_name[:35]:35s}")

    print("\n" + "=" * 80)
