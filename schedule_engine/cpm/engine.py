"""
CPM (Critical Path Method) Engine.

Implements forward and backward pass calculations as bounded fixed-point
relaxations over calendar days.
"""

import logging
from datetime import date
from typing import Optional

from .models import ProjectSchedule, ScheduleStatus, TaskSchedule
from .network import TaskNetwork
from ..config.settings import settings
from ..utils.helpers import days_between, shift_days

logger = logging.getLogger(__name__)


class CPMEngine:
    """
    CPM calculation engine for a single project.

    Performs forward pass (early dates), backward pass (late dates),
    float calculation, and critical path identification. Both passes sweep
    the tasks in network order until a sweep changes nothing, so predecessor
    lists may arrive in any order. The sweep count is capped at
    max_iterations to bound work on cyclic input.
    """

    def __init__(self, network: TaskNetwork, project_id: str = None,
                 max_iterations: int = None):
        """
        Initialize CPM engine.

        Args:
            network: Task network to calculate (one project)
            project_id: Project key reported in the results
            max_iterations: Sweep cap per pass (default: settings.CPM_MAX_ITERATIONS)
        """
        if max_iterations is None:
            max_iterations = settings.CPM_MAX_ITERATIONS
        if not isinstance(max_iterations, int) or max_iterations < 1:
            raise ValueError(f"max_iterations must be a positive integer, got {max_iterations!r}")

        self.network = network
        self.project_id = project_id or settings.UNASSIGNED_PROJECT_KEY
        self.max_iterations = max_iterations

        self.early_start: dict[str, date] = {}
        self.early_finish: dict[str, date] = {}
        self.late_start: dict[str, date] = {}
        self.late_finish: dict[str, date] = {}
        self.out_of_range: set[str] = set()

    def forward_pass(self) -> tuple[int, bool]:
        """
        Calculate early start and early finish for all tasks.

        Start tasks are anchored on their own start_date. Every other task
        starts at the latest predecessor early finish plus its lag; a task
        is only ever pushed later, never earlier. A task whose dates would
        leave the supported date range gets none.

        Returns:
            (sweeps performed, whether a fixed point was reached)
        """
        self.early_start.clear()
        self.early_finish.clear()
        self.out_of_range.clear()
        tasks = self.network.tasks

        for task_id in self.network.get_start_tasks():
            task = tasks[task_id]
            if task.start_date is None:
                continue
            early_finish = shift_days(task.start_date, task.duration_days)
            if early_finish is None:
                self.out_of_range.add(task_id)
                continue
            self.early_start[task_id] = task.start_date
            self.early_finish[task_id] = early_finish

        changed = True
        iterations = 0
        while changed and iterations < self.max_iterations:
            changed = False
            iterations += 1

            for task_id, task in tasks.items():
                predecessors = self.network.get_predecessors(task_id)
                if not predecessors:
                    continue

                driving_finish = max(
                    (self.early_finish[d.pred_task_id] for d in predecessors
                     if d.pred_task_id in self.early_finish),
                    default=None,
                )
                if driving_finish is None:
                    continue

                early_start = shift_days(driving_finish, task.lag_days)
                if task_id in self.early_start and (early_start is None or early_start <= self.early_start[task_id]):
                    continue
                early_finish = None if early_start is None else shift_days(early_start, task.duration_days)
                if early_finish is None:
                    self.out_of_range.add(task_id)
                    self.early_start.pop(task_id, None)
                    self.early_finish.pop(task_id, None)
                    continue

                self.early_start[task_id] = early_start
                self.early_finish[task_id] = early_finish
                changed = True

        converged = not changed
        logger.debug(f"[{self.project_id}] forward pass: {iterations} sweeps, converged={converged}")
        return iterations, converged

    def backward_pass(self, project_end: date) -> tuple[int, bool]:
        """
        Calculate late start and late finish for all tasks.

        Every task is seeded with late_finish = project_end; a task with
        successors is then pulled back to the earliest successor late start
        minus that successor's lag. Tasks whose late dates fall outside the
        supported date range are left without late dates.

        Returns:
            (sweeps performed, whether a fixed point was reached)
        """
        tasks = self.network.tasks
        self.late_finish = {}
        self.late_start = {}
        for task_id, task in tasks.items():
            late_start = shift_days(project_end, -task.duration_days)
            if late_start is not None:
                self.late_finish[task_id] = project_end
                self.late_start[task_id] = late_start

        changed = True
        iterations = 0
        while changed and iterations < self.max_iterations:
            changed = False
            iterations += 1

            for task_id, task in tasks.items():
                candidates = [
                    shift_days(self.late_start[d.succ_task_id], -d.lag_days)
                    for d in self.network.get_successors(task_id)
                    if d.succ_task_id in self.late_start
                ]
                candidates = [c for c in candidates if c is not None]
                if not candidates:
                    continue

                late_finish = min(candidates)
                if task_id in self.late_finish and late_finish >= self.late_finish[task_id]:
                    continue
                late_start = shift_days(late_finish, -task.duration_days)
                if late_start is None:
                    self.out_of_range.add(task_id)
                    continue

                self.late_finish[task_id] = late_finish
                self.late_start[task_id] = late_start
                changed = True

        converged = not changed
        logger.debug(f"[{self.project_id}] backward pass: {iterations} sweeps, converged={converged}")
        return iterations, converged

    def get_project_end(self) -> Optional[date]:
        """Get the latest early finish as project completion date."""
        return max(self.early_finish.values(), default=None)

    def get_project_start(self) -> Optional[date]:
        """Get the earliest start date among scheduled start tasks."""
        starts = [
            self.early_start[tid]
            for tid in self.network.get_start_tasks()
            if tid in self.early_start
        ]
        return min(starts, default=None)

    def calculate_float(self) -> dict[str, TaskSchedule]:
        """
        Calculate total float and criticality for every scheduled task.

        Total Float = Late Start - Early Start (days), clamped at zero.
        The unclamped value is kept as raw_float.
        """
        annotations = {}
        for task_id, task in self.network.tasks.items():
            if task_id not in self.early_start or task_id not in self.late_start:
                continue

            raw_float = days_between(self.early_start[task_id], self.late_start[task_id])
            total_float = max(0, raw_float)
            annotations[task_id] = TaskSchedule(
                task_id=task_id,
                project_id=self.project_id,
                task_name=task.name,
                duration_days=task.duration_days,
                early_start=self.early_start[task_id],
                early_finish=self.early_finish[task_id],
                late_start=self.late_start[task_id],
                late_finish=self.late_finish[task_id],
                raw_float=raw_float,
                total_float=total_float,
                is_critical=total_float == 0,
            )
        return annotations

    def run(self) -> ProjectSchedule:
        """
        Execute full CPM calculation.

        Never raises on data problems: cycles, missing dates and hitting the
        sweep cap are reported through the result's status fields.
        """
        if not self.network.tasks:
            return ProjectSchedule.empty(self.project_id)

        cycles = self.network.find_cycles()
        if cycles:
            logger.warning(
                f"[{self.project_id}] {len(cycles)} dependency cycle(s) found; "
                f"results are approximate. First: {cycles[0]}"
            )

        forward_iterations, forward_converged = self.forward_pass()
        project_end = self.get_project_end()

        backward_iterations, backward_converged = 0, True
        annotations = {}
        if project_end is not None:
            backward_iterations, backward_converged = self.backward_pass(project_end)
            annotations = self.calculate_float()

        project_start = self.get_project_start()
        longest_path = 0
        if project_start is not None and project_end is not None:
            longest_path = days_between(project_start, project_end)

        if self.out_of_range:
            logger.warning(
                f"[{self.project_id}] {len(self.out_of_range)} tasks have dates outside the "
                f"supported range and are left unscheduled: {sorted(self.out_of_range)[:5]}"
            )

        # Negative float only arises from cycles or a capped pass; it is
        # reported next to whichever of those statuses applies.
        infeasible = [tid for tid, ts in annotations.items() if ts.is_infeasible]
        if infeasible:
            logger.warning(
                f"[{self.project_id}] {len(infeasible)} tasks have negative float "
                f"(clamped to 0): {infeasible[:5]}"
            )

        if cycles:
            status = ScheduleStatus.CYCLIC
        elif not (forward_converged and backward_converged):
            status = ScheduleStatus.NOT_CONVERGED
            logger.warning(
                f"[{self.project_id}] CPM passes hit the {self.max_iterations}-sweep cap "
                f"without converging"
            )
        else:
            status = ScheduleStatus.OK

        unscheduled = [tid for tid in self.network.tasks if tid not in annotations]

        return ProjectSchedule(
            project_id=self.project_id,
            tasks=annotations,
            critical_task_ids=[tid for tid, ts in annotations.items() if ts.is_critical],
            project_start=project_start,
            project_finish=project_end,
            longest_path_days=longest_path,
            status=status,
            forward_iterations=forward_iterations,
            backward_iterations=backward_iterations,
            forward_converged=forward_converged,
            backward_converged=backward_converged,
            cycles=cycles,
            unscheduled_task_ids=unscheduled,
        )
