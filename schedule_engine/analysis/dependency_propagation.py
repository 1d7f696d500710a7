"""
Dependency Propagation.

Cascades a single task's date change through its finish-to-start successors
and returns suggested date updates. Nothing is applied to the input.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from ..cpm.models import DateUpdate, Task
from ..utils.helpers import shift_days

logger = logging.getLogger(__name__)


def _finish_basis(task: Task) -> Optional[date]:
    """Finish date driving successors: end_date, else start + duration."""
    if task.end_date is not None:
        return task.end_date
    if task.start_date is not None:
        return shift_days(task.start_date, task.duration_days)
    return None


def build_successor_index(tasks: list[Task]) -> dict[str, list[Task]]:
    """
    Map task id -> successor tasks, in input order.

    References to ids not present in the collection are ignored.
    """
    known_ids = {t.id for t in tasks}
    successors: dict[str, list[Task]] = {}
    for task in tasks:
        for pred_id in dict.fromkeys(task.predecessor_ids):
            if pred_id in known_ids:
                successors.setdefault(pred_id, []).append(task)
    return successors


def propagate_date_change(changed_task: Task, all_tasks: Iterable[Task]) -> list[DateUpdate]:
    """
    Compute suggested date updates for every task depending on changed_task.

    Depth-first over successors: new start = driving finish + successor lag,
    new end = new start + successor duration, and the successor's new end
    drives its own successors. A visited set bounds the walk on cyclic
    graphs: a task already walked is never walked again. Reaching it through
    a second path only records another update when that path pushes its
    start later; an edge into a walked task that would not move it later
    is deliberately not recorded, so updates never regress a date.
    Successors whose dates would leave the supported range are skipped.

    Args:
        changed_task: The task carrying its new dates
        all_tasks: Full task collection the task belongs to

    Returns:
        Ordered list of DateUpdate suggestions
    """
    all_tasks = list(all_tasks)
    successor_index = build_successor_index(all_tasks)
    updates: list[DateUpdate] = []
    visited: set[str] = set()
    latest_start: dict[str, date] = {}

    basis = _finish_basis(changed_task)
    if basis is None:
        logger.warning(f"Task {changed_task.id} has no dates; nothing to propagate")
        return updates

    visited.add(changed_task.id)
    if changed_task.start_date is not None:
        latest_start[changed_task.id] = changed_task.start_date

    # Explicit stack keeps deep chains clear of the recursion limit
    stack = [iter([(s, basis) for s in successor_index.get(changed_task.id, [])])]

    while stack:
        item = next(stack[-1], None)
        if item is None:
            stack.pop()
            continue

        successor, predecessor_finish = item
        new_start = shift_days(predecessor_finish, successor.lag_days)
        new_end = None if new_start is None else shift_days(new_start, successor.duration_days)
        if new_end is None:
            logger.warning(f"Task {successor.id}: propagated dates out of range; skipped")
            continue

        revisit = successor.id in visited
        if revisit and successor.id in latest_start and new_start <= latest_start[successor.id]:
            continue

        updates.append(DateUpdate(id=successor.id, start_date=new_start, end_date=new_end))
        latest_start[successor.id] = new_start

        if revisit:
            continue
        visited.add(successor.id)
        stack.append(iter([(s, new_end) for s in successor_index.get(successor.id, [])]))

    logger.debug(f"Propagated change of {changed_task.id} to {len(updates)} updates")
    return updates


def apply_date_updates(tasks: Iterable[Task], updates: list[DateUpdate]) -> list[Task]:
    """
    Return copies of tasks with updates applied (last update per id wins).

    The input tasks are left untouched.
    """
    latest = {}
    for update in updates:
        latest[update.id] = update

    result = []
    for task in tasks:
        update = latest.get(task.id)
        if update is None:
            result.append(task.copy())
        else:
            result.append(task.copy(start_date=update.start_date, end_date=update.end_date))
    return result
