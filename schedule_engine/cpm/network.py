"""
Task Network for CPM calculations.

Manages one project's tasks and their finish-to-start dependencies with
adjacency lookups, cycle detection and topological ordering.
"""

import logging
from collections import defaultdict
from typing import Iterable

from .models import Task, Dependency

logger = logging.getLogger(__name__)


class CircularDependencyError(ValueError):
    """Raised when an ordering is requested for a graph containing a cycle."""

    def __init__(self, message: str, task_ids: list[str] = None):
        super().__init__(message)
        self.task_ids = task_ids or []


class TaskNetwork:
    """
    Task dependency network for CPM calculations.

    Holds private copies of the tasks, so calculations never touch
    caller-owned records. Task insertion order is preserved and drives
    the sweep order of the relaxation passes.
    """

    def __init__(self):
        self.tasks: dict[str, Task] = {}
        self.dependencies: list[Dependency] = []
        self.dropped_references: list[tuple[str, str]] = []   # (task_id, missing pred id)
        self._successors: dict[str, list[Dependency]] = defaultdict(list)
        self._predecessors: dict[str, list[Dependency]] = defaultdict(list)

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task]) -> 'TaskNetwork':
        """
        Build a network from task snapshots.

        Predecessor references to tasks outside the collection are dropped
        (treated as "no constraint") and recorded in dropped_references.
        """
        network = cls()
        tasks = list(tasks)
        for task in tasks:
            network.add_task(task.copy())

        for task in tasks:
            seen = set()
            for pred_id in task.predecessor_ids:
                if pred_id in seen:
                    continue
                seen.add(pred_id)
                dep = Dependency(pred_id, task.id, task.lag_days)
                if not network.add_dependency_safe(dep):
                    network.dropped_references.append((task.id, pred_id))

        # Keep the working copies consistent with the retained edges
        for task_id, task in network.tasks.items():
            task.predecessor_ids = [d.pred_task_id for d in network.get_predecessors(task_id)]

        if network.dropped_references:
            logger.warning(
                f"Dropped {len(network.dropped_references)} predecessor references "
                f"to tasks outside the network: {network.dropped_references[:5]}"
            )
        return network

    def add_task(self, task: Task) -> None:
        """Add a task to the network."""
        self.tasks[task.id] = task

    def add_dependency_safe(self, dep: Dependency) -> bool:
        """
        Add a dependency only if both tasks exist.

        Returns True if added, False if skipped.
        """
        if dep.pred_task_id not in self.tasks or dep.succ_task_id not in self.tasks:
            return False
        self.dependencies.append(dep)
        self._successors[dep.pred_task_id].append(dep)
        self._predecessors[dep.succ_task_id].append(dep)
        return True

    def get_successors(self, task_id: str) -> list[Dependency]:
        """Get dependencies where task_id is the predecessor."""
        return self._successors.get(task_id, [])

    def get_predecessors(self, task_id: str) -> list[Dependency]:
        """Get dependencies where task_id is the successor."""
        return self._predecessors.get(task_id, [])

    def get_start_tasks(self) -> list[str]:
        """Get task IDs with no predecessors."""
        return [tid for tid in self.tasks if not self._predecessors.get(tid)]

    def find_cycles(self) -> list[list[str]]:
        """
        Find dependency cycles with a depth-first search over successors.

        Returns one cycle per back edge found, each as the list of task IDs
        along the cycle (empty if the network is acyclic).
        """
        unvisited, on_stack, done = 0, 1, 2
        state = {tid: unvisited for tid in self.tasks}
        cycles = []

        for root in self.tasks:
            if state[root] != unvisited:
                continue

            state[root] = on_stack
            path = [root]
            stack = [iter(self.get_successors(root))]

            while stack:
                dep = next(stack[-1], None)
                if dep is None:
                    stack.pop()
                    state[path.pop()] = done
                    continue

                succ_id = dep.succ_task_id
                if state[succ_id] == on_stack:
                    cycles.append(path[path.index(succ_id):])
                elif state[succ_id] == unvisited:
                    state[succ_id] = on_stack
                    path.append(succ_id)
                    stack.append(iter(self.get_successors(succ_id)))

        return cycles

    def topological_sort(self) -> list[str]:
        """
        Return task IDs in topological order (predecessors before successors).

        Uses Kahn's algorithm. Raises CircularDependencyError if a cycle exists.
        """
        # Calculate in-degree for each task
        in_degree = {tid: len(self._predecessors.get(tid, [])) for tid in self.tasks}

        # Start with tasks that have no predecessors
        queue = [tid for tid, deg in in_degree.items() if deg == 0]
        result = []

        while queue:
            task_id = queue.pop(0)
            result.append(task_id)

            # Reduce in-degree for all successors
            for dep in self._successors.get(task_id, []):
                in_degree[dep.succ_task_id] -= 1
                if in_degree[dep.succ_task_id] == 0:
                    queue.append(dep.succ_task_id)

        if len(result) != len(self.tasks):
            ordered = set(result)
            remaining = [tid for tid in self.tasks if tid not in ordered]
            raise CircularDependencyError(
                f"Circular dependency detected involving {len(remaining)} tasks: "
                f"{remaining[:5]}...",
                task_ids=remaining,
            )

        return result

    def longest_chain_length(self) -> int:
        """Number of tasks on the longest dependency chain (acyclic networks only)."""
        depth: dict[str, int] = {}
        for task_id in self.topological_sort():
            preds = self.get_predecessors(task_id)
            depth[task_id] = 1 + max((depth[d.pred_task_id] for d in preds), default=0)
        return max(depth.values(), default=0)

    def __len__(self) -> int:
        return len(self.tasks)

    def __contains__(self, task_id: str) -> bool:
        return task_id in self.tasks

    def __repr__(self) -> str:
        return f"TaskNetwork({len(self.tasks)} tasks, {len(self.dependencies)} dependencies)"
