"""Pytest configuration and fixtures."""
from datetime import date
from typing import List

import pytest

from schedule_engine.cpm.models import Task


def make_task(task_id: str, **kwargs) -> Task:
    """Build a Task with defaults suited to tests."""
    kwargs.setdefault('project_id', 'P1')
    kwargs.setdefault('name', f'Task {task_id}')
    return Task(id=task_id, **kwargs)


@pytest.fixture
def task_factory():
    """Factory building Tasks in project P1 by default."""
    return make_task


@pytest.fixture
def chain_tasks() -> List[Task]:
    """A -> B -> C, ten days each, starting 2026-03-01."""
    return [
        make_task('A', start_date=date(2026, 3, 1), end_date=date(2026, 3, 11), duration_days=10),
        make_task('B', predecessor_ids=['A'], duration_days=10,
                  start_date=date(2026, 3, 11), end_date=date(2026, 3, 21)),
        make_task('C', predecessor_ids=['B'], duration_days=10,
                  start_date=date(2026, 3, 21), end_date=date(2026, 3, 31)),
    ]


@pytest.fixture
def diamond_tasks() -> List[Task]:
    """
    A fans out to a long branch (B, 10d) and a short branch (C, 3d) that
    rejoin at D.
    """
    return [
        make_task('A', start_date=date(2026, 1, 1), duration_days=2),
        make_task('B', predecessor_ids=['A'], duration_days=10),
        make_task('C', predecessor_ids=['A'], duration_days=3),
        make_task('D', predecessor_ids=['B', 'C'], duration_days=1),
    ]


@pytest.fixture
def crane_tasks() -> List[Task]:
    """Two tasks sharing Crane-1 with overlapping date ranges."""
    return [
        make_task('T1', start_date=date(2026, 3, 1), end_date=date(2026, 3, 5),
                  assigned_resources=['Crane-1']),
        make_task('T2', start_date=date(2026, 3, 3), end_date=date(2026, 3, 8),
                  assigned_resources=['Crane-1']),
    ]


@pytest.fixture
def tasks_csv(tmp_path):
    """Tasks CSV spanning two projects and an unassigned task."""
    path = tmp_path / 'tasks.csv'
    path.write_text(
        'id,project_id,name,start_date,end_date,duration_days,predecessor_ids,'
        'lag_days,assigned_resources,status,baseline_start,baseline_end\n'
        'A,P1,Excavate,2026-03-01,2026-03-11,10,,0,Crane-1,active,2026-03-01,2026-03-09\n'
        'B,P1,Foundations,2026-03-11,2026-03-21,10,A,0,Crane-1;Crew-2,not_started,,\n'
        'C,P1,Frame,2026-03-21,2026-03-31,10,B,0,,not_started,,\n'
        'D,P1,Inspection,2026-03-31,2026-04-01,1,C,0,,not_started,,\n'
        'X,P2,Survey,2026-03-05,2026-03-09,4,,0,Crane-1,active,,\n'
        'U,,Loose end,2026-05-01,2026-05-03,2,,0,,cancelled,,\n',
        encoding='utf-8',
    )
    return path
