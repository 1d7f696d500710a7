"""Unit tests for multi-project critical path analysis."""
from datetime import date

from schedule_engine.analysis.critical_path import (
    calculate_critical_path,
    print_critical_path_report,
)
from schedule_engine.config.settings import settings
from schedule_engine.cpm.models import ScheduleStatus


class TestCalculateCriticalPath:
    """Test per-project aggregation."""

    def test_empty_input(self):
        """No tasks gives an empty, well-typed result."""
        result = calculate_critical_path([])

        assert result.by_project == {}
        assert result.critical_task_ids == []
        assert result.tasks == {}
        assert result.longest_path_days == 0

    def test_projects_are_isolated(self, task_factory):
        """A predecessor in another project does not constrain the task."""
        tasks = [
            task_factory('A', project_id='P1', start_date=date(2026, 3, 1), duration_days=30),
            task_factory('Y', project_id='P2', predecessor_ids=['A'],
                         start_date=date(2026, 3, 2), duration_days=5),
        ]
        result = calculate_critical_path(tasks)

        assert set(result.by_project) == {'P1', 'P2'}
        assert result.get_task('Y').early_start == date(2026, 3, 2)
        assert result.by_project['P2'].longest_path_days == 5

    def test_longest_path_is_max_over_projects(self, chain_tasks, task_factory):
        tasks = chain_tasks + [
            task_factory('X', project_id='P2', start_date=date(2026, 3, 1), duration_days=4),
        ]
        result = calculate_critical_path(tasks)

        assert result.by_project['P1'].longest_path_days == 30
        assert result.by_project['P2'].longest_path_days == 4
        assert result.longest_path_days == 30

    def test_critical_ids_concatenated_in_project_order(self, chain_tasks, task_factory):
        tasks = [task_factory('X', project_id='P0', start_date=date(2026, 3, 1),
                              duration_days=4)] + chain_tasks
        result = calculate_critical_path(tasks)

        assert result.critical_task_ids == ['X', 'A', 'B', 'C']
        assert [t.task_id for t in result.get_critical_tasks()] == ['X', 'A', 'B', 'C']

    def test_unassigned_tasks_form_their_own_project(self, chain_tasks, task_factory):
        tasks = chain_tasks + [
            task_factory('U', project_id=None, start_date=date(2026, 5, 1), duration_days=2),
        ]
        result = calculate_critical_path(tasks)

        unassigned = result.by_project[settings.UNASSIGNED_PROJECT_KEY]
        assert list(unassigned.tasks) == ['U']
        assert unassigned.tasks['U'].project_id == settings.UNASSIGNED_PROJECT_KEY

    def test_max_iterations_passed_through(self, chain_tasks):
        result = calculate_critical_path(list(reversed(chain_tasks)), max_iterations=1)

        assert result.by_project['P1'].status == ScheduleStatus.NOT_CONVERGED
        assert not result.converged

    def test_root_invariant_across_projects(self, diamond_tasks, task_factory):
        """Every root's early start equals its supplied start date."""
        tasks = diamond_tasks + [
            task_factory('X', project_id='P2', start_date=date(2026, 2, 1), duration_days=3),
            task_factory('Y', project_id='P2', start_date=date(2026, 2, 9), duration_days=1),
            task_factory('Z', project_id='P2', predecessor_ids=['X', 'Y'], duration_days=2),
        ]
        result = calculate_critical_path(tasks)

        for task in tasks:
            if not task.predecessor_ids:
                assert result.get_task(task.id).early_start == task.start_date


class TestFloatQueries:
    """Test float-based helpers on the aggregate result."""

    def test_near_critical(self, diamond_tasks):
        result = calculate_critical_path(diamond_tasks)

        assert [t.task_id for t in result.get_near_critical_tasks(7)] == ['C']
        assert result.get_near_critical_tasks(6) == []

    def test_tasks_by_float_sorted(self, diamond_tasks):
        result = calculate_critical_path(diamond_tasks)
        floats = [t.total_float for t in result.get_tasks_by_float()]

        assert floats == sorted(floats)
        assert floats[-1] == 7

    def test_float_distribution(self, diamond_tasks):
        result = calculate_critical_path(diamond_tasks)
        buckets = result.float_distribution()

        assert buckets['0 (critical)'] == 3
        assert buckets['6-10 days'] == 1
        assert sum(buckets.values()) == 4

    def test_get_task_missing(self, chain_tasks):
        assert calculate_critical_path(chain_tasks).get_task('nope') is None


class TestReport:
    """Test the printed report."""

    def test_report_prints_summary(self, chain_tasks, capsys):
        print_critical_path_report(calculate_critical_path(chain_tasks))
        out = capsys.readouterr().out

        assert 'CRITICAL PATH ANALYSIS REPORT' in out
        assert 'Longest Path: 30 days' in out
        assert 'Critical Tasks: 3' in out

    def test_report_lists_cycles(self, task_factory, capsys):
        tasks = [
            task_factory('A', predecessor_ids=['B'], start_date=date(2026, 1, 1), duration_days=1),
            task_factory('B', predecessor_ids=['A'], duration_days=1),
        ]
        print_critical_path_report(calculate_critical_path(tasks, max_iterations=5))
        out = capsys.readouterr().out

        assert 'cyclic' in out
        assert 'cycle: A -> B -> A' in out

    def test_report_counts_negative_float(self, task_factory, capsys):
        tasks = [
            task_factory('A', start_date=date(2026, 1, 1), duration_days=1),
            task_factory('B', predecessor_ids=['A', 'C'], duration_days=1),
            task_factory('C', predecessor_ids=['B'], duration_days=1),
        ]
        print_critical_path_report(calculate_critical_path(tasks, max_iterations=10))
        out = capsys.readouterr().out

        assert 'negative float: 2 tasks' in out
