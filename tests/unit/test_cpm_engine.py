"""Unit tests for the CPM engine forward/backward passes."""
from datetime import date, timedelta

import pytest

from schedule_engine.analysis.critical_path import calculate_project_schedule
from schedule_engine.cpm.engine import CPMEngine
from schedule_engine.cpm.models import ScheduleStatus, TaskSchedule
from schedule_engine.cpm.network import TaskNetwork


class TestChainScenario:
    """A -> B -> C, ten days each."""

    def test_early_dates(self, chain_tasks):
        """Each task starts when its predecessor finishes."""
        schedule = calculate_project_schedule(chain_tasks, project_id='P1')

        assert schedule.tasks['A'].early_start == date(2026, 3, 1)
        assert schedule.tasks['A'].early_finish == date(2026, 3, 11)
        assert schedule.tasks['B'].early_start == date(2026, 3, 11)
        assert schedule.tasks['B'].early_finish == date(2026, 3, 21)
        assert schedule.tasks['C'].early_start == date(2026, 3, 21)
        assert schedule.tasks['C'].early_finish == date(2026, 3, 31)

    def test_all_tasks_critical(self, chain_tasks):
        """A single chain has no float anywhere."""
        schedule = calculate_project_schedule(chain_tasks, project_id='P1')

        assert schedule.critical_task_ids == ['A', 'B', 'C']
        assert all(ts.total_float == 0 for ts in schedule.tasks.values())

    def test_longest_path(self, chain_tasks):
        """Longest path spans from root start to project completion."""
        schedule = calculate_project_schedule(chain_tasks, project_id='P1')

        assert schedule.project_start == date(2026, 3, 1)
        assert schedule.project_finish == date(2026, 3, 31)
        assert schedule.longest_path_days == 30

    def test_status_ok_and_converged(self, chain_tasks):
        schedule = calculate_project_schedule(chain_tasks, project_id='P1')

        assert schedule.status == ScheduleStatus.OK
        assert schedule.converged
        assert schedule.cycles == []
        assert schedule.unscheduled_task_ids == []


class TestDiamond:
    """Parallel branches of different length."""

    def test_short_branch_has_float(self, diamond_tasks):
        """The short branch can slip by the length difference."""
        schedule = calculate_project_schedule(diamond_tasks, project_id='P1')

        assert schedule.tasks['C'].total_float == 7
        assert not schedule.tasks['C'].is_critical
        assert schedule.tasks['C'].late_finish == date(2026, 1, 13)

    def test_critical_path_follows_long_branch(self, diamond_tasks):
        schedule = calculate_project_schedule(diamond_tasks, project_id='P1')

        assert schedule.critical_task_ids == ['A', 'B', 'D']
        assert schedule.tasks['D'].early_start == date(2026, 1, 13)
        assert schedule.project_finish == date(2026, 1, 14)

    def test_finish_derivation(self, diamond_tasks):
        """Finishes are always start + duration."""
        schedule = calculate_project_schedule(diamond_tasks, project_id='P1')

        for task in diamond_tasks:
            ts = schedule.tasks[task.id]
            assert ts.early_finish - ts.early_start == timedelta(days=task.duration_days)
            assert ts.late_finish - ts.late_start == timedelta(days=task.duration_days)


class TestRelaxation:
    """Order independence, lag and convergence bounds."""

    def test_input_order_does_not_matter(self, chain_tasks):
        """Reversed input converges to the same dates."""
        forward = calculate_project_schedule(chain_tasks, project_id='P1')
        reverse = calculate_project_schedule(list(reversed(chain_tasks)), project_id='P1')

        for task_id, ts in forward.tasks.items():
            assert reverse.tasks[task_id].early_start == ts.early_start
            assert reverse.tasks[task_id].late_finish == ts.late_finish

    def test_converges_within_chain_length_plus_one(self, chain_tasks):
        """Sweeps never exceed the longest chain length + 1."""
        tasks = list(reversed(chain_tasks))
        network = TaskNetwork.from_tasks(tasks)
        bound = network.longest_chain_length() + 1

        schedule = CPMEngine(network, project_id='P1').run()

        assert schedule.forward_iterations <= bound
        assert schedule.backward_iterations <= bound
        assert schedule.converged

    def test_positive_lag(self, task_factory):
        tasks = [
            task_factory('A', start_date=date(2026, 3, 1), duration_days=10),
            task_factory('B', predecessor_ids=['A'], duration_days=5, lag_days=2),
        ]
        schedule = calculate_project_schedule(tasks)

        assert schedule.tasks['B'].early_start == date(2026, 3, 13)
        assert schedule.tasks['A'].late_finish == date(2026, 3, 11)
        assert schedule.tasks['A'].is_critical

    def test_negative_lag_is_a_lead(self, task_factory):
        tasks = [
            task_factory('A', start_date=date(2026, 3, 1), duration_days=10),
            task_factory('B', predecessor_ids=['A'], duration_days=5, lag_days=-3),
        ]
        schedule = calculate_project_schedule(tasks)

        assert schedule.tasks['B'].early_start == date(2026, 3, 8)
        assert schedule.tasks['B'].early_finish == date(2026, 3, 13)
        assert schedule.project_finish == date(2026, 3, 13)

    def test_root_start_is_never_moved(self, task_factory):
        """Roots keep their own start date even when other roots start earlier."""
        tasks = [
            task_factory('A', start_date=date(2026, 3, 1), duration_days=20),
            task_factory('B', start_date=date(2026, 3, 10), duration_days=2),
        ]
        schedule = calculate_project_schedule(tasks)

        assert schedule.tasks['A'].early_start == date(2026, 3, 1)
        assert schedule.tasks['B'].early_start == date(2026, 3, 10)
        assert schedule.tasks['B'].total_float == 9

    def test_successor_start_date_is_ignored(self, task_factory):
        """A task with predecessors is positioned by them, not by its own start date."""
        tasks = [
            task_factory('A', start_date=date(2026, 3, 1), duration_days=1),
            task_factory('B', predecessor_ids=['A'], start_date=date(2026, 6, 1), duration_days=1),
        ]
        schedule = calculate_project_schedule(tasks)

        assert schedule.tasks['B'].early_start == date(2026, 3, 2)


class TestDegradedInput:
    """Missing data degrades without raising."""

    def test_empty_project(self):
        schedule = calculate_project_schedule([], project_id='P9')

        assert schedule.status == ScheduleStatus.EMPTY
        assert schedule.tasks == {}
        assert schedule.critical_task_ids == []
        assert schedule.longest_path_days == 0

    def test_missing_predecessor_reference_is_no_constraint(self, task_factory):
        tasks = [
            task_factory('A', start_date=date(2026, 3, 1), duration_days=2),
            task_factory('B', predecessor_ids=['A', 'ghost'], duration_days=2),
        ]
        schedule = calculate_project_schedule(tasks)

        assert schedule.tasks['B'].early_start == date(2026, 3, 3)
        assert schedule.status == ScheduleStatus.OK

    def test_all_predecessors_missing_makes_a_root(self, task_factory):
        tasks = [task_factory('B', predecessor_ids=['ghost'], start_date=date(2026, 3, 5),
                              duration_days=2)]
        schedule = calculate_project_schedule(tasks)

        assert schedule.tasks['B'].early_start == date(2026, 3, 5)

    def test_root_without_start_date_is_unscheduled(self, task_factory):
        tasks = [
            task_factory('A', duration_days=2),
            task_factory('B', predecessor_ids=['A'], duration_days=2),
            task_factory('C', start_date=date(2026, 3, 1), duration_days=4),
        ]
        schedule = calculate_project_schedule(tasks)

        assert set(schedule.tasks) == {'C'}
        assert schedule.unscheduled_task_ids == ['A', 'B']
        assert schedule.longest_path_days == 4

    def test_dates_out_of_range_are_unscheduled(self, task_factory):
        """A duration pushing past the last representable day does not raise."""
        tasks = [
            task_factory('A', start_date=date(2026, 3, 1), duration_days=5_000_000),
            task_factory('B', start_date=date(2026, 3, 1), duration_days=3),
            task_factory('C', predecessor_ids=['A'], duration_days=1),
        ]
        schedule = calculate_project_schedule(tasks)

        assert set(schedule.tasks) == {'B'}
        assert schedule.unscheduled_task_ids == ['A', 'C']
        assert schedule.longest_path_days == 3
        assert schedule.status == ScheduleStatus.OK

    def test_lead_on_acyclic_graph_keeps_float_non_negative(self, task_factory):
        tasks = [
            task_factory('X', start_date=date(2026, 3, 1), duration_days=5),
            task_factory('Y', predecessor_ids=['X'], duration_days=1, lag_days=-20),
        ]
        schedule = calculate_project_schedule(tasks)

        assert schedule.status == ScheduleStatus.OK
        assert schedule.infeasible_task_ids == []

    def test_input_tasks_are_not_mutated(self, task_factory):
        tasks = [
            task_factory('A', start_date=date(2026, 3, 1), duration_days=2),
            task_factory('B', predecessor_ids=['A', 'ghost'], duration_days=2),
        ]
        calculate_project_schedule(tasks)

        assert tasks[1].predecessor_ids == ['A', 'ghost']
        assert tasks[1].start_date is None


class TestCycles:
    """Cyclic graphs are flagged and bounded, never fatal."""

    @pytest.fixture
    def cyclic_tasks(self, task_factory):
        return [
            task_factory('A', start_date=date(2026, 1, 1), duration_days=1),
            task_factory('B', predecessor_ids=['A', 'C'], duration_days=1),
            task_factory('C', predecessor_ids=['B'], duration_days=1),
        ]

    def test_cycle_reported(self, cyclic_tasks):
        schedule = calculate_project_schedule(cyclic_tasks, max_iterations=10)

        assert schedule.status == ScheduleStatus.CYCLIC
        assert schedule.cycles == [['B', 'C']]

    def test_cycle_hits_iteration_cap(self, cyclic_tasks):
        schedule = calculate_project_schedule(cyclic_tasks, max_iterations=10)

        assert schedule.forward_iterations == 10
        assert not schedule.forward_converged
        assert not schedule.converged

    def test_float_never_negative(self, cyclic_tasks):
        schedule = calculate_project_schedule(cyclic_tasks, max_iterations=10)

        assert schedule.tasks
        assert all(ts.total_float >= 0 for ts in schedule.tasks.values())

    def test_negative_float_reported_with_cyclic_status(self, cyclic_tasks):
        """Tasks on the cycle end up with late start before early start."""
        schedule = calculate_project_schedule(cyclic_tasks, max_iterations=10)

        assert schedule.status == ScheduleStatus.CYCLIC
        assert schedule.infeasible_task_ids == ['B', 'C']
        assert schedule.tasks['B'].raw_float == -18
        assert schedule.tasks['B'].total_float == 0
        assert not schedule.tasks['A'].is_infeasible

    def test_unanchored_cycle_gets_no_dates(self, task_factory):
        tasks = [
            task_factory('A', predecessor_ids=['B'], duration_days=1),
            task_factory('B', predecessor_ids=['A'], duration_days=1),
        ]
        schedule = calculate_project_schedule(tasks)

        assert schedule.status == ScheduleStatus.CYCLIC
        assert schedule.tasks == {}
        assert schedule.forward_converged


class TestIterationCap:
    """The sweep cap is configurable and observable."""

    def test_cap_of_one_on_reversed_chain(self, chain_tasks):
        schedule = calculate_project_schedule(list(reversed(chain_tasks)), max_iterations=1)

        assert schedule.forward_iterations == 1
        assert not schedule.forward_converged
        assert schedule.status == ScheduleStatus.NOT_CONVERGED

    @pytest.mark.parametrize("bad_value", [0, -5, 2.5])
    def test_invalid_cap_rejected(self, chain_tasks, bad_value):
        network = TaskNetwork.from_tasks(chain_tasks)
        with pytest.raises(ValueError):
            CPMEngine(network, max_iterations=bad_value)

    def test_default_cap_from_settings(self, chain_tasks):
        from schedule_engine.config.settings import settings

        engine = CPMEngine(TaskNetwork.from_tasks(chain_tasks))
        assert engine.max_iterations == settings.CPM_MAX_ITERATIONS


class TestTaskSchedule:
    """Annotation record helpers."""

    def test_negative_raw_float_is_infeasible(self):
        ts = TaskSchedule(
            task_id='A', project_id='P1', task_name='A', duration_days=1,
            early_start=date(2026, 1, 5), early_finish=date(2026, 1, 6),
            late_start=date(2026, 1, 3), late_finish=date(2026, 1, 4),
            raw_float=-2, total_float=0, is_critical=True,
        )
        assert ts.is_infeasible
        assert ts.to_record()['early_start'] == '2026-01-05'
        assert ts.to_record()['is_infeasible'] is True
