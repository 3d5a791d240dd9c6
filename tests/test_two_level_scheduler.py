"""Tests for the two-level (foreground RR / background FCFS) scheduler.

Foreground processes share the CPU in Round-Robin order with a fixed
quantum and always win over background processes. Background processes
run first-come-first-served and are preempted, without losing progress,
as soon as a foreground process is queued.
"""

import logging

import pytest

from core.config import SchedulerConfig
from core.errors import (EmptyInputError, InvalidConfigError, InvalidDescriptorError,
                         SchedulerError, SimulationDivergenceError)
from core.process import ProcessState
from schedulers import TwoLevelScheduler, simulate

from conftest import bg, fg, segments


class TestSampleScenario:
    """P1(0,6,fg) P2(1,8,bg) P3(2,4,fg) P4(3,10,bg) with quantum 4."""

    def test_timeline(self, sample_processes):
        result = simulate(sample_processes)
        assert segments(result) == [
            ("P1", 0, 4),
            ("P3", 4, 8),
            ("P1", 8, 10),
            ("P2", 10, 18),
            ("P4", 18, 28),
        ]
        assert result.total_time == 28

    def test_segment_fields(self, sample_processes):
        first = simulate(sample_processes).timeline[0].to_dict()
        assert first == {"processId": 1, "name": "P1", "class": "foreground", "start": 0, "end": 4}

    def test_statistics(self, sample_processes):
        result = simulate(sample_processes)
        expected = {
            1: (10, 10, 4),
            2: (18, 17, 9),
            3: (8, 6, 2),
            4: (28, 25, 15),
        }
        for pid, (finish, turnaround, waiting) in expected.items():
            stats = result.stats_for(pid)
            assert (stats.finish, stats.turnaround, stats.waiting) == (finish, turnaround, waiting)

    def test_stats_follow_input_order(self, sample_processes):
        result = simulate(list(reversed(sample_processes)))
        assert [s.id for s in result.stats] == [4, 3, 2, 1]

    def test_summary(self, sample_processes):
        summary = simulate(sample_processes).summary
        assert summary["avg_waiting_time"] == pytest.approx(7.5)
        assert summary["avg_turnaround_time"] == pytest.approx(14.5)
        assert summary["avg_response_time"] == pytest.approx(6.5)
        assert summary["cpu_utilization"] == pytest.approx(100.0)
        assert summary["context_switches"] == 4
        assert summary["completed"] == 4

    def test_response_times(self, sample_processes):
        result = simulate(sample_processes)
        assert [result.stats_for(pid).response for pid in (1, 2, 3, 4)] == [0, 9, 2, 15]

    def test_wire_format(self, sample_processes):
        data = simulate(sample_processes).to_dict()
        assert data["totalTime"] == 28
        assert data["stats"][1] == {
            "id": 2, "name": "P2", "arrival": 1, "burst": 8, "finish": 18,
            "turnaround": 17, "waiting": 9, "response": 9, "class": "background",
        }

    def test_smaller_quantum(self, sample_processes):
        result = simulate(sample_processes, quantum=2)
        assert segments(result) == [
            ("P1", 0, 4),
            ("P3", 4, 6),
            ("P1", 6, 8),
            ("P3", 8, 10),
            ("P2", 10, 18),
            ("P4", 18, 28),
        ]


class TestIdleTime:

    def test_single_late_background_process(self):
        result = simulate([bg(1, 5, 3)])
        assert segments(result) == [("P1", 5, 8)]
        stats = result.stats_for(1)
        assert (stats.finish, stats.turnaround, stats.waiting) == (8, 3, 0)
        assert result.total_time == 8

    def test_idle_jump_is_logged(self):
        result = simulate([bg(1, 5, 3)])
        assert any("CPU idle until T=5" in line for line in result.event_log)

    def test_gap_between_processes(self):
        result = simulate([fg(1, 0, 2), bg(2, 10, 1)])
        assert segments(result) == [("P1", 0, 2), ("P2", 10, 11)]
        assert result.total_time == 11
        assert result.summary["cpu_utilization"] == pytest.approx(3 / 11 * 100)


class TestPreemption:

    def test_foreground_arrival_preempts_background(self):
        result = simulate([bg(1, 0, 5), fg(2, 2, 2)])
        assert segments(result) == [("P1", 0, 2), ("P2", 2, 4), ("P1", 4, 7)]
        assert result.stats_for(1).waiting == 2
        assert result.stats_for(2).waiting == 0

    def test_preempted_process_returns_to_queue_head(self):
        result = simulate([bg(1, 0, 4), bg(2, 1, 3), fg(3, 2, 1)])
        assert segments(result) == [("P1", 0, 2), ("P3", 2, 3), ("P1", 3, 5), ("P2", 5, 8)]

    def test_background_waits_for_all_foreground_work(self):
        result = simulate([fg(1, 0, 3), bg(2, 0, 2), fg(3, 1, 3)])
        assert segments(result) == [("P1", 0, 3), ("P3", 3, 6), ("P2", 6, 8)]

    def test_preemption_is_logged(self):
        result = simulate([bg(1, 0, 5), fg(2, 2, 2)])
        assert any("P1 preempted" in line for line in result.event_log)


class TestRoundRobin:

    def test_lone_foreground_process_merges_into_one_segment(self):
        result = simulate([fg(1, 0, 10)])
        assert segments(result) == [("P1", 0, 10)]
        assert sum("quantum expired" in line for line in result.event_log) == 2
        assert result.summary["context_switches"] == 0

    def test_completion_at_quantum_boundary_does_not_requeue(self):
        result = simulate([fg(1, 0, 4), fg(2, 0, 2)])
        assert segments(result) == [("P1", 0, 4), ("P2", 4, 6)]
        assert not any("quantum expired" in line for line in result.event_log)

    def test_queue_order_follows_admission_not_id(self):
        result = simulate([fg(5, 0, 6), fg(1, 1, 2)])
        assert segments(result) == [("P5", 0, 4), ("P1", 4, 6), ("P5", 6, 8)]

    def test_expired_process_is_queued_before_same_tick_arrival(self):
        result = simulate([fg(1, 0, 8), fg(2, 4, 1)])
        assert segments(result) == [("P1", 0, 8), ("P2", 8, 9)]
        assert result.stats_for(2).waiting == 4

    def test_simultaneous_arrivals_are_admitted_by_id(self):
        result = simulate([fg(3, 0, 2), fg(1, 0, 2), fg(2, 0, 2)])
        assert segments(result) == [("P1", 0, 2), ("P2", 2, 4), ("P3", 4, 6)]


class TestTimeLimit:

    def test_truncated_run_reports_unfinished_processes(self, sample_processes):
        result = simulate(sample_processes, time_limit=12)
        assert segments(result) == [("P1", 0, 4), ("P3", 4, 8), ("P1", 8, 10), ("P2", 10, 12)]
        assert result.total_time == 12
        assert result.stats_for(1).finish == 10
        unfinished = result.stats_for(4)
        assert (unfinished.finish, unfinished.turnaround, unfinished.waiting) == (None, None, None)
        assert result.summary["completed"] == 2
        assert not result.completed

    def test_zero_limit(self, sample_processes):
        result = simulate(sample_processes, time_limit=0)
        assert result.timeline == []
        assert result.total_time == 0
        assert all(s.finish is None for s in result.stats)

    def test_limit_inside_idle_gap(self):
        result = simulate([bg(1, 10, 2)], time_limit=4)
        assert result.timeline == []
        assert result.total_time == 4


class TestErrors:

    def test_empty_input(self):
        with pytest.raises(EmptyInputError):
            simulate([])

    def test_invalid_descriptor(self):
        with pytest.raises(InvalidDescriptorError) as excinfo:
            simulate([fg(1, 0, 3), bg(2, 1, 0)])
        assert excinfo.value.process_id == 2

    def test_invalid_quantum(self, sample_processes):
        with pytest.raises(InvalidConfigError):
            simulate(sample_processes, quantum=0)

    def test_negative_time_limit(self):
        with pytest.raises(InvalidConfigError) as excinfo:
            SchedulerConfig(time_limit=-1)
        assert isinstance(excinfo.value, SchedulerError)
        assert excinfo.value.kind == "InvalidConfig"

    def test_safety_bound(self, sample_processes):
        assert TwoLevelScheduler(sample_processes).safety_bound == 28 + 3 + 1000

    def test_exceeding_safety_bound_raises(self, sample_processes):
        scheduler = TwoLevelScheduler(sample_processes)
        scheduler.safety_bound = 5
        with pytest.raises(SimulationDivergenceError) as excinfo:
            scheduler.run()
        assert excinfo.value.time == 5
        assert excinfo.value.unfinished == 4


class TestEngineState:

    def test_input_is_not_mutated(self, sample_processes):
        before = list(sample_processes)
        simulate(sample_processes)
        assert sample_processes == before

    def test_repeated_runs_are_identical(self, sample_processes):
        assert simulate(sample_processes).to_dict() == simulate(sample_processes).to_dict()

    def test_step_by_step(self, sample_processes):
        scheduler = TwoLevelScheduler(sample_processes, SchedulerConfig(quantum=4))
        assert scheduler.execute_one_step() is False
        snapshot = scheduler.get_current_snapshot()
        assert snapshot["time"] == 1
        assert snapshot["running"].name == "P1"
        assert snapshot["quantum_counter"] == 1

        while scheduler.current_time < 3:
            scheduler.execute_one_step()
        snapshot = scheduler.get_current_snapshot()
        assert [p.name for p in snapshot["foreground_queue"]] == ["P3"]
        assert [p.name for p in snapshot["background_queue"]] == ["P2"]

    def test_final_states(self, sample_processes):
        scheduler = TwoLevelScheduler(sample_processes)
        scheduler.run()
        assert all(r.state is ProcessState.FINISHED for r in scheduler.runtimes.values())
        assert scheduler.execute_one_step() is True

    def test_dispatch_history(self, sample_processes):
        scheduler = TwoLevelScheduler(sample_processes)
        scheduler.run()
        assert scheduler.runtimes[1].start_times == [0, 8]
        assert scheduler.runtimes[2].start_times == [10]

    def test_verbose_prints_event_log(self, sample_processes, capsys):
        simulate(sample_processes, verbose=True)
        out = capsys.readouterr().out
        assert "Scheduling Started" in out
        assert "P3 → Finished" in out

    def test_states_track_admission(self, sample_processes):
        scheduler = TwoLevelScheduler(sample_processes)
        scheduler.execute_one_step()
        assert scheduler.runtimes[1].state is ProcessState.RUNNING
        assert scheduler.runtimes[2].state is ProcessState.NOT_ARRIVED

        scheduler.execute_one_step()
        assert scheduler.runtimes[2].state is ProcessState.BACKGROUND_QUEUED
        assert scheduler.runtimes[3].state is ProcessState.NOT_ARRIVED
        assert scheduler.runtimes[4].state is ProcessState.NOT_ARRIVED

    def test_events_are_logged_at_debug(self, sample_processes, caplog):
        caplog.set_level(logging.DEBUG, logger="core.scheduler_base")
        simulate(sample_processes)
        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG]
        assert any("P3 → Finished" in m for m in messages)
