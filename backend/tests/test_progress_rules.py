from datetime import datetime, timedelta
from types import SimpleNamespace

from conftest import SAMPLE_PHASES

from career_transition.services import progress as progress_service
from career_transition.services.progress import (
    activity_series,
    count_tasks,
    current_phase_index,
    next_streak,
    phase_completion_ratio,
    unlocked_achievements,
)


NOW = datetime(2026, 3, 10, 12, 0, 0)


def _phase(task_count):
    return {
        "milestones": [
            {"id": "m", "tasks": [{"id": f"task-{i}"} for i in range(task_count)]},
        ]
    }


def test_streak_unchanged_on_same_day():
    assert next_streak(4, NOW - timedelta(hours=3), NOW, True) == 4


def test_streak_increments_after_one_day():
    assert next_streak(4, NOW - timedelta(days=1, hours=2), NOW, True) == 5


def test_streak_resets_after_gap():
    assert next_streak(9, NOW - timedelta(days=3), NOW, True) == 1


def test_streak_ignores_future_last_activity():
    assert next_streak(2, NOW + timedelta(days=2), NOW, True) == 2


def test_uncompleting_never_touches_streak():
    assert next_streak(6, NOW - timedelta(days=5), NOW, False) == 6


def test_zero_task_phase_counts_as_complete():
    assert phase_completion_ratio({"milestones": []}, set()) == 1.0
    assert phase_completion_ratio({}, set()) == 1.0
    assert current_phase_index([{}, {"milestones": None}, _phase(2)], []) == 2


def test_current_phase_moves_at_eighty_percent():
    phases = [_phase(5), _phase(1)]
    assert current_phase_index(phases, ["task-0", "task-1", "task-2"]) == 0
    assert current_phase_index(phases, ["task-0", "task-1", "task-2", "task-3"]) == 1


def test_current_phase_is_last_index_when_everything_is_done():
    all_ids = ["t1", "t2", "t3"]
    assert current_phase_index(SAMPLE_PHASES, all_ids) == len(SAMPLE_PHASES) - 1
    assert current_phase_index([], all_ids) == 0


def test_count_tasks_skips_malformed_entries():
    phases = [{"milestones": [{"tasks": [{"id": "a"}, "junk"]}, "junk"]}, {}]
    assert count_tasks(phases) == 1


def test_tasks_without_id_are_ignored_by_totals_and_ratios():
    phase = {"milestones": [{"tasks": [{"id": "a"}, {"title": "no id"}, {"id": None}]}]}
    assert count_tasks([phase]) == 1
    assert phase_completion_ratio(phase, {"a"}) == 1.0
    assert current_phase_index([phase, _phase(1)], ["a"]) == 1


def test_activity_series_is_seven_days_oldest_first():
    log = {
        (NOW - timedelta(days=6)).date().isoformat(): 2,
        NOW.date().isoformat(): 3,
        (NOW - timedelta(days=10)).date().isoformat(): 99,
    }
    series = activity_series(log, NOW)
    assert len(series) == 7
    assert series[0] == {"date": "2026-03-04", "tasksCompleted": 2}
    assert series[-1] == {"date": "2026-03-10", "tasksCompleted": 3}
    assert sum(day["tasksCompleted"] for day in series) == 5


def test_toggle_on_then_off_restores_completed_set_and_streak():
    progress = SimpleNamespace(
        completed_tasks=["t1"],
        streak_days=3,
        last_activity=NOW - timedelta(hours=1),
        activity_log={},
        current_phase=0,
        updated_at=None,
    )
    progress_service._apply_completion(progress, SAMPLE_PHASES, ["t2"], True, NOW)
    assert progress.completed_tasks == ["t1", "t2"]
    progress_service._apply_completion(progress, SAMPLE_PHASES, ["t2"], False, NOW)
    assert progress.completed_tasks == ["t1"]
    assert progress.streak_days == 3


def test_achievements_unlock_by_thresholds():
    progress = SimpleNamespace(created_at=NOW, last_activity=NOW, streak_days=7)
    ids = [badge["id"] for badge in unlocked_achievements(progress, 5)]
    assert ids == ["first-task", "week-streak", "five-tasks"]
    progress.streak_days = 1
    assert [badge["id"] for badge in unlocked_achievements(progress, 1)] == ["first-task"]
