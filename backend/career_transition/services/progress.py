from __future__ import annotations

from datetime import datetime, timedelta
import logging
from typing import Any, Iterable

from sqlalchemy.orm import Session

from career_transition.core.errors import NotFoundError
from career_transition.models.entities import CareerPlan, ProgressTracking
from career_transition.services.common import as_uuid, isoformat

logger = logging.getLogger(__name__)

PHASE_COMPLETE_RATIO = 0.8
ACTIVITY_WINDOW_DAYS = 7
UPCOMING_TASKS_LIMIT = 5
RECENT_MILESTONES_LIMIT = 3
NO_PROGRESS_MESSAGE = "No progress tracking found. Please generate a career plan first."

ACHIEVEMENTS = (
    {
        "id": "first-task",
        "title": "First Steps",
        "description": "Completed your first task",
        "icon": "🎯",
    },
    {
        "id": "week-streak",
        "title": "Week Warrior",
        "description": "7-day streak!",
        "icon": "🔥",
    },
    {
        "id": "five-tasks",
        "title": "Task Master",
        "description": "Completed 5 tasks",
        "icon": "⭐",
    },
)


# Plan shape helpers. Phases come from generated JSON, so missing keys are tolerated.

def _milestones(phase: dict[str, Any]) -> list[dict[str, Any]]:
    return [m for m in phase.get("milestones") or [] if isinstance(m, dict)]


def _tasks(milestone: dict[str, Any]) -> list[dict[str, Any]]:
    # Tasks without an id cannot be completed, so they are not counted anywhere.
    return [t for t in milestone.get("tasks") or [] if isinstance(t, dict) and t.get("id") is not None]


def phase_task_ids(phase: dict[str, Any]) -> list[str]:
    return [
        str(task.get("id"))
        for milestone in _milestones(phase)
        for task in _tasks(milestone)
    ]


def count_tasks(phases: Iterable[dict[str, Any]]) -> int:
    return sum(len(phase_task_ids(phase)) for phase in phases)


def phase_completion_ratio(phase: dict[str, Any], completed: set[str]) -> float:
    task_ids = phase_task_ids(phase)
    if not task_ids:
        return 1.0
    done = sum(1 for task_id in task_ids if task_id in completed)
    return done / len(task_ids)


def current_phase_index(phases: list[dict[str, Any]], completed: Iterable[str]) -> int:
    """First phase under 80% complete; the last phase once every phase is past it."""
    if not phases:
        return 0
    completed_set = set(completed)
    for index, phase in enumerate(phases):
        if phase_completion_ratio(phase, completed_set) < PHASE_COMPLETE_RATIO:
            return index
    return len(phases) - 1


def next_streak(streak: int, last_activity: datetime | None, now: datetime, completed: bool) -> int:
    if not completed:
        return streak
    if last_activity is None:
        return 1
    days = (now - last_activity) // timedelta(days=1)
    if days <= 0:
        return streak
    if days == 1:
        return streak + 1
    return 1


def find_milestone(phases: list[dict[str, Any]], milestone_id: str) -> dict[str, Any] | None:
    for phase in phases:
        for milestone in _milestones(phase):
            if str(milestone.get("id")) == milestone_id:
                return milestone
    return None


def _latest_progress(db: Session, user_id: str) -> ProgressTracking | None:
    return (
        db.query(ProgressTracking)
        .filter(ProgressTracking.user_id == as_uuid(user_id))
        .order_by(ProgressTracking.created_at.desc())
        .first()
    )


def _plan_phases(db: Session, progress: ProgressTracking) -> list[dict[str, Any]]:
    plan = progress.plan or db.get(CareerPlan, progress.plan_id)
    return list(plan.phases or []) if plan else []


def _stats(progress: ProgressTracking, phases: list[dict[str, Any]]) -> dict[str, Any]:
    completed = list(progress.completed_tasks or [])
    return {
        "streakDays": progress.streak_days,
        "currentPhase": current_phase_index(phases, completed),
        "completedTasks": len(completed),
        "totalTasks": count_tasks(phases),
        "lastActivity": isoformat(progress.last_activity),
    }


def _apply_completion(
    progress: ProgressTracking,
    phases: list[dict[str, Any]],
    task_ids: list[str],
    completed: bool,
    now: datetime,
) -> None:
    """Read-modify-write of one progress row; the caller commits."""
    completed_tasks = list(progress.completed_tasks or [])
    added = 0
    for task_id in task_ids:
        if completed and task_id not in completed_tasks:
            completed_tasks.append(task_id)
            added += 1
        elif not completed and task_id in completed_tasks:
            completed_tasks.remove(task_id)

    activity_log = dict(progress.activity_log or {})
    if added:
        today = now.date().isoformat()
        activity_log[today] = int(activity_log.get(today, 0)) + added

    progress.streak_days = next_streak(progress.streak_days, progress.last_activity, now, completed)
    progress.completed_tasks = completed_tasks
    progress.current_phase = current_phase_index(phases, completed_tasks)
    progress.activity_log = activity_log
    progress.last_activity = now
    progress.updated_at = now


def get_progress_stats(db: Session, user_id: str) -> dict[str, Any] | None:
    progress = _latest_progress(db, user_id)
    if not progress:
        return None
    return _stats(progress, _plan_phases(db, progress))


def update_task_completion(
    db: Session,
    user_id: str,
    task_id: str,
    completed: bool,
) -> dict[str, Any]:
    progress = _latest_progress(db, user_id)
    if not progress:
        raise NotFoundError(NO_PROGRESS_MESSAGE)

    phases = _plan_phases(db, progress)
    _apply_completion(progress, phases, [task_id], completed, datetime.utcnow())
    db.commit()

    logger.info(
        "Progress updated (completed=%s, streak=%s)",
        completed,
        progress.streak_days,
        extra={"user_id": user_id, "task_id": task_id},
    )
    return _stats(progress, phases)


def complete_milestone(db: Session, user_id: str, milestone_id: str) -> dict[str, Any]:
    progress = _latest_progress(db, user_id)
    if not progress:
        raise NotFoundError(NO_PROGRESS_MESSAGE)

    phases = _plan_phases(db, progress)
    milestone = find_milestone(phases, milestone_id)
    completed = set(progress.completed_tasks or [])
    pending = [
        str(task["id"])
        for task in (_tasks(milestone) if milestone else [])
        if task.get("id") is not None and str(task["id"]) not in completed
    ]
    if not pending:
        return _stats(progress, phases)

    _apply_completion(progress, phases, pending, True, datetime.utcnow())
    db.commit()

    logger.info(
        "Milestone completed (%d task(s))",
        len(pending),
        extra={"user_id": user_id, "milestone_id": milestone_id},
    )
    return _stats(progress, phases)


def get_detailed_progress(db: Session, user_id: str) -> dict[str, Any] | None:
    progress = _latest_progress(db, user_id)
    if not progress:
        return None

    phases = _plan_phases(db, progress)
    completed = set(progress.completed_tasks or [])
    phase_rows = []
    for phase in phases:
        milestone_rows = []
        for milestone in _milestones(phase):
            task_rows = [
                {
                    "id": task.get("id"),
                    "title": task.get("title"),
                    "completed": str(task.get("id")) in completed,
                }
                for task in _tasks(milestone)
            ]
            milestone_rows.append(
                {
                    "id": milestone.get("id"),
                    "title": milestone.get("title"),
                    "description": milestone.get("description"),
                    "tasksCompleted": sum(1 for row in task_rows if row["completed"]),
                    "tasksTotal": len(task_rows),
                    "tasks": task_rows,
                }
            )
        phase_rows.append(
            {
                "phaseNumber": phase.get("phaseNumber"),
                "title": phase.get("title"),
                "tasksCompleted": sum(row["tasksCompleted"] for row in milestone_rows),
                "tasksTotal": sum(row["tasksTotal"] for row in milestone_rows),
                "milestones": milestone_rows,
            }
        )

    return {
        "planId": str(progress.plan_id),
        "currentPhase": current_phase_index(phases, completed),
        "streakDays": progress.streak_days,
        "lastActivity": isoformat(progress.last_activity),
        "phases": phase_rows,
    }


def activity_series(activity_log: dict[str, int] | None, today: datetime) -> list[dict[str, Any]]:
    log = activity_log or {}
    series = []
    for offset in range(ACTIVITY_WINDOW_DAYS - 1, -1, -1):
        day = (today - timedelta(days=offset)).date().isoformat()
        series.append({"date": day, "tasksCompleted": int(log.get(day, 0))})
    return series


def unlocked_achievements(progress: ProgressTracking, completed_count: int) -> list[dict[str, Any]]:
    unlocked_at = {
        "first-task": progress.created_at,
        "week-streak": progress.last_activity,
        "five-tasks": progress.last_activity,
    }
    earned = {
        "first-task": completed_count >= 1,
        "week-streak": progress.streak_days >= 7,
        "five-tasks": completed_count >= 5,
    }
    return [
        {**badge, "unlockedAt": isoformat(unlocked_at[badge["id"]])}
        for badge in ACHIEVEMENTS
        if earned[badge["id"]]
    ]


def get_dashboard_progress(db: Session, user_id: str) -> dict[str, Any] | None:
    progress = _latest_progress(db, user_id)
    if not progress:
        return None

    phases = _plan_phases(db, progress)
    completed = set(progress.completed_tasks or [])

    upcoming = []
    recent_milestones = []
    for phase in phases:
        for milestone in _milestones(phase):
            tasks = _tasks(milestone)
            for task in tasks:
                if str(task.get("id")) not in completed:
                    upcoming.append({"id": task.get("id"), "title": task.get("title"), "dueDate": None})
            if tasks and all(str(task.get("id")) in completed for task in tasks):
                recent_milestones.append(
                    {
                        "id": milestone.get("id"),
                        "title": milestone.get("title"),
                        "description": milestone.get("description"),
                    }
                )

    return {
        "userId": user_id,
        "currentPhase": current_phase_index(phases, completed),
        "totalTasks": count_tasks(phases),
        "completedTasks": len(completed),
        "currentStreak": progress.streak_days,
        "achievements": unlocked_achievements(progress, len(completed)),
        "recentMilestones": recent_milestones[:RECENT_MILESTONES_LIMIT],
        "activityData": activity_series(progress.activity_log, datetime.utcnow()),
        "upcomingDeadlines": upcoming[:UPCOMING_TASKS_LIMIT],
    }
