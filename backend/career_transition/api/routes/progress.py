from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from career_transition.api.deps import get_current_user_id, get_db
from career_transition.core.errors import NotFoundError
from career_transition.schemas.api import ProgressStatsOut, UpdateTaskIn
from career_transition.services.progress import (
    NO_PROGRESS_MESSAGE,
    complete_milestone,
    get_dashboard_progress,
    get_detailed_progress,
    update_task_completion,
)

router = APIRouter(prefix="/progress")


@router.get("")
def get_progress(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    stats = get_dashboard_progress(db, user_id)
    if not stats:
        raise HTTPException(status_code=404, detail=NO_PROGRESS_MESSAGE)
    return stats


@router.get("/detailed")
def get_progress_detailed(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    progress = get_detailed_progress(db, user_id)
    if not progress:
        raise HTTPException(status_code=404, detail=NO_PROGRESS_MESSAGE)
    return progress


@router.put("/task", response_model=ProgressStatsOut)
def update_task(
    payload: UpdateTaskIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not payload.taskId.strip():
        raise HTTPException(status_code=400, detail="taskId is required")
    try:
        stats = update_task_completion(db, user_id, payload.taskId, payload.completed)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {
        **stats,
        "message": "Task marked as complete!" if payload.completed else "Task unmarked",
    }


@router.post("/milestone/{milestone_id}/complete", response_model=ProgressStatsOut)
def complete_milestone_route(
    milestone_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        stats = complete_milestone(db, user_id, milestone_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {**stats, "message": "Milestone completed! Great job!"}
