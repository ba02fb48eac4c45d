from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from career_transition.api.deps import get_current_user_id, get_db
from career_transition.core.errors import NotFoundError
from career_transition.core.ratelimit import ai_rate_limiter
from career_transition.schemas.api import (
    IntakeMessageIn,
    IntakeMessageOut,
    IntakeSessionOut,
    IntakeStartOut,
)
from career_transition.services.intake import (
    get_intake_session,
    process_intake_message,
    start_intake_session,
)

router = APIRouter(prefix="/intake")


@router.post("/start", response_model=IntakeStartOut)
def start_intake(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    ai_rate_limiter.check(f"user:{user_id}:intake")
    try:
        result = start_intake_session(db, user_id)
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {
        "sessionId": result["sessionId"],
        "question": result["firstQuestion"],
        "currentStep": 1,
        "isComplete": False,
    }


@router.post("/{session_id}/message", response_model=IntakeMessageOut)
def send_intake_message(
    session_id: str,
    payload: IntakeMessageIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not payload.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")
    ai_rate_limiter.check(f"user:{user_id}:intake")
    try:
        result = process_intake_message(db, session_id, user_id, payload.message)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {
        "question": result["response"],
        "isComplete": result["isComplete"],
        "currentStep": result["currentStep"],
    }


@router.get("/{session_id}", response_model=IntakeSessionOut)
def get_intake(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return get_intake_session(db, session_id, user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
