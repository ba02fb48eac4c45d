from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from career_transition.api.deps import get_current_user_id, get_db
from career_transition.core.errors import BusinessRuleError, NotFoundError
from career_transition.core.ratelimit import ai_rate_limiter
from career_transition.schemas.api import GeneratePlanIn, RegeneratePlanIn
from career_transition.services.plans import generate_plan, get_user_plan, regenerate_plan

router = APIRouter(prefix="/plans")

NO_PLAN_MESSAGE = "No career plan found. Please complete intake and generate a plan first."


@router.post("/generate", status_code=201)
def create_plan(
    payload: GeneratePlanIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not payload.sessionId:
        raise HTTPException(status_code=400, detail="sessionId is required")
    ai_rate_limiter.check(f"user:{user_id}:plans")
    try:
        result = generate_plan(db, payload.sessionId, user_id)
    except BusinessRuleError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {
        "planId": result["planId"],
        "phases": result["phases"],
        "message": "Career plan generated successfully",
    }


@router.get("")
def get_plan(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    plan = get_user_plan(db, user_id)
    if not plan:
        raise HTTPException(status_code=404, detail=NO_PLAN_MESSAGE)
    return plan


@router.put("/{plan_id}/regenerate")
def regenerate(
    plan_id: str,
    payload: Optional[RegeneratePlanIn] = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    phase_number = payload.phaseNumber if payload else None
    ai_rate_limiter.check(f"user:{user_id}:plans")
    try:
        phases = regenerate_plan(db, plan_id, user_id, phase_number)
    except BusinessRuleError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {
        "phases": phases,
        "message": f"Phase {phase_number} regenerated successfully",
    }
