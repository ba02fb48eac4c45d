from __future__ import annotations

from datetime import datetime
import json
import logging
from typing import Any

from sqlalchemy.orm import Session

from career_transition.core.errors import BusinessRuleError, NotFoundError
from career_transition.models.entities import CareerPlan, IntakeSession, ProgressTracking
from career_transition.services.common import as_uuid, isoformat
from career_transition.services.llm import LLMResponseParseError, extract_json_object, send_message

logger = logging.getLogger(__name__)

PLAN_MAX_TOKENS = 8000
PHASE_MAX_TOKENS = 4000
PLAN_AGENT_ID = "plan_generator"
NOT_SPECIFIED = "Not specified"
DEFAULT_TARGET_ROLE = "Career Transition"
DEFAULT_CURRENT_ROLE = "Current Position"
DEFAULT_TIMELINE = "Flexible"

PLAN_GENERATION_PROMPT = """You are an expert career transition advisor creating personalized career roadmaps.

Based on the user's information, create a detailed, realistic career transition plan with 3-5 phases.

Each phase should:
- Cover 1-3 months
- Have a clear theme/focus
- Include 2-4 specific milestones
- Each milestone has actionable tasks with FREE resources

IMPORTANT - Resources:
- Every task MUST include 2-4 specific, real resource links
- Prioritize FREE resources (YouTube, free courses, articles, documentation)
- Use real URLs to actual resources (Coursera, edX, YouTube, Medium, documentation sites, etc.)
- Include a mix of resource types: courses, articles, videos, books, tools
- Resources should be directly relevant and high-quality

Be realistic about timelines and consider the user's constraints.
Make the plan encouraging but achievable.

Return ONLY a valid JSON object in this exact format:
{
  "phases": [
    {
      "phaseNumber": 1,
      "title": "Phase title",
      "duration": "1-2 months",
      "description": "What this phase focuses on",
      "milestones": [
        {
          "id": "milestone_1_1",
          "title": "Milestone title",
          "description": "What to achieve",
          "estimatedDuration": "2 weeks",
          "tasks": [
            {
              "id": "task_1_1_1",
              "title": "Task title",
              "description": "What to do",
              "resources": [
                {
                  "type": "course",
                  "title": "Specific Resource Name",
                  "url": "https://actual-working-url.com",
                  "description": "Why this specific resource is helpful"
                }
              ]
            }
          ]
        }
      ]
    }
  ]
}

Resource types can be: "article", "course", "book", "video", "tool", or "other"

Example resources to consider:
- Coursera, edX, Khan Academy (free courses)
- YouTube channels (freeCodeCamp, Traversy Media, etc.)
- Documentation sites (MDN, official docs)
- Medium, Dev.to (articles)
- GitHub repositories (tools, examples)
- Free books (O'Reilly Open Books, official guides)"""


class PlanGenerationError(RuntimeError):
    """The generation service reply could not be turned into a plan."""


def _value(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if isinstance(value, list):
        value = ", ".join(str(item) for item in value if item)
    return str(value) if value else NOT_SPECIFIED


def build_user_context(intake_data: dict[str, Any]) -> str:
    constraints = intake_data.get("constraints") or {}
    if not isinstance(constraints, dict):
        constraints = {}
    return f"""
User Profile:
- Current Role: {_value(intake_data, "currentRole")}
- Target Role: {_value(intake_data, "targetRole")}
- Timeline: {_value(intake_data, "timeline")}
- Skills: {_value(intake_data, "skills")}
- Experience: {_value(intake_data, "experience")}
- Education: {_value(intake_data, "education")}
- Motivations: {_value(intake_data, "motivations")}
- Constraints:
  - Time: {_value(constraints, "time")}
  - Budget: {_value(constraints, "budget")}
  - Location: {_value(constraints, "location")}

Create a personalized career transition plan for this user."""


def parse_plan_phases(reply: str) -> list[dict[str, Any]]:
    parsed = extract_json_object(reply)
    phases = parsed.get("phases")
    if not isinstance(phases, list) or not all(isinstance(phase, dict) for phase in phases):
        raise LLMResponseParseError("Plan JSON has no phases list")
    return phases


def serialize_progress(progress: ProgressTracking | None) -> dict[str, Any] | None:
    if not progress:
        return None
    return {
        "id": str(progress.id),
        "planId": str(progress.plan_id),
        "completedTasks": list(progress.completed_tasks or []),
        "currentPhase": progress.current_phase,
        "streakDays": progress.streak_days,
        "lastActivity": isoformat(progress.last_activity),
    }


def generate_plan(db: Session, session_id: str, user_id: str) -> dict[str, Any]:
    session_uuid = as_uuid(session_id)
    user_uuid = as_uuid(user_id)
    session = None
    if session_uuid and user_uuid:
        session = (
            db.query(IntakeSession)
            .filter(IntakeSession.id == session_uuid, IntakeSession.user_id == user_uuid)
            .one_or_none()
        )
    if not session:
        raise NotFoundError("Intake session not found")
    if not session.is_complete:
        raise BusinessRuleError(
            "Intake session is not complete. Please finish the intake first."
        )

    intake_data = dict(session.collected_data or {})
    logger.info("Generating career plan", extra={"user_id": user_id, "session_id": session_id})

    reply = send_message(
        PLAN_GENERATION_PROMPT,
        [{"role": "user", "content": build_user_context(intake_data)}],
        PLAN_MAX_TOKENS,
    )
    try:
        phases = parse_plan_phases(reply)
    except LLMResponseParseError as exc:
        logger.error("Failed to parse plan generation response: %s", reply[:500])
        raise PlanGenerationError("Failed to generate valid plan. Please try again.") from exc

    now = datetime.utcnow()
    plan = CareerPlan(
        user_id=user_uuid,
        intake_session_id=session.id,
        target_role=str(intake_data.get("targetRole") or DEFAULT_TARGET_ROLE),
        current_role=str(intake_data.get("currentRole") or DEFAULT_CURRENT_ROLE),
        timeline=str(intake_data.get("timeline") or DEFAULT_TIMELINE),
        phases=phases,
        agent_id=PLAN_AGENT_ID,
        created_at=now,
        updated_at=now,
    )
    db.add(plan)
    db.flush()
    db.add(
        ProgressTracking(
            user_id=user_uuid,
            plan_id=plan.id,
            completed_tasks=[],
            current_phase=0,
            streak_days=0,
            last_activity=now,
            activity_log={},
            created_at=now,
            updated_at=now,
        )
    )
    db.commit()

    logger.info("Career plan created", extra={"user_id": user_id, "plan_id": str(plan.id)})
    return {"planId": str(plan.id), "phases": phases}


def get_user_plan(db: Session, user_id: str) -> dict[str, Any] | None:
    plan = (
        db.query(CareerPlan)
        .filter(CareerPlan.user_id == as_uuid(user_id))
        .order_by(CareerPlan.created_at.desc())
        .first()
    )
    if not plan:
        return None
    progress = (
        db.query(ProgressTracking)
        .filter(ProgressTracking.plan_id == plan.id)
        .order_by(ProgressTracking.created_at.asc())
        .first()
    )
    return {
        "id": str(plan.id),
        "targetRole": plan.target_role,
        "currentRole": plan.current_role,
        "timeline": plan.timeline,
        "phases": list(plan.phases or []),
        "createdAt": isoformat(plan.created_at),
        "progress": serialize_progress(progress),
    }


def build_regenerate_prompt(plan: CareerPlan, phase_number: int) -> str:
    return f"""Regenerate phase {phase_number} of this career transition plan.

Current Plan Context:
- Target Role: {plan.target_role}
- Current Role: {plan.current_role}
- Timeline: {plan.timeline}

Existing Phases:
{json.dumps(plan.phases or [], indent=2)}

Create an improved version of phase {phase_number} with new milestones and tasks.
Return ONLY the JSON for the single phase."""


def regenerate_plan(
    db: Session,
    plan_id: str,
    user_id: str,
    phase_number: int | None = None,
) -> list[dict[str, Any]]:
    plan_uuid = as_uuid(plan_id)
    user_uuid = as_uuid(user_id)
    plan = None
    if plan_uuid and user_uuid:
        plan = (
            db.query(CareerPlan)
            .filter(CareerPlan.id == plan_uuid, CareerPlan.user_id == user_uuid)
            .one_or_none()
        )
    if not plan:
        raise NotFoundError("Plan not found")

    if phase_number is None:
        raise BusinessRuleError("Full plan regeneration not yet implemented")

    phases = list(plan.phases or [])
    # phase_number is 1-based; phases is indexed from 0.
    if phase_number < 1 or phase_number > len(phases):
        raise BusinessRuleError(f"Phase {phase_number} does not exist in this plan")

    reply = send_message(
        PLAN_GENERATION_PROMPT,
        [{"role": "user", "content": build_regenerate_prompt(plan, phase_number)}],
        PHASE_MAX_TOKENS,
    )
    try:
        new_phase = extract_json_object(reply)
    except LLMResponseParseError as exc:
        logger.error("Failed to regenerate phase %s", phase_number, extra={"plan_id": plan_id})
        raise PlanGenerationError("Failed to regenerate phase") from exc

    phases[phase_number - 1] = new_phase
    plan.phases = phases
    plan.updated_at = datetime.utcnow()
    db.commit()

    logger.info("Regenerated phase %s", phase_number, extra={"user_id": user_id, "plan_id": plan_id})
    return phases
