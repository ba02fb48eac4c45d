from __future__ import annotations

from datetime import datetime
import json
import logging
from typing import Any

from sqlalchemy.orm import Session

from career_transition.core.errors import NotFoundError
from career_transition.models.entities import AgentInteraction, CareerPlan
from career_transition.services.common import as_uuid, isoformat
from career_transition.services.llm import send_message
from career_transition.services.personas import get_persona

logger = logging.getLogger(__name__)

AGENT_MAX_TOKENS = 2048
HISTORY_INTERACTIONS = 5
DEFAULT_CONVERSATION_LIMIT = 20


def _context_block(db: Session, user_id: str, context: dict[str, Any] | None) -> str:
    if context:
        return f"\n\nAdditional Context:\n{json.dumps(context, indent=2, default=str)}"

    plan = (
        db.query(CareerPlan)
        .filter(CareerPlan.user_id == as_uuid(user_id))
        .order_by(CareerPlan.created_at.desc())
        .first()
    )
    if not plan:
        return ""
    return (
        "\n\nUser's Career Transition:\n"
        f"- Current Role: {plan.current_role}\n"
        f"- Target Role: {plan.target_role}\n"
        f"- Timeline: {plan.timeline}"
    )


def _recent_turns(db: Session, user_id: str, agent_id: str) -> list[dict[str, str]]:
    recent = (
        db.query(AgentInteraction)
        .filter(AgentInteraction.user_id == as_uuid(user_id), AgentInteraction.agent_id == agent_id)
        .order_by(AgentInteraction.created_at.desc())
        .limit(HISTORY_INTERACTIONS)
        .all()
    )
    turns: list[dict[str, str]] = []
    for interaction in reversed(recent):
        turns.append({"role": "user", "content": interaction.message})
        turns.append({"role": "assistant", "content": interaction.response})
    return turns


def chat_with_agent(
    db: Session,
    user_id: str,
    agent_id: str,
    message: str,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    persona = get_persona(agent_id)
    if not persona:
        raise NotFoundError(f"Agent {agent_id} not found")

    turns = _recent_turns(db, user_id, agent_id)
    turns.append({"role": "user", "content": message})

    reply = send_message(
        persona.system_prompt + _context_block(db, user_id, context),
        turns,
        AGENT_MAX_TOKENS,
    )

    interaction = AgentInteraction(
        user_id=as_uuid(user_id),
        agent_id=agent_id,
        message=message,
        response=reply,
        context=context or {},
        created_at=datetime.utcnow(),
    )
    db.add(interaction)
    db.commit()

    logger.info(
        "Agent interaction completed with %s",
        persona.name,
        extra={"user_id": user_id, "agent_id": agent_id},
    )
    return {
        "message": {
            "id": str(interaction.id),
            "role": "assistant",
            "content": reply,
            "timestamp": isoformat(interaction.created_at),
        },
        "conversationId": agent_id,
    }


def get_agent_conversation(
    db: Session,
    user_id: str,
    agent_id: str,
    limit: int = DEFAULT_CONVERSATION_LIMIT,
) -> dict[str, Any]:
    interactions = (
        db.query(AgentInteraction)
        .filter(AgentInteraction.user_id == as_uuid(user_id), AgentInteraction.agent_id == agent_id)
        .order_by(AgentInteraction.created_at.desc())
        .limit(limit)
        .all()
    )
    persona = get_persona(agent_id)
    return {
        "agent": persona.summary() if persona else None,
        "interactions": [
            {
                "id": str(interaction.id),
                "message": interaction.message,
                "response": interaction.response,
                "timestamp": isoformat(interaction.created_at),
            }
            for interaction in reversed(interactions)
        ],
    }
