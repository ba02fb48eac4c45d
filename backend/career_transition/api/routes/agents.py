from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from career_transition.api.deps import get_current_user_id, get_db
from career_transition.core.errors import NotFoundError
from career_transition.core.ratelimit import ai_rate_limiter
from career_transition.schemas.api import AgentChatIn
from career_transition.services.agents import (
    DEFAULT_CONVERSATION_LIMIT,
    chat_with_agent,
    get_agent_conversation,
)
from career_transition.services.personas import get_persona, list_personas

router = APIRouter(prefix="/agents")


@router.get("")
def list_agents():
    return {"agents": list_personas()}


@router.get("/{agent_id}")
def get_agent_details(agent_id: str):
    persona = get_persona(agent_id)
    if not persona:
        raise HTTPException(status_code=404, detail="Agent not found")
    return persona.public()


@router.post("/{agent_id}/chat")
def chat_agent(
    agent_id: str,
    payload: AgentChatIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not payload.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")
    if not get_persona(agent_id):
        raise HTTPException(status_code=404, detail="Agent not found")
    ai_rate_limiter.check(f"user:{user_id}:agents")
    try:
        return chat_with_agent(db, user_id, agent_id, payload.message, payload.context)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/{agent_id}/conversation")
def get_conversation(
    agent_id: str,
    limit: int = Query(default=DEFAULT_CONVERSATION_LIMIT, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_agent_conversation(db, user_id, agent_id, limit)
