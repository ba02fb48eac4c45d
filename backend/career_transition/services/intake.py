from __future__ import annotations

from datetime import datetime
import logging
from typing import Any

from sqlalchemy.orm import Session

from career_transition.core.errors import NotFoundError
from career_transition.models.entities import IntakeSession
from career_transition.services.common import as_uuid
from career_transition.services.llm import LLMResponseParseError, extract_json_object, send_message

logger = logging.getLogger(__name__)

INTAKE_MAX_TOKENS = 1024
EXTRACTION_MAX_TOKENS = 2048
COMPLETION_PHRASE = "i have all the information i need"
OPENING_USER_MESSAGE = "Hi, I want to start planning my career transition."
RESUME_FALLBACK_QUESTION = (
    "Let's continue where we left off. Could you tell me more about your current role?"
)
ALREADY_COMPLETE_MESSAGE = (
    "This intake session is already complete. You can now generate your career plan!"
)

INTAKE_SYSTEM_PROMPT = """You are a career transition assistant conducting an intake interview to help someone switch careers.

Your goal is to gather the following information through natural conversation:
1. Current role/position
2. Target role/career they want to transition to
3. Timeline (when they want to make the transition)
4. Current skills and experience
5. Education background
6. Constraints (time availability, budget, location preferences)
7. Motivations for the career change

Guidelines:
- Ask ONE question at a time
- Keep questions conversational and friendly
- Build on previous answers naturally
- Don't make it feel like a form - make it feel like a helpful conversation
- After gathering all information, say "Thank you! I have all the information I need to create your personalized career transition plan."
- Be encouraging and supportive
- If user provides multiple pieces of information in one response, acknowledge all of them
- Total conversation should be 7-10 questions

Return your response as plain text - just the next question or acknowledgment."""

EXTRACTION_SYSTEM_PROMPT = (
    "You are a data extraction assistant. Extract information and return valid JSON only."
)

EXTRACTION_SCHEMA = """{
  "currentRole": "their current job/role",
  "targetRole": "the role/career they want to transition to",
  "timeline": "when they want to make the transition",
  "skills": ["array", "of", "current", "skills"],
  "experience": "summary of their experience",
  "education": "their education background",
  "motivations": "why they want to make this change",
  "constraints": {
    "time": "time availability",
    "budget": "budget constraints",
    "location": "location preferences"
  }
}"""


def is_completion_reply(text: str) -> bool:
    return COMPLETION_PHRASE in (text or "").lower()


def _turn(role: str, content: str) -> dict[str, str]:
    return {"role": role, "content": content, "timestamp": datetime.utcnow().isoformat()}


def _load_session(db: Session, session_id: str, user_id: str) -> IntakeSession:
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
    return session


def serialize_session(session: IntakeSession) -> dict[str, Any]:
    return {
        "id": str(session.id),
        "conversationHistory": list(session.conversation_history or []),
        "currentStep": session.current_step,
        "isComplete": session.is_complete,
        "collectedData": dict(session.collected_data or {}),
    }


def start_intake_session(db: Session, user_id: str) -> dict[str, Any]:
    user_uuid = as_uuid(user_id)
    existing = (
        db.query(IntakeSession)
        .filter(IntakeSession.user_id == user_uuid, IntakeSession.is_complete.is_(False))
        .order_by(IntakeSession.created_at.desc())
        .first()
    )
    if existing:
        history = existing.conversation_history or []
        last = history[-1] if history else None
        question = (
            last["content"]
            if last and last.get("role") == "assistant"
            else RESUME_FALLBACK_QUESTION
        )
        return {"sessionId": str(existing.id), "firstQuestion": question}

    session = IntakeSession(
        user_id=user_uuid,
        conversation_history=[],
        current_step=0,
        is_complete=False,
        collected_data={},
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow(),
    )
    db.add(session)
    db.commit()

    first_question = send_message(
        INTAKE_SYSTEM_PROMPT,
        [{"role": "user", "content": OPENING_USER_MESSAGE}],
        INTAKE_MAX_TOKENS,
    )

    session.conversation_history = [
        _turn("user", OPENING_USER_MESSAGE),
        _turn("assistant", first_question),
    ]
    session.current_step = 1
    session.updated_at = datetime.utcnow()
    db.commit()

    logger.info("Started intake session", extra={"user_id": user_id, "session_id": str(session.id)})
    return {"sessionId": str(session.id), "firstQuestion": first_question}


def extract_intake_data(history: list[dict[str, Any]]) -> dict[str, Any]:
    transcript = "\n".join(f"{msg['role']}: {msg['content']}" for msg in history)
    prompt = (
        "Based on the following conversation, extract structured information about the "
        "user's career transition.\n\n"
        f"Conversation:\n{transcript}\n\n"
        "Extract and return a JSON object with the following fields (use null if not mentioned):\n"
        f"{EXTRACTION_SCHEMA}\n\n"
        "Return ONLY the JSON object, no other text."
    )
    reply = send_message(
        EXTRACTION_SYSTEM_PROMPT,
        [{"role": "user", "content": prompt}],
        EXTRACTION_MAX_TOKENS,
    )
    try:
        return extract_json_object(reply)
    except LLMResponseParseError as exc:
        logger.warning("Failed to extract intake data: %s", exc)
        return {}


def process_intake_message(
    db: Session,
    session_id: str,
    user_id: str,
    user_message: str,
) -> dict[str, Any]:
    session = _load_session(db, session_id, user_id)

    if session.is_complete:
        return {
            "response": ALREADY_COMPLETE_MESSAGE,
            "isComplete": True,
            "currentStep": session.current_step,
        }

    history = list(session.conversation_history or [])
    history.append(_turn("user", user_message))

    reply = send_message(
        INTAKE_SYSTEM_PROMPT,
        [{"role": msg["role"], "content": msg["content"]} for msg in history],
        INTAKE_MAX_TOKENS,
    )
    history.append(_turn("assistant", reply))

    is_complete = is_completion_reply(reply)
    collected = dict(session.collected_data or {})
    if is_complete:
        collected = extract_intake_data(history)

    session.conversation_history = history
    session.current_step = session.current_step + 1
    session.is_complete = is_complete
    session.collected_data = collected
    session.updated_at = datetime.utcnow()
    db.commit()

    logger.info(
        "Processed intake message (step %s, complete=%s)",
        session.current_step,
        is_complete,
        extra={"user_id": user_id, "session_id": str(session.id)},
    )
    return {
        "response": reply,
        "isComplete": is_complete,
        "currentStep": session.current_step,
    }


def get_intake_session(db: Session, session_id: str, user_id: str) -> dict[str, Any]:
    return serialize_session(_load_session(db, session_id, user_id))
