from fastapi import APIRouter
from sqlalchemy import text

from career_transition.core.database import engine
from career_transition.services.llm import ai_is_configured, get_active_ai_model, get_active_ai_provider

router = APIRouter(prefix="/meta")


@router.get("/health")
def health_meta():
    db_ok = False
    db_error = None
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_ok = True
    except Exception as exc:
        db_error = str(exc)
    return {
        "ok": db_ok,
        "database": {"ok": db_ok, "error": db_error},
        "ai": {
            "enabled": ai_is_configured(),
            "provider": get_active_ai_provider(),
            "model": get_active_ai_model(),
        },
    }
