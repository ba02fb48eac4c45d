from fastapi import Header, HTTPException

from career_transition.core.database import SessionLocal
from career_transition.services.auth import verify_access_token


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(authorization: str | None = Header(default=None)) -> dict:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="No token provided")
    user = verify_access_token(authorization[len("Bearer "):].strip())
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user


def get_current_user_id(authorization: str | None = Header(default=None)) -> str:
    return get_current_user(authorization)["id"]
