from datetime import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from career_transition.api.deps import get_current_user_id, get_db
from career_transition.core.ratelimit import auth_login_rate_limiter
from career_transition.models.entities import User
from career_transition.schemas.api import AuthLoginIn, AuthOut, AuthRegisterIn, CurrentUserOut
from career_transition.services.auth import (
    MIN_PASSWORD_LENGTH,
    create_access_token,
    hash_password,
    is_valid_email,
    normalize_email,
    verify_password,
)
from career_transition.services.common import as_uuid, isoformat

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


def _client_key(request: Request, email: str) -> str:
    ip_address = request.client.host if request.client else "unknown"
    return f"login:{ip_address}:{email}"


def _auth_payload(user: User) -> dict:
    user_id = str(user.id)
    return {
        "token": create_access_token(user_id, user.email),
        "user": {"id": user_id, "email": user.email, "name": user.name},
    }


@router.post("/register", response_model=AuthOut, status_code=201)
def register(payload: AuthRegisterIn, db: Session = Depends(get_db)):
    email = normalize_email(payload.email)
    name = payload.name.strip()
    if not email:
        raise HTTPException(status_code=400, detail="email is required")
    if not name:
        raise HTTPException(status_code=400, detail="name is required")
    if not payload.password:
        raise HTTPException(status_code=400, detail="password is required")
    if not is_valid_email(email):
        raise HTTPException(status_code=400, detail="Invalid email format")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )

    existing = db.query(User).filter(User.email == email).one_or_none()
    if existing:
        raise HTTPException(status_code=400, detail="User with this email already exists")

    salt, digest = hash_password(payload.password)
    user = User(
        email=email,
        name=name,
        password_salt=salt,
        password_hash=digest,
        created_at=datetime.utcnow(),
    )
    db.add(user)
    db.commit()

    logger.info("User registered", extra={"user_id": str(user.id)})
    return _auth_payload(user)


@router.post("/login", response_model=AuthOut)
def login(payload: AuthLoginIn, request: Request, db: Session = Depends(get_db)):
    email = normalize_email(payload.email)
    if not email:
        raise HTTPException(status_code=400, detail="email is required")
    if not payload.password:
        raise HTTPException(status_code=400, detail="password is required")
    if not is_valid_email(email):
        raise HTTPException(status_code=400, detail="Invalid email format")

    limiter_key = _client_key(request, email)
    auth_login_rate_limiter.check(limiter_key)

    user = db.query(User).filter(User.email == email).one_or_none()
    if not user or not verify_password(payload.password, user.password_salt, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    auth_login_rate_limiter.clear(limiter_key)
    logger.info("User logged in", extra={"user_id": str(user.id)})
    return _auth_payload(user)


@router.get("/me", response_model=CurrentUserOut)
def me(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    user_uuid = as_uuid(user_id)
    user = db.get(User, user_uuid) if user_uuid else None
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {
        "id": str(user.id),
        "email": user.email,
        "name": user.name,
        "createdAt": isoformat(user.created_at),
    }
