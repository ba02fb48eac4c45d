import base64
import hashlib
import hmac
import json
import os
import re
import time

from career_transition.core.config import settings

PBKDF2_ITERATIONS = 120_000
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def _b64url_decode(raw: str) -> bytes:
    padding = "=" * ((4 - len(raw) % 4) % 4)
    return base64.urlsafe_b64decode(raw + padding)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value or ""))


def hash_password(password: str) -> tuple[str, str]:
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        PBKDF2_ITERATIONS,
    )
    return _b64url_encode(salt), _b64url_encode(digest)


def verify_password(password: str, salt_b64: str, digest_b64: str) -> bool:
    salt = _b64url_decode(salt_b64)
    expected = _b64url_decode(digest_b64)
    actual = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        PBKDF2_ITERATIONS,
    )
    return hmac.compare_digest(actual, expected)


def _sign(payload_b64: str) -> str:
    sig = hmac.new(
        settings.auth_secret.encode("utf-8"),
        payload_b64.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return _b64url_encode(sig)


def create_access_token(user_id: str, email: str, *, ttl_seconds: int | None = None) -> str:
    now = int(time.time())
    payload = {
        "sub": user_id,
        "email": email,
        "typ": "access",
        "iat": now,
        "exp": now + (ttl_seconds if ttl_seconds is not None else settings.auth_token_ttl_seconds),
    }
    payload_raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    payload_b64 = _b64url_encode(payload_raw)
    return f"{payload_b64}.{_sign(payload_b64)}"


def verify_access_token(token: str) -> dict | None:
    """Return ``{"id", "email"}`` for a valid access token, else None."""
    try:
        payload_b64, sig_b64 = token.split(".", 1)
    except ValueError:
        return None

    if not hmac.compare_digest(_sign(payload_b64).encode("utf-8"), sig_b64.encode("utf-8")):
        return None

    try:
        payload = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    except Exception:
        return None

    user_id = payload.get("sub")
    exp = payload.get("exp")
    if not user_id or not isinstance(exp, int):
        return None
    if exp < int(time.time()):
        return None
    if payload.get("typ") != "access":
        return None
    return {"id": user_id, "email": payload.get("email")}
