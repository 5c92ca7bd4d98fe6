"""HMAC-signed client tokens: ``"<epoch-millis>.<hex signature>"``."""
from __future__ import annotations

import hashlib
import hmac
import time

TOKEN_MAX_AGE_MS = 30 * 24 * 60 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


def _sign(timestamp: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), timestamp.encode("utf-8"), hashlib.sha256).hexdigest()


def make_token(secret: str, now_ms: int | None = None) -> str:
    timestamp = str(now_ms if now_ms is not None else _now_ms())
    return f"{timestamp}.{_sign(timestamp, secret)}"


def validate_token(token: str | None, secret: str, now_ms: int | None = None) -> bool:
    if not token:
        return False
    parts = token.split(".")
    if len(parts) != 2:
        return False
    timestamp, signature = parts
    if not hmac.compare_digest(signature.encode("utf-8"), _sign(timestamp, secret).encode("utf-8")):
        return False
    try:
        issued = int(timestamp)
    except ValueError:
        return False
    age = (now_ms if now_ms is not None else _now_ms()) - issued
    return age <= TOKEN_MAX_AGE_MS


def bearer_token(authorization: str | None) -> str:
    return (authorization or "").replace("Bearer ", "", 1)


def check_password(supplied: str | None, expected: str) -> bool:
    if not supplied or not expected:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))
