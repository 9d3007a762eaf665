from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
import time
from typing import Any

import bcrypt

ACCESS = "access"


class TokenError(Exception):
    pass


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def _sign(secret: str, body: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), body.encode("ascii"), hashlib.sha256).digest()
    return _b64encode(digest)


def issue_token(secret: str, user_id: str, ttl_s: int, purpose: str = ACCESS, now: float | None = None) -> str:
    issued = int(now if now is not None else time.time())
    claims = {"sub": user_id, "iat": issued, "exp": issued + int(ttl_s), "purpose": purpose}
    body = _b64encode(json.dumps(claims, separators=(",", ":"), sort_keys=True).encode("utf-8"))
    return f"{body}.{_sign(secret, body)}"


def verify_token(secret: str, token: str, purpose: str = ACCESS, now: float | None = None) -> dict[str, Any]:
    """Return the claims of a well-signed, unexpired token or raise TokenError."""
    if not token or token.count(".") != 1:
        raise TokenError("malformed token")
    body, signature = token.split(".", 1)
    if not hmac.compare_digest(signature, _sign(secret, body)):
        raise TokenError("bad signature")
    try:
        claims = json.loads(_b64decode(body))
    except (ValueError, UnicodeDecodeError) as exc:
        raise TokenError("malformed claims") from exc
    if not isinstance(claims, dict) or not isinstance(claims.get("sub"), str):
        raise TokenError("malformed claims")
    if claims.get("purpose") != purpose:
        raise TokenError("wrong token purpose")
    current = now if now is not None else time.time()
    if int(claims.get("exp", 0)) < current:
        raise TokenError("token expired")
    return claims


def new_reset_token() -> str:
    return secrets.token_urlsafe(32)


def digest_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
