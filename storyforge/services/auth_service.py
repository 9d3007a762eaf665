from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from storyforge.config import Settings
from storyforge.context import ANONYMOUS, RequestContext
from storyforge.errors import BadRequestError, ConflictError, NotFoundError, UnauthorizedError
from storyforge.logs import get_logger
from storyforge.models.user import User
from storyforge.schemas.auth import (
    ChangePasswordInput,
    ForgotPasswordInput,
    LoginInput,
    RegisterInput,
    ResetPasswordInput,
)
from storyforge.security import (
    TokenError,
    digest_reset_token,
    hash_password,
    issue_token,
    new_reset_token,
    verify_password,
    verify_token,
)
from storyforge.services.base import build
from storyforge.storage.doc_store import DocStore, now_iso

logger = get_logger(__name__)

RESET_MESSAGE = "If an account exists for that email, a reset link has been sent"


class AuthService:
    def __init__(self, store: DocStore, settings: Settings) -> None:
        self.store = store
        self.settings = settings

    def _token(self, user_id: str) -> str:
        return issue_token(self.settings.token_secret, user_id, self.settings.token_ttl_s)

    def _load_user(self, user_id: str) -> User:
        doc = self.store.get(User.COLLECTION, user_id)
        if doc is None:
            raise NotFoundError("User not found")
        return User.from_doc(doc)

    def authenticate(self, token: str | None) -> RequestContext:
        """Resolve a bearer token to a caller; anything invalid yields an anonymous context."""
        if not token:
            return ANONYMOUS
        try:
            claims = verify_token(self.settings.token_secret, token)
        except TokenError as exc:
            logger.warning("rejected bearer token | reason=%s", exc)
            return ANONYMOUS
        if self.store.get(User.COLLECTION, claims["sub"]) is None:
            logger.warning("bearer token for unknown user | user_id=%s", claims["sub"])
            return ANONYMOUS
        return RequestContext(user_id=claims["sub"])

    def register(self, inp: RegisterInput) -> dict[str, Any]:
        email = inp.email.strip().lower()
        username = inp.username.strip()
        with self.store.transaction():
            if self.store.find_one(User.COLLECTION, {"email": email}):
                raise ConflictError("A user with this email already exists")
            if self.store.find_one(User.COLLECTION, {"username": username}):
                raise ConflictError("This username is already taken")
            user = build(
                User,
                {
                    "username": username,
                    "email": email,
                    "password_hash": hash_password(inp.password),
                    "first_name": inp.first_name,
                    "last_name": inp.last_name,
                    "age": inp.age,
                },
            )
            self.store.insert(User.COLLECTION, user.to_doc())
        logger.info("user registered | user_id=%s", user.id)
        return {"user": user.public(), "token": self._token(user.id)}

    def login(self, inp: LoginInput) -> dict[str, Any]:
        doc = self.store.find_one(User.COLLECTION, {"email": inp.email.strip().lower()})
        if doc is None or not verify_password(inp.password, doc.get("password_hash", "")):
            raise UnauthorizedError("Invalid email or password")
        user = User.from_doc(self.store.update_fields(User.COLLECTION, doc["id"], {"last_login": now_iso()}))
        return {"user": user.public(), "token": self._token(user.id)}

    def get_profile(self, ctx: RequestContext) -> User:
        return self._load_user(ctx.require_user())

    def refresh_token(self, ctx: RequestContext) -> dict[str, str]:
        user = self._load_user(ctx.require_user())
        return {"token": self._token(user.id)}

    def change_password(self, ctx: RequestContext, inp: ChangePasswordInput) -> dict[str, Any]:
        user = self._load_user(ctx.require_user())
        if not verify_password(inp.current_password, user.password_hash):
            raise BadRequestError("Current password is incorrect")
        self.store.update_fields(
            User.COLLECTION, user.id, {"password_hash": hash_password(inp.new_password), "updated_at": now_iso()}
        )
        return {"success": True, "message": "Password updated successfully"}

    def forgot_password(self, inp: ForgotPasswordInput) -> dict[str, Any]:
        doc = self.store.find_one(User.COLLECTION, {"email": inp.email.strip().lower()})
        result: dict[str, Any] = {"success": True, "message": RESET_MESSAGE}
        if doc is None:
            return result
        token = new_reset_token()
        expires = datetime.now(timezone.utc) + timedelta(seconds=self.settings.reset_token_ttl_s)
        self.store.update_fields(
            User.COLLECTION,
            doc["id"],
            {
                "reset_token_hash": digest_reset_token(token),
                "reset_token_expires": expires.isoformat(timespec="microseconds"),
            },
        )
        logger.info("password reset token issued | user_id=%s", doc["id"])
        if self.settings.expose_reset_tokens:
            result["reset_token"] = token
        return result

    def reset_password(self, inp: ResetPasswordInput) -> dict[str, Any]:
        doc = self.store.find_one(User.COLLECTION, {"reset_token_hash": digest_reset_token(inp.token)})
        if doc is None or not doc.get("reset_token_expires") or doc["reset_token_expires"] < now_iso():
            raise BadRequestError("Invalid or expired reset token")
        self.store.update_fields(
            User.COLLECTION,
            doc["id"],
            {
                "password_hash": hash_password(inp.password),
                "reset_token_hash": None,
                "reset_token_expires": None,
                "updated_at": now_iso(),
            },
        )
        logger.info("password reset | user_id=%s", doc["id"])
        return {"success": True, "message": "Password has been reset"}

    def logout(self, ctx: RequestContext) -> dict[str, Any]:
        # Tokens are stateless; the client discards its copy.
        ctx.require_user()
        return {"success": True, "message": "Logged out"}
