"""Error taxonomy shared by every procedure and both transports."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError


class StoryForgeError(Exception):
    code = "INTERNAL_SERVER_ERROR"
    status = 500

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        body.update(self.extra)
        return body


class ValidationError(StoryForgeError):
    code = "VALIDATION_ERROR"
    status = 400

    def __init__(self, message: str, fields: dict[str, str] | None = None) -> None:
        super().__init__(message, fields=fields or {})
        self.fields = fields or {}


class BadRequestError(StoryForgeError):
    code = "BAD_REQUEST"
    status = 400


class UnauthorizedError(StoryForgeError):
    code = "UNAUTHORIZED"
    status = 401


class ForbiddenError(StoryForgeError):
    code = "FORBIDDEN"
    status = 403


class NotFoundError(StoryForgeError):
    code = "NOT_FOUND"
    status = 404


class ConflictError(StoryForgeError):
    code = "CONFLICT"
    status = 409


class InternalError(StoryForgeError):
    code = "INTERNAL_SERVER_ERROR"
    status = 500

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        extra = {"cause": str(cause)} if cause is not None else {}
        super().__init__(message, **extra)
        self.cause = cause


def field_messages(errors: list[dict[str, Any]]) -> dict[str, str]:
    """Flatten pydantic/FastAPI error entries into ``{"a.b": "message"}``."""
    out: dict[str, str] = {}
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        key = ".".join(loc) or "__root__"
        out.setdefault(key, err.get("msg", "invalid value"))
    return out


def from_pydantic(exc: PydanticValidationError, message: str = "Invalid input") -> ValidationError:
    return ValidationError(message, fields=field_messages(exc.errors()))
