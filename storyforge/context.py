from __future__ import annotations

from dataclasses import dataclass

from storyforge.errors import UnauthorizedError


@dataclass(frozen=True)
class RequestContext:
    """Caller identity for one request. Passed explicitly into every service call."""

    user_id: str | None = None

    def require_user(self) -> str:
        if self.user_id is None:
            raise UnauthorizedError("Authentication required")
        return self.user_id


ANONYMOUS = RequestContext()
