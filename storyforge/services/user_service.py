from __future__ import annotations

from typing import Any

from storyforge.context import RequestContext
from storyforge.errors import ConflictError, NotFoundError
from storyforge.models.user import User, UserPreferences
from storyforge.schemas.auth import ChangePasswordInput
from storyforge.schemas.user import PreferencesPatch, ProfilePatch
from storyforge.services.auth_service import AuthService
from storyforge.services.patching import apply_patch, patch_changes
from storyforge.storage.doc_store import DocStore, now_iso


class UserService:
    def __init__(self, store: DocStore, auth: AuthService) -> None:
        self.store = store
        self.auth = auth

    def _load(self, ctx: RequestContext) -> User:
        doc = self.store.get(User.COLLECTION, ctx.require_user())
        if doc is None:
            raise NotFoundError("User not found")
        return User.from_doc(doc)

    def get_profile(self, ctx: RequestContext) -> User:
        return self._load(ctx)

    def update_profile(self, ctx: RequestContext, patch: ProfilePatch) -> User:
        user = self._load(ctx)
        if patch.email is not None:
            patch = patch.model_copy(update={"email": patch.email.strip().lower()})
        with self.store.transaction():
            if patch.email is not None and patch.email != user.email:
                if self.store.find_one(User.COLLECTION, {"email": patch.email, "id": {"$ne": user.id}}):
                    raise ConflictError("A user with this email already exists")
            if patch.username is not None and patch.username != user.username:
                if self.store.find_one(User.COLLECTION, {"username": patch.username, "id": {"$ne": user.id}}):
                    raise ConflictError("This username is already taken")
            updated = apply_patch(user, patch)
            changes = {name: getattr(updated, name) for name in patch_changes(patch)}
            changes["updated_at"] = now_iso()
            doc = self.store.update_fields(User.COLLECTION, user.id, changes)
        return User.from_doc(doc)

    def change_password(self, ctx: RequestContext, inp: ChangePasswordInput) -> dict[str, Any]:
        return self.auth.change_password(ctx, inp)

    def get_preferences(self, ctx: RequestContext) -> UserPreferences:
        return self._load(ctx).preferences

    def update_preferences(self, ctx: RequestContext, patch: PreferencesPatch) -> UserPreferences:
        user = self._load(ctx)
        preferences = apply_patch(user.preferences, patch)
        self.store.update_fields(
            User.COLLECTION,
            user.id,
            {"preferences": preferences.model_dump(mode="json"), "updated_at": now_iso()},
        )
        return preferences
