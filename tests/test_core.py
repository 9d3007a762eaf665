from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from storyforge.config import Settings
from storyforge.errors import ValidationError
from storyforge.models.chapter import Chapter, word_count
from storyforge.models.project import Project, TargetLength
from storyforge.models.user import UserPreferences
from storyforge.schemas.project import ProjectPatch
from storyforge.schemas.user import PreferencesPatch
from storyforge.security import (
    TokenError,
    digest_reset_token,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)
from storyforge.services.patching import apply_patch, deep_merge
from storyforge.storage.connection import backoff_delays, open_store_with_retry
from storyforge.storage.doc_store import DocStore


def test_word_count_splits_on_any_whitespace():
    assert word_count("a  b\tc") == 3
    assert word_count("") == 0
    assert word_count("  one\n\ntwo  ") == 2
    chapter = Chapter(project_id="p", title="One", position=0, content="It was a dark night")
    chapter.recount()
    assert chapter.word_count == 5


def test_deep_merge_replaces_lists_and_merges_dicts():
    base = {"a": {"x": 1, "y": 2}, "tags": [1, 2]}
    out = deep_merge(base, {"a": {"y": 3}, "tags": [9]})
    assert out == {"a": {"x": 1, "y": 3}, "tags": [9]}
    assert base["a"]["y"] == 2


def test_apply_patch_only_touches_supplied_fields():
    project = Project(owner_id="u1", title="Old", genre="fantasy", target_audience="adult", narrative_type="Novel")
    patched = apply_patch(project, ProjectPatch(title="New", target_length={"value": 50000}))
    assert patched.title == "New"
    assert patched.genre == "fantasy"
    assert patched.target_length.value == 50000
    assert patched.target_length.type == "Words"
    assert project.title == "Old"


def test_apply_patch_merges_nested_preferences():
    prefs = UserPreferences()
    patched = apply_patch(prefs, PreferencesPatch(notification_settings={"email": False}))
    assert patched.notification_settings == {"email": False, "app": True}
    assert patched.font_size == 16


def test_patch_rejects_out_of_range_values_when_built():
    with pytest.raises(PydanticValidationError):
        ProjectPatch(target_length={"value": -5})


def test_apply_patch_revalidates_merged_record():
    project = Project(owner_id="u1", title="Old", genre="fantasy", target_audience="adult", narrative_type="Novel")
    patch = ProjectPatch.model_construct(target_length=TargetLength.model_construct(value=-5))
    with pytest.raises(ValidationError) as err:
        apply_patch(project, patch)
    assert "target_length.value" in err.value.fields
    assert project.target_length.value == 0


def test_password_hashing():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("anything", "")


def test_token_round_trip_and_rejections():
    token = issue_token("k", "user-1", ttl_s=60, now=1000)
    assert verify_token("k", token, now=1030)["sub"] == "user-1"
    with pytest.raises(TokenError):
        verify_token("other-key", token, now=1030)
    with pytest.raises(TokenError):
        verify_token("k", token, now=2000)
    with pytest.raises(TokenError):
        verify_token("k", "garbage")
    with pytest.raises(TokenError):
        verify_token("k", token, purpose="reset", now=1030)
    body, sig = token.split(".")
    with pytest.raises(TokenError):
        verify_token("k", f"{body}.{sig[::-1]}", now=1030)


def test_reset_token_digest_is_stable():
    assert digest_reset_token("abc") == digest_reset_token("abc")
    assert digest_reset_token("abc") != digest_reset_token("abd")


def test_settings_from_yaml_and_env(tmp_path: Path):
    cfg_file = tmp_path / "storyforge.yaml"
    cfg_file.write_text(
        "data_dir: /srv/storyforge\nai_provider: openai_compat\nexport_delay_s: 2\nallowed_origins:\n  - https://a.example\n",
        encoding="utf-8",
    )
    settings = Settings.load(
        {
            "STORYFORGE_CONFIG": str(cfg_file),
            "STORYFORGE_EXPORT_DELAY_S": "0.5",
            "STORYFORGE_EXPOSE_RESET_TOKENS": "true",
            "STORYFORGE_TOKEN_TTL_S": "120",
        }
    )
    assert settings.data_dir == Path("/srv/storyforge")
    assert settings.ai_provider == "openai_compat"
    assert settings.export_delay_s == 0.5
    assert settings.expose_reset_tokens is True
    assert settings.token_ttl_s == 120
    assert settings.allowed_origins == ("https://a.example",)


def test_settings_defaults_without_config():
    settings = Settings.load({})
    assert settings.ai_provider == "mock"
    assert settings.export_worker_enabled is True
    assert Settings.from_mapping({"export_worker_enabled": "no", "token_ttl_s": "bad"}).export_worker_enabled is False
    assert Settings.from_mapping({"token_ttl_s": "bad"}).token_ttl_s == Settings().token_ttl_s


def test_backoff_delays_double_and_cap():
    assert backoff_delays(5, 0.5, 3.0) == [0.5, 1.0, 2.0, 3.0]
    assert backoff_delays(1, 0.5, 3.0) == []


def test_open_store_retries_then_succeeds(tmp_path: Path):
    calls = []
    slept = []

    def flaky(path: Path) -> DocStore:
        calls.append(path)
        if len(calls) < 3:
            raise OSError("volume not mounted")
        return DocStore(path)

    store = open_store_with_retry(tmp_path, attempts=5, base_s=0.1, max_s=1.0, sleep=slept.append, factory=flaky)
    assert isinstance(store, DocStore)
    assert len(calls) == 3
    assert slept == [0.1, 0.2]


def test_open_store_gives_up(tmp_path: Path):
    def broken(path: Path) -> DocStore:
        raise OSError("read-only file system")

    slept = []
    with pytest.raises(OSError):
        open_store_with_retry(tmp_path, attempts=3, base_s=0.1, max_s=1.0, sleep=slept.append, factory=broken)
    assert slept == [0.1, 0.2]
