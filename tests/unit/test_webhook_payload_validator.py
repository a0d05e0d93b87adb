import pytest

from esa_sync.application.dto.webhook_dto import (
    PostCreatePayload,
    PostDeletePayload,
    PostUpdatePayload,
)
from esa_sync.application.services.webhook_payload_validator import validate_payload


def _payload(kind: str = "post_create", **post_fields) -> dict:
    post = {
        "name": "Launch",
        "body_md": "hola",
        "body_html": "<p>hola</p>",
        "message": "Create post.",
        "wip": False,
        "number": 1,
        "url": "https://docs.esa.io/posts/1",
    }
    post.update(post_fields)
    return {
        "kind": kind,
        "team": {"name": "docs"},
        "post": post,
        "user": {
            "icon": {"url": "https://img.esa.io/icon.png", "thumb_s": {"url": "https://img.esa.io/s.png"}},
            "name": "Alice",
            "screen_name": "alice",
        },
    }


def test_valid_create_payload_is_narrowed() -> None:
    errors: list[str] = []
    payload = validate_payload(_payload(), errors)

    assert errors == []
    assert isinstance(payload, PostCreatePayload)
    assert payload.post.number == 1
    assert payload.team.name == "docs"
    assert payload.user.screen_name == "alice"


def test_update_payload_keeps_diff_url() -> None:
    errors: list[str] = []
    payload = validate_payload(_payload("post_update", diff_url="https://docs.esa.io/posts/1/revisions/2"), errors)

    assert isinstance(payload, PostUpdatePayload)
    assert payload.post.diff_url.endswith("/revisions/2")


def test_delete_payload_only_needs_reduced_post() -> None:
    raw = _payload("post_delete")
    raw["post"] = {"name": "Launch", "wip": False, "number": 1}
    errors: list[str] = []

    payload = validate_payload(raw, errors)

    assert isinstance(payload, PostDeletePayload)
    assert payload.post.number == 1


def test_unknown_fields_are_ignored() -> None:
    raw = _payload()
    raw["extra"] = {"anything": True}
    raw["post"]["new_field"] = 1

    assert validate_payload(raw, []) is not None


@pytest.mark.parametrize("raw", [None, [], "post_create", 1])
def test_non_object_is_rejected(raw) -> None:
    errors: list[str] = []
    assert validate_payload(raw, errors) is None
    assert errors == ["The payload is not an type object."]


def test_missing_or_non_string_kind_is_rejected() -> None:
    errors: list[str] = []
    raw = _payload()
    raw["kind"] = 3

    assert validate_payload(raw, errors) is None
    assert errors == ["The `kind` is not type string."]

    errors = []
    del raw["kind"]
    assert validate_payload(raw, errors) is None
    assert errors == ["The `kind` is not type string."]


def test_unsupported_kind_is_rejected() -> None:
    errors: list[str] = []
    assert validate_payload(_payload("comment_create"), errors) is None
    assert errors == ['The `kind` value "comment_create" is not supported.']


def test_field_errors_are_reported_with_their_path() -> None:
    raw = _payload(number="not-a-number")
    del raw["team"]
    errors: list[str] = []

    assert validate_payload(raw, errors) is None
    assert any(e.startswith("team: ") for e in errors)
    assert any(e.startswith("post.number: ") for e in errors)


def test_user_without_screen_name_is_rejected() -> None:
    raw = _payload()
    del raw["user"]["screen_name"]
    errors: list[str] = []

    assert validate_payload(raw, errors) is None
    assert any(e.startswith("user.screen_name: ") for e in errors)
