try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json

import pytest

from remote_upload.services.metadata import (
    UploadDefaultsError,
    load_upload_defaults,
    merge_metadata,
)


def test_override_wins_within_a_section() -> None:
    defaults = {"snippet": {"title": "default", "description": "d"}}

    merged = merge_metadata(defaults, {"snippet": {"title": "A"}})

    assert merged == {"snippet": {"title": "A", "description": "d"}}


def test_merge_is_idempotent_and_leaves_inputs_alone() -> None:
    defaults = {"snippet": {"title": "default", "tags": ["a"]}, "status": {"privacyStatus": "unlisted"}}
    override = {"snippet": {"title": "A"}}

    once = merge_metadata(defaults, override)
    twice = merge_metadata(once, override)

    assert once == twice
    assert defaults["snippet"]["title"] == "default"


def test_merge_is_one_level_deep() -> None:
    defaults = {"snippet": {"localized": {"title": "x", "description": "y"}}}

    merged = merge_metadata(defaults, {"snippet": {"localized": {"title": "z"}}})

    assert merged["snippet"]["localized"] == {"title": "z"}


def test_sections_only_on_one_side_are_kept() -> None:
    merged = merge_metadata(
        {"status": {"privacyStatus": "private"}},
        {"snippet": {"title": "A"}},
    )

    assert merged == {"status": {"privacyStatus": "private"}, "snippet": {"title": "A"}}


def test_missing_defaults_file_means_no_defaults(tmp_path) -> None:
    assert load_upload_defaults(tmp_path / "nope.json") == {}


def test_defaults_file_is_loaded(tmp_path) -> None:
    path = tmp_path / "uploadDefaults.json"
    path.write_text(json.dumps({"status": {"privacyStatus": "unlisted"}}), encoding="utf-8")

    assert load_upload_defaults(path) == {"status": {"privacyStatus": "unlisted"}}


@pytest.mark.parametrize("contents", ["{not json", "[1, 2]"])
def test_unusable_defaults_file_raises(tmp_path, contents) -> None:
    path = tmp_path / "uploadDefaults.json"
    path.write_text(contents, encoding="utf-8")

    with pytest.raises(UploadDefaultsError):
        load_upload_defaults(path)
