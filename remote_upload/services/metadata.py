"""Load the upload defaults document and merge caller metadata over it."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)


class UploadDefaultsError(Exception):
    """Raised when the defaults document exists but cannot be used."""


def load_upload_defaults(path: str | Path) -> Dict[str, Any]:
    """Read the defaults document; a missing file means no defaults."""
    defaults_path = Path(path).expanduser()
    if not defaults_path.exists():
        logger.warning("Upload defaults file %s not found; using no defaults.", defaults_path)
        return {}

    try:
        document = json.loads(defaults_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise UploadDefaultsError(f"{defaults_path} is not valid JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise UploadDefaultsError(f"{defaults_path} must contain a JSON object.")
    return document


def merge_metadata(
    defaults: Mapping[str, Any], override: Mapping[str, Any]
) -> Dict[str, Any]:
    """Shallow merge per top-level section, caller values winning.

    ``{"snippet": {"title": "A"}}`` over ``{"snippet": {"title": "default",
    "description": "d"}}`` gives ``{"snippet": {"title": "A", "description": "d"}}``.
    Nested values inside a section are replaced, not merged.
    """
    merged: Dict[str, Any] = {}
    for section in {**defaults, **override}:
        base = defaults.get(section)
        ours = override.get(section)
        if isinstance(base, Mapping) and isinstance(ours, Mapping):
            merged[section] = {**base, **ours}
        elif section in override:
            merged[section] = dict(ours) if isinstance(ours, Mapping) else ours
        else:
            merged[section] = dict(base) if isinstance(base, Mapping) else base
    return merged


__all__ = ["UploadDefaultsError", "load_upload_defaults", "merge_metadata"]
