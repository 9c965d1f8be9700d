"""Row id derivation for cart items."""
import hashlib
import json
from collections.abc import Mapping
from typing import Any


def canonical_options(options: Mapping[str, Any] | None) -> str:
    """Serialize options with sorted keys so key order never changes the result."""
    return json.dumps(dict(options or {}), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def generate_row_id(identifier: int | str, options: Mapping[str, Any] | None = None) -> str:
    """
    Generate the row id for an (identifier, options) pair.

    MD5 hex digest of the identifier followed by the canonical options JSON.
    Used as a content key, not for security.
    """
    payload = f"{identifier}{canonical_options(options)}"
    return hashlib.md5(payload.encode("utf-8"), usedforsecurity=False).hexdigest()
