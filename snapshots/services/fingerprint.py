"""Content fingerprint used as the post dedup key."""

from __future__ import annotations

import hashlib

# ASCII unit separator; never present in ids, URLs or captured text.
_DELIMITER = "\x1f"


def fingerprint(session_id: str, url: str, node_id: str | None, text: str | None) -> str:
    parts = (session_id or "", url or "", node_id or "", (text or "").strip())
    return hashlib.sha256(_DELIMITER.join(parts).encode("utf-8")).hexdigest()
