"""Storage key layout shared by every component that persists per-user data.

    user-<id>/documents.json              document metadata
    user-<id>/<doc_id><ext>               original upload
    user-<id>/content-<doc_id>.txt        extracted text
    user-<id>/index-<doc_id>/chunks.json  persisted chunk set
"""

from __future__ import annotations

import re

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9\-_.]")


def _safe(part: str) -> str:
    cleaned = _UNSAFE_RE.sub("_", str(part))
    if not cleaned or cleaned in {".", ".."}:
        raise ValueError(f"Invalid key component: {part!r}")
    return cleaned


def user_prefix(user_id: str) -> str:
    return f"user-{_safe(user_id)}"


def documents_key(user_id: str) -> str:
    return f"{user_prefix(user_id)}/documents.json"


def original_key(user_id: str, document_id: str, extension: str = "") -> str:
    ext = extension if re.fullmatch(r"\.[A-Za-z0-9]{1,10}", extension or "") else ""
    return f"{user_prefix(user_id)}/{_safe(document_id)}{ext.lower()}"


def content_key(user_id: str, document_id: str) -> str:
    return f"{user_prefix(user_id)}/content-{_safe(document_id)}.txt"


def index_prefix(user_id: str, document_id: str) -> str:
    return f"{user_prefix(user_id)}/index-{_safe(document_id)}"


def chunks_key(user_id: str, document_id: str) -> str:
    return f"{index_prefix(user_id, document_id)}/chunks.json"
