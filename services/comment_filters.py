"""Content filtering for raw Reddit comment records."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Optional

import config

COMMENT_CONTENT_MARKERS = SimpleNamespace(
    deleted="[deleted]",
    removed="[removed]",
    auto_moderator=config.AUTOMODERATOR_NAME,
)

_DELETION_MARKERS = (COMMENT_CONTENT_MARKERS.deleted, COMMENT_CONTENT_MARKERS.removed)


def unwrap_comment(child: Any) -> Optional[dict[str, Any]]:
    """Return the comment dict inside a listing child.

    Listing children come as ``{"kind": "t1", "data": {...}}``; callers that
    already hold comment dicts pass them bare. Anything else yields ``None``.
    """
    if not isinstance(child, dict):
        return None
    if "kind" in child and "data" in child:
        data = child["data"]
        return data if isinstance(data, dict) else None
    return child


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_valid_comment(record: Any) -> bool:
    """True when a comment has a real author and some non-deleted content."""
    if not isinstance(record, dict):
        return False

    author = record.get("author")
    if not isinstance(author, str) or not author or author in _DELETION_MARKERS:
        return False

    body = record.get("body")
    if not (_has_text(body) or _has_text(record.get("body_html"))):
        return False

    return body not in _DELETION_MARKERS


def is_moderation_artifact(record: Any) -> bool:
    return isinstance(record, dict) and record.get("author") == COMMENT_CONTENT_MARKERS.auto_moderator


def filter_comments(records: Any) -> list[dict[str, Any]]:
    """Drop moderator-bot, deleted, removed and empty comments, keeping order.

    Accepts listing children or bare comment dicts and returns bare dicts.
    Anything that is not a list or tuple filters down to nothing.
    """
    if not isinstance(records, (list, tuple)):
        return []

    comments = [unwrap_comment(record) for record in records]
    comments = [comment for comment in comments if not is_moderation_artifact(comment)]
    return [comment for comment in comments if is_valid_comment(comment)]
