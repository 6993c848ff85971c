"""Build depth-bounded comment trees from Reddit reply listings."""

from __future__ import annotations

import logging
from typing import Any, Optional

import config
from services.comment_filters import filter_comments

logger = logging.getLogger(__name__)


def reply_children(record: dict[str, Any]) -> list[Any]:
    """Return the raw children of a comment's ``replies`` field.

    Reddit sends a Listing envelope, or ``""`` when there are no replies.
    Comments handed in by callers may already carry a plain list.
    """
    replies = record.get("replies")
    if isinstance(replies, list):
        return replies
    if not isinstance(replies, dict):
        return []

    data = replies.get("data")
    if isinstance(data, dict):
        children = data.get("children")
    else:
        children = replies.get("children")
    return children if isinstance(children, list) else []


def _leaf(record: dict[str, Any], depth: int) -> dict[str, Any]:
    nested = dict(record)
    nested["depth"] = depth
    nested["has_replies"] = False
    nested["replies"] = None
    return nested


def build_nested(
    record: dict[str, Any],
    current_depth: int = 0,
    max_depth: int = config.DEFAULT_MAX_COMMENT_DEPTH,
) -> dict[str, Any]:
    """Attach ``depth``, ``has_replies`` and filtered ``replies`` to a comment.

    Replies below ``max_depth`` are dropped with a warning, so recursion never
    goes deeper than ``max_depth`` regardless of what the API returns.
    """
    children = reply_children(record)
    if not children:
        return _leaf(record, current_depth)

    if current_depth >= max_depth:
        logger.warning(
            "Comment %s nesting exceeded maximum depth of %d; dropping %d replies",
            record.get("id", "?"),
            max_depth,
            len(children),
        )
        return _leaf(record, current_depth)

    replies = [
        build_nested(reply, current_depth + 1, max_depth)
        for reply in filter_comments(children)
    ]

    nested = dict(record)
    nested["depth"] = current_depth
    nested["has_replies"] = len(replies) > 0
    nested["replies"] = replies or None
    return nested


def build_forest(
    records: Any,
    max_depth: int = config.DEFAULT_MAX_COMMENT_DEPTH,
) -> list[dict[str, Any]]:
    """Filter top-level comments and nest each one from depth 0."""
    return [build_nested(record, 0, max_depth) for record in filter_comments(records)]


def flatten_comments(
    nested_comments: list[dict[str, Any]],
    max_depth: int = config.DEFAULT_MAX_COMMENT_DEPTH,
) -> list[dict[str, Any]]:
    """Walk a nested forest in display order, keeping each node's depth."""
    flattened: list[dict[str, Any]] = []
    stack = list(reversed(nested_comments))

    while stack:
        comment = stack.pop()
        flattened.append(comment)
        replies = comment.get("replies")
        if replies and comment.get("depth", 0) < max_depth:
            stack.extend(reversed(replies))

    return flattened


def collect_descendant_ids(comment: dict[str, Any], ids: Optional[list[str]] = None) -> list[str]:
    if ids is None:
        ids = []

    for reply in comment.get("replies") or []:
        if reply.get("id"):
            ids.append(reply["id"])
            collect_descendant_ids(reply, ids)

    return ids


def collect_all_comment_ids(comments: list[dict[str, Any]]) -> list[str]:
    """Every comment id in a forest, parents before children.

    Used by expand/collapse-all controls.
    """
    ids: list[str] = []
    for comment in comments:
        if comment.get("id"):
            ids.append(comment["id"])
            collect_descendant_ids(comment, ids)
    return ids
