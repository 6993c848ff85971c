"""Client-side comment ordering."""

from __future__ import annotations

from typing import Any

SORT_OPTIONS = ("best", "top", "new", "controversial", "old", "qa")


def _number(comment: dict[str, Any], key: str) -> float:
    value = comment.get(key)
    return value if isinstance(value, (int, float)) and not isinstance(value, bool) else 0


def sort_comments(comments: list[dict[str, Any]], option: str) -> list[dict[str, Any]]:
    """Return a new list ordered by *option*.

    ``best`` and ``qa`` are already ordered by Reddit, so they (and any
    unknown option) keep the incoming order. Sorting is stable.
    """
    if option == "top":
        return sorted(comments, key=lambda c: _number(c, "ups"), reverse=True)
    if option == "controversial":
        return sorted(comments, key=lambda c: _number(c, "ups"))
    if option == "new":
        return sorted(comments, key=lambda c: _number(c, "created_utc"), reverse=True)
    if option == "old":
        return sorted(comments, key=lambda c: _number(c, "created_utc"))
    return list(comments)


def reddit_sort(option: str | None) -> str | None:
    """Reddit's ``sort`` parameter for *option*, or None to use the default order."""
    if option not in SORT_OPTIONS:
        return None
    return "confidence" if option == "best" else option
