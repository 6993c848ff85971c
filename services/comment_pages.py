"""Helpers for merging paginated Reddit comment listings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Page:
    children: tuple = ()
    next_cursor: Optional[str] = None


@dataclass
class MergedPages:
    items: list = field(default_factory=list)
    next_cursor: Optional[str] = None


def extract_comments_listing(envelope: Any) -> Optional[dict[str, Any]]:
    """Pick the comments listing out of a response.

    ``/comments/<id>.json`` answers with ``[post_listing, comments_listing]``;
    other endpoints answer with the listing itself.
    """
    if isinstance(envelope, (list, tuple)):
        if len(envelope) < 2:
            return None
        envelope = envelope[1]
    return envelope if isinstance(envelope, dict) else None


def to_page(envelope: Any) -> Page:
    """Normalize one API response (or an existing Page) into a Page."""
    if isinstance(envelope, Page):
        return envelope

    listing = extract_comments_listing(envelope)
    if listing is None:
        return Page()

    data = listing.get("data") if isinstance(listing.get("data"), dict) else listing
    children = data.get("children")
    after = data.get("after")

    return Page(
        children=tuple(children) if isinstance(children, list) else (),
        next_cursor=after if isinstance(after, str) and after else None,
    )


def merge_pages(pages: Optional[list]) -> MergedPages:
    """Concatenate page children in order; the cursor comes from the last page."""
    if not isinstance(pages, (list, tuple)):
        return MergedPages()

    items: list = []
    last = Page()
    for envelope in pages:
        last = to_page(envelope)
        items.extend(last.children)

    return MergedPages(items=items, next_cursor=last.next_cursor)
