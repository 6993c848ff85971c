"""Stateful comment queries backing the comments panel.

These play the part of the client-side fetch hooks: each one owns the
request state for a single permalink and reports it as the plain
``QueryResult`` / ``InfiniteQueryResult`` the reconciler consumes.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import config
from reddit_reader import CommentFetchError, RedditReader, normalize_permalink
from services.cache import CommentQueryCache
from services.comment_pages import to_page
from services.comment_reconciler import FetchKind, InfiniteQueryResult, QueryResult
from services.log_helpers import log_error_with_context

logger = logging.getLogger(__name__)


class CommentQuery:
    """Single-shot request for all comments of a post."""

    def __init__(
        self,
        reader: RedditReader,
        permalink: str,
        kind: FetchKind,
        cache: Optional[CommentQueryCache] = None,
        limit: int = config.COMMENTS_LIMIT,
    ):
        self.reader = reader
        self.permalink = normalize_permalink(permalink)
        self.kind = kind
        self.cache = cache
        self.limit = limit
        self.data: Any = None
        self.error: Optional[CommentFetchError] = None
        self.is_loading = False

    def is_cached(self) -> bool:
        return self.cache is not None and self.cache.has_response(self.kind, self.permalink)

    def fetch(self) -> bool:
        """Load comments unless a cached response exists. Returns True if a request went out."""
        if self.is_cached():
            self.data = self.cache.get_response(self.kind, self.permalink)
            self.error = None
            logger.debug("Using cached %s comments for %s", self.kind.value, self.permalink)
            return False

        self.is_loading = True
        try:
            self.data = self.reader.fetch_post_comments(self.permalink, limit=self.limit)
            self.error = None
        except CommentFetchError as exc:
            self.error = exc
            log_error_with_context(
                logger,
                "Comment fetch failed",
                exc,
                {"permalink": self.permalink, "kind": self.kind.value},
            )
        finally:
            self.is_loading = False

        if self.error is None and self.cache is not None:
            self.cache.store_response(self.kind, self.permalink, self.data)
        return True

    def result(self) -> QueryResult:
        return QueryResult(
            data=self.data,
            is_loading=self.is_loading,
            is_error=self.error is not None,
            error=self.error,
        )


class InfiniteCommentQuery:
    """Page-by-page comment loading following Reddit's ``after`` cursor."""

    def __init__(
        self,
        reader: RedditReader,
        permalink: str,
        page_limit: int = config.COMMENTS_PAGE_LIMIT,
        max_pages: int = config.MAX_COMMENT_PAGES,
        sort: str = config.DEFAULT_COMMENT_SORT,
    ):
        self.reader = reader
        self.permalink = normalize_permalink(permalink)
        self.page_limit = page_limit
        self.max_pages = max_pages
        self.sort = sort
        self.pages: list = []
        self.error: Optional[CommentFetchError] = None
        self._in_flight = False
        self._lock = threading.Lock()

    @property
    def next_cursor(self) -> Optional[str]:
        return to_page(self.pages[-1]).next_cursor if self.pages else None

    @property
    def has_next_page(self) -> bool:
        if not self.pages:
            return True
        return self.next_cursor is not None and len(self.pages) < self.max_pages

    def fetch_next_page(self) -> bool:
        """Load one more page. Calls made while a page is in flight are dropped."""
        if not self._lock.acquire(blocking=False):
            logger.debug("Ignoring duplicate page request for %s", self.permalink)
            return False

        try:
            if not self.has_next_page:
                return False

            cursor = self.next_cursor
            self._in_flight = True
            try:
                payload = self.reader.fetch_post_comments(
                    self.permalink,
                    limit=self.page_limit,
                    after=cursor,
                    sort=self.sort,
                )
            except CommentFetchError as exc:
                self.error = exc
                log_error_with_context(
                    logger,
                    "Comment page fetch failed",
                    exc,
                    {"permalink": self.permalink, "after": cursor, "page": len(self.pages) + 1},
                )
                return False

            self.pages.append(payload)
            self.error = None
            return True
        finally:
            self._in_flight = False
            self._lock.release()

    def result(self) -> InfiniteQueryResult:
        return InfiniteQueryResult(
            pages=list(self.pages) or None,
            fetch_next_page=self.fetch_next_page,
            has_next_page=self.has_next_page,
            is_fetching_next_page=self._in_flight and bool(self.pages),
            is_loading=self._in_flight and not self.pages,
            is_error=self.error is not None,
            error=self.error,
        )
