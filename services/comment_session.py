"""Comments panel state for one post: queries, lazy trigger and reconciled view."""

from __future__ import annotations

import logging
from typing import Optional

from reddit_reader import RedditReader
from services.cache import CommentQueryCache
from services.comment_queries import CommentQuery, InfiniteCommentQuery
from services.comment_reconciler import (
    CommentOptions,
    CommentsView,
    FetchKind,
    FetchResults,
    lazy_fetch_target,
    reconcile,
)
from services.comment_sorter import reddit_sort

logger = logging.getLogger(__name__)


class CommentSession:
    """Wires the four comment queries of a post to the reconciler.

    Only the queries matching the options are ever used; the others stay idle
    and report empty results.
    """

    def __init__(
        self,
        reader: RedditReader,
        options: CommentOptions,
        cache: Optional[CommentQueryCache] = None,
        sort: Optional[str] = None,
    ):
        self.options = options
        self.pipeline_config = options.to_pipeline_config()
        upstream_sort = reddit_sort(sort)
        infinite_kwargs = {"sort": upstream_sort} if upstream_sort else {}

        self.flat_query = CommentQuery(reader, options.permalink, FetchKind.FLAT, cache)
        self.nested_query = CommentQuery(reader, options.permalink, FetchKind.NESTED, cache)
        self.flat_pages = InfiniteCommentQuery(reader, options.permalink, **infinite_kwargs)
        self.nested_pages = InfiniteCommentQuery(reader, options.permalink, **infinite_kwargs)

    @property
    def active_pages(self) -> Optional[InfiniteCommentQuery]:
        if not self.options.enable_infinite_loading:
            return None
        return self.nested_pages if self.options.enable_nested_comments else self.flat_pages

    def open(self) -> bool:
        """Issue the fetch that opening the panel calls for. Returns True if a request went out."""
        target = lazy_fetch_target(self.options)
        if target is not None:
            query = self.nested_query if target is FetchKind.NESTED else self.flat_query
            return query.fetch()

        pages = self.active_pages
        if self.options.open and pages is not None and not pages.pages:
            return pages.fetch_next_page()
        return False

    def load_more(self, pages: int = 1) -> int:
        """Fetch up to *pages* further pages on the active paged query."""
        query = self.active_pages
        if query is None:
            return 0

        loaded = 0
        for _ in range(pages):
            if not query.has_next_page or not query.fetch_next_page():
                break
            loaded += 1
        logger.debug("Loaded %d more comment pages for %s", loaded, query.permalink)
        return loaded

    def fetch_results(self) -> FetchResults:
        return FetchResults(
            flat_lazy=self.flat_query.result(),
            nested_lazy=self.nested_query.result(),
            flat_infinite=self.flat_pages.result(),
            nested_infinite=self.nested_pages.result(),
        )

    def view(self) -> CommentsView:
        return reconcile(self.pipeline_config, self.fetch_results())
