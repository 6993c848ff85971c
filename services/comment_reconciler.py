"""Pick the comment source to display for a given mode and fetch state.

Two switches drive the comments panel: flat vs. nested layout, and lazy
(single request) vs. infinite (paged) loading. Callers may also hand in
comments they already have, in which case nothing needs fetching. Each
(layout, strategy) pair has its own reconcile function in ``_RECONCILERS``.

Everything here is a pure function of its arguments. Duplicate "load more"
calls are the fetch layer's problem, not this module's.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

import config
from services.comment_filters import filter_comments
from services.comment_nester import build_forest
from services.comment_pages import merge_pages, to_page

logger = logging.getLogger(__name__)


class Layout(Enum):
    NESTED = "nested"
    FLAT = "flat"


class Strategy(Enum):
    INFINITE = "infinite"
    LAZY = "lazy"
    PROVIDED = "provided"


class FetchKind(Enum):
    FLAT = "flat"
    NESTED = "nested"


def _noop() -> None:
    return None


def clamp_max_depth(max_depth: Any) -> int:
    """Bound *max_depth* to ``0..MAX_COMMENT_DEPTH_LIMIT``; non-integers fall back to the default."""
    if isinstance(max_depth, bool) or not isinstance(max_depth, int):
        logger.warning(
            "max_depth %r is not an integer, using %d", max_depth, config.DEFAULT_MAX_COMMENT_DEPTH
        )
        return config.DEFAULT_MAX_COMMENT_DEPTH
    clamped = min(max(max_depth, 0), config.MAX_COMMENT_DEPTH_LIMIT)
    if clamped != max_depth:
        logger.warning("max_depth %d out of range, clamped to %d", max_depth, clamped)
    return clamped


@dataclass(frozen=True)
class PipelineConfig:
    nested_mode: bool = False
    infinite_mode: bool = False
    max_depth: int = config.DEFAULT_MAX_COMMENT_DEPTH
    provided_comments: Optional[list] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "max_depth", clamp_max_depth(self.max_depth))


@dataclass(frozen=True)
class CommentOptions:
    """What the comments panel asks for."""

    permalink: str
    open: bool = False
    comments: Optional[list] = None
    enable_infinite_loading: bool = False
    enable_nested_comments: bool = False
    max_comment_depth: int = config.DEFAULT_MAX_COMMENT_DEPTH

    def to_pipeline_config(self) -> PipelineConfig:
        return PipelineConfig(
            nested_mode=self.enable_nested_comments,
            infinite_mode=self.enable_infinite_loading,
            max_depth=self.max_comment_depth,
            provided_comments=self.comments,
        )


@dataclass(frozen=True)
class QueryResult:
    """State of a single-shot comments request."""

    data: Any = None
    is_loading: bool = False
    is_error: bool = False
    error: Any = None


@dataclass(frozen=True)
class InfiniteQueryResult:
    """State of a paged comments request; ``pages`` holds raw responses."""

    pages: Optional[list] = None
    fetch_next_page: Callable[[], Any] = _noop
    has_next_page: bool = False
    is_fetching_next_page: bool = False
    is_loading: bool = False
    is_error: bool = False
    error: Any = None


@dataclass(frozen=True)
class FetchResults:
    flat_lazy: QueryResult = field(default_factory=QueryResult)
    nested_lazy: QueryResult = field(default_factory=QueryResult)
    flat_infinite: InfiniteQueryResult = field(default_factory=InfiniteQueryResult)
    nested_infinite: InfiniteQueryResult = field(default_factory=InfiniteQueryResult)


@dataclass
class CommentsView:
    display_comments: list
    nested_comments: list
    has_comments_to_show: bool
    show_loading: bool
    current_fetch_next_page: Callable[[], Any]
    current_has_next_page: bool
    current_is_fetching_next_page: bool
    enable_nested_comments: bool
    enable_infinite_loading: bool
    is_error: bool
    error: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "display_comments": self.display_comments,
            "has_comments_to_show": self.has_comments_to_show,
            "show_loading": self.show_loading,
            "current_has_next_page": self.current_has_next_page,
            "current_is_fetching_next_page": self.current_is_fetching_next_page,
            "enable_nested_comments": self.enable_nested_comments,
            "enable_infinite_loading": self.enable_infinite_loading,
            "is_error": self.is_error,
            "error": str(self.error) if self.error is not None else None,
        }


def resolve_mode(pipeline_config: PipelineConfig) -> tuple[Layout, Strategy]:
    layout = Layout.NESTED if pipeline_config.nested_mode else Layout.FLAT
    if pipeline_config.infinite_mode:
        strategy = Strategy.INFINITE
    elif pipeline_config.provided_comments is not None:
        strategy = Strategy.PROVIDED
    else:
        strategy = Strategy.LAZY
    return layout, strategy


def select_nested_comments(pipeline_config: PipelineConfig, fetches: FetchResults) -> list:
    """Provided comments, then infinite pages, then the single-shot response."""
    max_depth = pipeline_config.max_depth

    if pipeline_config.provided_comments:
        return build_forest(pipeline_config.provided_comments, max_depth)

    if fetches.nested_infinite.pages:
        return build_forest(merge_pages(fetches.nested_infinite.pages).items, max_depth)

    if fetches.nested_lazy.data is not None:
        return build_forest(list(to_page(fetches.nested_lazy.data).children), max_depth)

    return []


def select_flat_comments(pipeline_config: PipelineConfig, fetches: FetchResults) -> list:
    """Infinite pages, then the single-shot response, then provided comments."""
    infinite_comments = filter_comments(merge_pages(fetches.flat_infinite.pages).items)
    if infinite_comments:
        return infinite_comments

    fetched_comments = filter_comments(list(to_page(fetches.flat_lazy.data).children))
    if fetched_comments:
        return fetched_comments

    return list(pipeline_config.provided_comments or [])


def _build_view(
    pipeline_config: PipelineConfig,
    comments: list,
    active: Any,
    pager: Optional[InfiniteQueryResult] = None,
) -> CommentsView:
    return CommentsView(
        display_comments=comments,
        nested_comments=comments if pipeline_config.nested_mode else [],
        has_comments_to_show=len(comments) > 0,
        show_loading=active.is_loading,
        current_fetch_next_page=pager.fetch_next_page if pager else _noop,
        current_has_next_page=pager.has_next_page if pager else False,
        current_is_fetching_next_page=pager.is_fetching_next_page if pager else False,
        enable_nested_comments=pipeline_config.nested_mode,
        enable_infinite_loading=pipeline_config.infinite_mode,
        is_error=active.is_error,
        error=active.error,
    )


def _reconcile_nested_infinite(pipeline_config: PipelineConfig, fetches: FetchResults) -> CommentsView:
    comments = select_nested_comments(pipeline_config, fetches)
    return _build_view(pipeline_config, comments, fetches.nested_infinite, pager=fetches.nested_infinite)


def _reconcile_nested_lazy(pipeline_config: PipelineConfig, fetches: FetchResults) -> CommentsView:
    comments = select_nested_comments(pipeline_config, fetches)
    return _build_view(pipeline_config, comments, fetches.nested_lazy)


def _reconcile_nested_provided(pipeline_config: PipelineConfig, fetches: FetchResults) -> CommentsView:
    # Nothing is fetched; the idle lazy query only contributes its flags.
    comments = select_nested_comments(pipeline_config, fetches)
    return _build_view(pipeline_config, comments, fetches.nested_lazy)


def _reconcile_flat_infinite(pipeline_config: PipelineConfig, fetches: FetchResults) -> CommentsView:
    comments = select_flat_comments(pipeline_config, fetches)
    return _build_view(pipeline_config, comments, fetches.flat_infinite, pager=fetches.flat_infinite)


def _reconcile_flat_lazy(pipeline_config: PipelineConfig, fetches: FetchResults) -> CommentsView:
    comments = select_flat_comments(pipeline_config, fetches)
    return _build_view(pipeline_config, comments, fetches.flat_lazy)


def _reconcile_flat_provided(pipeline_config: PipelineConfig, fetches: FetchResults) -> CommentsView:
    comments = select_flat_comments(pipeline_config, fetches)
    return _build_view(pipeline_config, comments, fetches.flat_lazy)


_RECONCILERS: dict[tuple[Layout, Strategy], Callable[[PipelineConfig, FetchResults], CommentsView]] = {
    (Layout.NESTED, Strategy.INFINITE): _reconcile_nested_infinite,
    (Layout.NESTED, Strategy.LAZY): _reconcile_nested_lazy,
    (Layout.NESTED, Strategy.PROVIDED): _reconcile_nested_provided,
    (Layout.FLAT, Strategy.INFINITE): _reconcile_flat_infinite,
    (Layout.FLAT, Strategy.LAZY): _reconcile_flat_lazy,
    (Layout.FLAT, Strategy.PROVIDED): _reconcile_flat_provided,
}


def reconcile(pipeline_config: PipelineConfig, fetches: Optional[FetchResults] = None) -> CommentsView:
    """Build the comments view for *pipeline_config* from the current fetch state."""
    if fetches is None:
        fetches = FetchResults()
    return _RECONCILERS[resolve_mode(pipeline_config)](pipeline_config, fetches)


def lazy_fetch_target(options: CommentOptions) -> Optional[FetchKind]:
    """Which single-shot fetch opening the panel should issue, if any."""
    if not options.open or options.enable_infinite_loading or options.comments is not None:
        return None
    return FetchKind.NESTED if options.enable_nested_comments else FetchKind.FLAT
