"""
Tests for comment source selection across display and fetch modes
"""

import itertools
import json
import logging

import pytest

from services.comment_reconciler import (
    _RECONCILERS,
    CommentOptions,
    FetchKind,
    FetchResults,
    InfiniteQueryResult,
    Layout,
    PipelineConfig,
    QueryResult,
    Strategy,
    lazy_fetch_target,
    reconcile,
    resolve_mode,
)
from tests.factories import deep_thread, listing, make_comment, post_with_comments


def _authors(comments):
    return [c["author"] for c in comments]


@pytest.fixture
def provided():
    return [make_comment(author="provided")]


@pytest.fixture
def fetches():
    """Every source populated with a distinct author so the winner is visible."""
    calls = []
    return FetchResults(
        flat_lazy=QueryResult(data=post_with_comments([make_comment(author="flat_lazy")])),
        nested_lazy=QueryResult(data=post_with_comments([make_comment(author="nested_lazy")])),
        flat_infinite=InfiniteQueryResult(
            pages=[listing([make_comment(author="flat_page1")], after="t1_x"), listing([make_comment(author="flat_page2")])],
            fetch_next_page=lambda: calls.append("flat"),
            has_next_page=False,
        ),
        nested_infinite=InfiniteQueryResult(
            pages=[listing([make_comment(author="nested_page1")], after="t1_y")],
            fetch_next_page=lambda: calls.append("nested"),
            has_next_page=True,
            is_fetching_next_page=True,
        ),
    )


class TestModeResolution:
    @pytest.mark.parametrize(
        "nested,infinite,provided_comments,expected",
        [
            (True, True, None, (Layout.NESTED, Strategy.INFINITE)),
            (True, True, [], (Layout.NESTED, Strategy.INFINITE)),
            (True, False, None, (Layout.NESTED, Strategy.LAZY)),
            (True, False, [], (Layout.NESTED, Strategy.PROVIDED)),
            (False, True, [], (Layout.FLAT, Strategy.INFINITE)),
            (False, False, None, (Layout.FLAT, Strategy.LAZY)),
            (False, False, [{"author": "a", "body": "b"}], (Layout.FLAT, Strategy.PROVIDED)),
        ],
    )
    def test_resolve_mode(self, nested, infinite, provided_comments, expected):
        config = PipelineConfig(nested_mode=nested, infinite_mode=infinite, provided_comments=provided_comments)
        assert resolve_mode(config) == expected

    def test_every_combination_has_a_reconciler(self):
        assert set(_RECONCILERS) == set(itertools.product(Layout, Strategy))


class TestPipelineConfig:
    @pytest.mark.parametrize("max_depth,expected", [(-1, 0), (51, 50), (60, 50), (0, 0), (50, 50)])
    def test_clamps_max_depth(self, max_depth, expected):
        assert PipelineConfig(max_depth=max_depth).max_depth == expected

    @pytest.mark.parametrize("max_depth", ["3", 2.5, True, None])
    def test_non_integer_max_depth_uses_default(self, max_depth):
        assert PipelineConfig(max_depth=max_depth).max_depth == 4

    def test_out_of_range_depth_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="services.comment_reconciler"):
            PipelineConfig(max_depth=60)
        assert "clamped to 50" in caplog.text

    def test_deep_thread_beyond_limit_reconciles(self):
        view = reconcile(PipelineConfig(nested_mode=True, max_depth=60, provided_comments=[deep_thread(55)]))

        depths = []
        node = view.display_comments[0]
        while node is not None:
            depths.append(node["depth"])
            node = node["replies"][0] if node["replies"] else None
        assert depths[-1] == 50
        assert view.has_comments_to_show is True

    def test_defaults(self):
        config = PipelineConfig()
        assert config.max_depth == 4
        assert not config.nested_mode and not config.infinite_mode
        assert config.provided_comments is None


class TestNestedSelection:
    def test_provided_wins(self, fetches, provided):
        view = reconcile(PipelineConfig(nested_mode=True, infinite_mode=True, provided_comments=provided), fetches)
        assert _authors(view.display_comments) == ["provided"]
        assert view.display_comments[0]["depth"] == 0

    def test_infinite_pages_before_single_shot(self, fetches):
        view = reconcile(PipelineConfig(nested_mode=True), fetches)
        assert _authors(view.display_comments) == ["nested_page1"]

    def test_single_shot_when_no_pages(self, fetches):
        fetches = FetchResults(nested_lazy=fetches.nested_lazy)
        view = reconcile(PipelineConfig(nested_mode=True), fetches)
        assert _authors(view.display_comments) == ["nested_lazy"]

    def test_empty_when_nothing_populated(self):
        view = reconcile(PipelineConfig(nested_mode=True))
        assert view.display_comments == []
        assert view.has_comments_to_show is False

    def test_nested_tree_is_built_and_bounded(self):
        thread = make_comment(author="top", replies=listing([make_comment(author="reply")]))
        fetches = FetchResults(nested_lazy=QueryResult(data=post_with_comments([thread])))
        view = reconcile(PipelineConfig(nested_mode=True, max_depth=0), fetches)
        node = view.display_comments[0]
        assert node["depth"] == 0 and node["replies"] is None
        assert view.nested_comments == view.display_comments


class TestFlatSelection:
    def test_infinite_comments_first(self, fetches, provided):
        view = reconcile(PipelineConfig(provided_comments=provided), fetches)
        assert _authors(view.display_comments) == ["flat_page1", "flat_page2"]

    def test_single_shot_second(self, fetches, provided):
        fetches = FetchResults(flat_lazy=fetches.flat_lazy)
        view = reconcile(PipelineConfig(provided_comments=provided), fetches)
        assert _authors(view.display_comments) == ["flat_lazy"]

    def test_provided_comments_returned_unchanged(self, provided):
        view = reconcile(PipelineConfig(provided_comments=provided))
        assert view.display_comments == provided
        assert view.nested_comments == []
        assert view.show_loading is False
        assert view.has_comments_to_show is True

    def test_infinite_pages_filtered_after_merge(self):
        pages = [listing([make_comment(author="AutoModerator")], after="t1_a"), listing([make_comment(author="bob")])]
        fetches = FetchResults(flat_infinite=InfiniteQueryResult(pages=pages))
        view = reconcile(PipelineConfig(infinite_mode=True), fetches)
        assert _authors(view.display_comments) == ["bob"]

    def test_all_filtered_out_is_empty(self):
        fetches = FetchResults(flat_lazy=QueryResult(data=post_with_comments([make_comment(author="[deleted]")])))
        view = reconcile(PipelineConfig(), fetches)
        assert view.display_comments == []
        assert view.has_comments_to_show is False


class TestLoadingAndErrors:
    @pytest.mark.parametrize(
        "nested,infinite,loading_field",
        [
            (True, True, "nested_infinite"),
            (True, False, "nested_lazy"),
            (False, True, "flat_infinite"),
            (False, False, "flat_lazy"),
        ],
    )
    def test_only_active_combination_reports(self, nested, infinite, loading_field):
        config = PipelineConfig(nested_mode=nested, infinite_mode=infinite)
        error = RuntimeError("upstream down")
        for field_name in ("flat_lazy", "nested_lazy", "flat_infinite", "nested_infinite"):
            result_type = InfiniteQueryResult if "infinite" in field_name else QueryResult
            fetches = FetchResults(**{field_name: result_type(is_loading=True, is_error=True, error=error)})
            view = reconcile(config, fetches)
            active = field_name == loading_field
            assert view.show_loading is active
            assert view.is_error is active
            assert view.error is (error if active else None)


class TestPaginationControls:
    def test_nested_infinite_uses_nested_pager(self, fetches):
        view = reconcile(PipelineConfig(nested_mode=True, infinite_mode=True), fetches)
        assert view.current_fetch_next_page is fetches.nested_infinite.fetch_next_page
        assert view.current_has_next_page is True
        assert view.current_is_fetching_next_page is True

    def test_flat_infinite_uses_flat_pager(self, fetches):
        view = reconcile(PipelineConfig(infinite_mode=True), fetches)
        assert view.current_fetch_next_page is fetches.flat_infinite.fetch_next_page
        assert view.current_has_next_page is False
        assert view.current_is_fetching_next_page is False

    @pytest.mark.parametrize("nested", [True, False])
    def test_lazy_and_provided_have_no_pages(self, fetches, nested):
        for provided_comments in (None, [make_comment()]):
            view = reconcile(PipelineConfig(nested_mode=nested, provided_comments=provided_comments), fetches)
            assert view.current_fetch_next_page() is None
            assert view.current_has_next_page is False
            assert view.current_is_fetching_next_page is False


class TestDeterminism:
    @pytest.mark.parametrize("nested", [True, False])
    @pytest.mark.parametrize("infinite", [True, False])
    def test_repeated_calls_are_identical(self, fetches, nested, infinite):
        config = PipelineConfig(nested_mode=nested, infinite_mode=infinite)
        first = json.dumps(reconcile(config, fetches).to_dict(), sort_keys=True)
        second = json.dumps(reconcile(config, fetches).to_dict(), sort_keys=True)
        assert first == second

    def test_inputs_are_not_mutated(self, fetches):
        before = json.dumps(fetches.nested_lazy.data, sort_keys=True)
        reconcile(PipelineConfig(nested_mode=True), FetchResults(nested_lazy=fetches.nested_lazy))
        assert json.dumps(fetches.nested_lazy.data, sort_keys=True) == before

    def test_to_dict_renders_error_as_text(self):
        fetches = FetchResults(flat_lazy=QueryResult(is_error=True, error=RuntimeError("boom")))
        payload = reconcile(PipelineConfig(), fetches).to_dict()
        assert payload["is_error"] is True
        assert payload["error"] == "boom"
        assert "current_fetch_next_page" not in payload


class TestLazyFetchTarget:
    @pytest.mark.parametrize(
        "kwargs,expected",
        [
            ({"open": True}, FetchKind.FLAT),
            ({"open": True, "enable_nested_comments": True}, FetchKind.NESTED),
            ({"open": False}, None),
            ({"open": True, "enable_infinite_loading": True}, None),
            ({"open": True, "comments": []}, None),
            ({"open": True, "comments": [make_comment()]}, None),
        ],
    )
    def test_target(self, kwargs, expected):
        assert lazy_fetch_target(CommentOptions(permalink="/r/python/comments/abc", **kwargs)) is expected

    def test_options_map_to_pipeline_config(self):
        options = CommentOptions(
            permalink="/r/x/comments/1",
            enable_nested_comments=True,
            enable_infinite_loading=True,
            max_comment_depth=6,
        )
        assert options.to_pipeline_config() == PipelineConfig(nested_mode=True, infinite_mode=True, max_depth=6)
