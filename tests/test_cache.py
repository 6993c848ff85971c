"""
Tests for the fetched comment response cache
"""

import pytest

from services.cache import CommentQueryCache
from services.comment_reconciler import FetchKind

PERMALINK = "/r/python/comments/abc123/title"


def test_stores_and_returns_response(cache):
    payload = [{"kind": "Listing"}, {"kind": "Listing"}]
    assert not cache.has_response(FetchKind.FLAT, PERMALINK)

    cache.store_response(FetchKind.FLAT, PERMALINK, payload)

    assert cache.has_response(FetchKind.FLAT, PERMALINK)
    assert cache.get_response(FetchKind.FLAT, PERMALINK) is payload


def test_layouts_are_separate_slots(cache):
    cache.store_response(FetchKind.FLAT, PERMALINK, "flat")
    assert cache.get_response(FetchKind.NESTED, PERMALINK) is None
    assert not cache.has_response(FetchKind.NESTED, PERMALINK)


def test_oldest_response_is_evicted_when_full():
    cache = CommentQueryCache(maxsize=1, ttl=60)
    cache.store_response(FetchKind.FLAT, "/r/a/comments/one", "one")
    cache.store_response(FetchKind.FLAT, "/r/a/comments/two", "two")

    assert not cache.has_response(FetchKind.FLAT, "/r/a/comments/one")
    assert cache.stats() == {"responses": 1, "maxsize": 1, "ttl": 60}


@pytest.mark.parametrize("maxsize,ttl", [(0, 60), (10, 0)])
def test_rejects_non_positive_bounds(maxsize, ttl):
    with pytest.raises(ValueError):
        CommentQueryCache(maxsize=maxsize, ttl=ttl)
