"""Bounded, thread-safe store of fetched comment responses."""
from __future__ import annotations

import threading
from typing import Any, Optional

from cachetools import TTLCache

import config
from services.comment_reconciler import FetchKind


class CommentQueryCache:
    """Single-shot comment responses per post, one slot per fetch kind.

    The flat and nested queries of a post are cached separately, so opening a
    thread in one layout never serves the other layout's response. Entries
    expire after *ttl* seconds; the least recently used go first once
    *maxsize* posts are held. The app builds one and hands it to each
    comment session.
    """

    def __init__(self, maxsize: int = config.COMMENT_CACHE_MAXSIZE, ttl: int = config.COMMENT_CACHE_TTL):
        if maxsize <= 0 or ttl <= 0:
            raise ValueError("cache maxsize and ttl must be positive")
        self._responses: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.RLock()

    @staticmethod
    def _key(kind: FetchKind, permalink: str) -> tuple[str, str]:
        return (kind.value, permalink)

    def has_response(self, kind: FetchKind, permalink: str) -> bool:
        with self._lock:
            return self._key(kind, permalink) in self._responses

    def get_response(self, kind: FetchKind, permalink: str) -> Optional[Any]:
        with self._lock:
            return self._responses.get(self._key(kind, permalink))

    def store_response(self, kind: FetchKind, permalink: str, response: Any) -> None:
        with self._lock:
            self._responses[self._key(kind, permalink)] = response

    def stats(self) -> dict:
        with self._lock:
            return {
                "responses": self._responses.currsize,
                "maxsize": self._responses.maxsize,
                "ttl": self._responses.ttl,
            }
