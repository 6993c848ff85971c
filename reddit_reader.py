"""
Reddit Reader - fetches comment listings from the Reddit JSON API
"""

import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import requests

import config

logger = logging.getLogger(__name__)


class CommentFetchError(Exception):
    """Raised when Reddit cannot be reached or answers with something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def normalize_permalink(permalink: str) -> str:
    """
    Reduce a permalink or full Reddit URL to its path

    Args:
        permalink: e.g. "https://www.reddit.com/r/python/comments/abc123/title/"
            or "/r/python/comments/abc123/title.json"

    Returns:
        Path with a leading slash and no trailing ".json" or slash
    """
    path = urlsplit(permalink.strip()).path if "://" in permalink else permalink.strip()
    path = path.split("?", 1)[0]
    if path.endswith(".json"):
        path = path[: -len(".json")]
    path = path.rstrip("/")
    if not path.startswith("/"):
        path = "/" + path
    return path


class RedditReader:
    """Fetches comment listings from the Reddit JSON API"""

    def __init__(
        self,
        user_agent: str = config.USER_AGENT,
        base_url: str = config.REDDIT_BASE_URL,
        timeout: int = config.REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the Reddit reader

        Args:
            user_agent: User agent string for Reddit API requests
            base_url: Scheme and host of the API
            timeout: Per-request timeout in seconds
            session: Optional pre-built requests session
        """
        self.user_agent = user_agent
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {'User-Agent': user_agent}
        self.session = session or requests.Session()

    def _get_json(self, url: str, params: Optional[Dict] = None) -> Any:
        """Internal helper with basic 429 backoff."""
        try:
            response = self.session.get(url, headers=self.headers, params=params, timeout=self.timeout)
            if response.status_code == 429:
                logger.info("Rate limited by Reddit, retrying %s in %.1fs", url, config.RATE_LIMIT_RETRY_DELAY)
                time.sleep(config.RATE_LIMIT_RETRY_DELAY)
                response = self.session.get(url, headers=self.headers, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise CommentFetchError(f"Reddit returned HTTP {status} for {url}", status_code=status) from e
        except requests.exceptions.RequestException as e:
            raise CommentFetchError(f"Error fetching {url}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise CommentFetchError(f"Reddit returned a non-JSON body for {url}") from e

    def fetch_post_comments(
        self,
        permalink: str,
        limit: int = config.COMMENTS_LIMIT,
        after: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> Any:
        """
        Fetch comments for a specific post

        Args:
            permalink: Post permalink (e.g. "/r/python/comments/abc123/title/")
            limit: Number of comments to fetch
            after: Pagination cursor from the previous page
            sort: Reddit comment sort ("confidence", "top", "new", ...)

        Returns:
            JSON response containing [post listing, comments listing]

        Raises:
            CommentFetchError: on transport errors, non-2xx answers or bad JSON
        """
        url = f"{self.base_url}{normalize_permalink(permalink)}.json"
        params: Dict[str, Any] = {'limit': limit, 'raw_json': 1}
        if sort:
            params['sort'] = sort
        if after:
            params['after'] = after

        return self._get_json(url, params=params)
