"""
Configuration file for the Reddit comments reader
Supports environment variable overrides for Docker/production deployment
"""

import os

# User agent for Reddit API requests
USER_AGENT = os.getenv("USER_AGENT", "RedditCommentsReader/1.0 (Comment pipeline)")
REDDIT_BASE_URL = os.getenv("REDDIT_BASE_URL", "https://www.reddit.com").rstrip("/")

# API settings
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "10"))  # seconds

# Back-off after a 429 from Reddit (seconds)
RATE_LIMIT_RETRY_DELAY = float(os.getenv("RATE_LIMIT_RETRY_DELAY", "2.0"))

# Comment fetching
COMMENTS_LIMIT = int(os.getenv("COMMENTS_LIMIT", "200"))  # single-shot fetch
COMMENTS_PAGE_LIMIT = int(os.getenv("COMMENTS_PAGE_LIMIT", "100"))  # Reddit's max per page
DEFAULT_COMMENT_SORT = os.getenv("DEFAULT_COMMENT_SORT", "confidence")
MAX_COMMENT_PAGES = int(os.getenv("MAX_COMMENT_PAGES", "20"))

# Nesting
DEFAULT_MAX_COMMENT_DEPTH = int(os.getenv("DEFAULT_MAX_COMMENT_DEPTH", "4"))
MAX_COMMENT_DEPTH_LIMIT = int(os.getenv("MAX_COMMENT_DEPTH_LIMIT", "50"))

# Account whose comments are always hidden
AUTOMODERATOR_NAME = os.getenv("AUTOMODERATOR_NAME", "AutoModerator")

# Fetched comment cache settings
COMMENT_CACHE_TTL = int(os.getenv("COMMENT_CACHE_TTL", "300"))  # seconds
COMMENT_CACHE_MAXSIZE = int(os.getenv("COMMENT_CACHE_MAXSIZE", "256"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


if not 0 <= DEFAULT_MAX_COMMENT_DEPTH <= MAX_COMMENT_DEPTH_LIMIT:
    raise ValueError(
        f"DEFAULT_MAX_COMMENT_DEPTH must be between 0 and {MAX_COMMENT_DEPTH_LIMIT}, "
        f"got {DEFAULT_MAX_COMMENT_DEPTH}"
    )
