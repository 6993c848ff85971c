"""
Reddit Comments Reader Web App
JSON endpoints serving filtered, nested and paginated Reddit comment threads
"""

import logging
import os

from flask import Flask

import config
from reddit_reader import RedditReader
from routes.api_routes import register_api_routes
from routes.error_routes import register_error_handlers
from services.cache import CommentQueryCache


def configure_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(reader=None, cache=None) -> Flask:
    """Build the Flask app; *reader* and *cache* can be injected for tests."""
    app = Flask(__name__)

    reader = reader or RedditReader(user_agent=config.USER_AGENT)
    cache = cache or CommentQueryCache(maxsize=config.COMMENT_CACHE_MAXSIZE, ttl=config.COMMENT_CACHE_TTL)

    register_api_routes(app, reader, cache)
    register_error_handlers(app)
    return app


if __name__ == '__main__':
    configure_logging()
    debug_mode = os.getenv('FLASK_DEBUG', '0') == '1'
    create_app().run(host='0.0.0.0', port=5000, debug=debug_mode)
