"""
Shared pytest fixtures for the comments reader test suite
"""

import pytest

from services.cache import CommentQueryCache
from tests.factories import FakeReader, make_comment, post_with_comments


@pytest.fixture
def cache():
    return CommentQueryCache(maxsize=16, ttl=60)


@pytest.fixture
def thread_payload():
    """Post response with a valid comment, a bot comment and a deleted one."""
    return post_with_comments(
        [
            make_comment(author="alice", body="first", id="a1"),
            make_comment(author="AutoModerator", body="Please read the rules", id="bot"),
            make_comment(author="[deleted]", body="[deleted]", id="gone"),
            make_comment(author="bob", body="second", id="b1"),
        ]
    )


@pytest.fixture
def paged_reader():
    """Two pages of top-level comments linked by the ``t1_c2`` cursor."""
    return FakeReader(
        {
            None: post_with_comments(
                [make_comment(author="alice", body="a", id="a"), make_comment(author="bob", body="b", id="b")],
                after="t1_c2",
            ),
            "t1_c2": post_with_comments([make_comment(author="carol", body="c", id="c")]),
        }
    )


@pytest.fixture
def flask_app(paged_reader, cache):
    from app import create_app

    app = create_app(reader=paged_reader, cache=cache)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def api_client(flask_app):
    return flask_app.test_client()
