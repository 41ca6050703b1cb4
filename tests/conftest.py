"""Shared fixtures for the feed API tests."""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from backend.api.deps import get_feed_handler, get_feed_repository
from backend.main import app
from backend.repositories import FeedRepository
from backend.schemas.feed import Category, Feed
from backend.services.feed_handler import FeedHandler

USER_ID = 1
HEADERS = {"X-User-ID": str(USER_ID)}


@pytest.fixture
def feed_repo():
    repo = Mock(spec=FeedRepository)
    # 저장소는 기록한 피드를 그대로 돌려준다
    repo.update_feed.side_effect = lambda feed: feed
    return repo


@pytest.fixture
def feed_handler():
    return Mock(spec=FeedHandler)


@pytest.fixture
def client(feed_repo, feed_handler):
    app.dependency_overrides[get_feed_repository] = lambda: feed_repo
    app.dependency_overrides[get_feed_handler] = lambda: feed_handler
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_feed():
    return Feed(
        id=7,
        user_id=USER_ID,
        feed_url="http://a",
        site_url="http://a",
        title="A",
        category=Category(id=1, title="Tech"),
    )
