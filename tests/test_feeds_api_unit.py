"""Unit tests for the feed resource endpoints."""

import logging
from unittest.mock import MagicMock, Mock

import pytest
from fastapi.testclient import TestClient

from backend.api.deps import get_feed_repository
from backend.core.exceptions import FeedFetchError, FeedNotFoundException, StorageError
from backend.main import app
from backend.repositories import FeedRepository
from backend.schemas.feed import Category, Feed

from conftest import HEADERS, USER_ID

FEEDS_URL = "/api/v1/feeds"


class TestCreateFeed:
    """POST /feeds"""

    def test_returns_201_with_created_feed(self, client, feed_handler, sample_feed):
        feed_handler.create_feed.return_value = sample_feed

        resp = client.post(
            FEEDS_URL,
            json={"feed_url": "http://example.org/feed.xml", "category_id": 1},
            headers=HEADERS,
        )

        assert resp.status_code == 201
        assert resp.json() == sample_feed.model_dump(mode="json")
        feed_handler.create_feed.assert_called_once_with(USER_ID, 1, "http://example.org/feed.xml")

    def test_category_is_optional(self, client, feed_handler, sample_feed):
        feed_handler.create_feed.return_value = sample_feed

        resp = client.post(FEEDS_URL, json={"feed_url": "http://example.org/feed.xml"}, headers=HEADERS)

        assert resp.status_code == 201
        feed_handler.create_feed.assert_called_once_with(USER_ID, None, "http://example.org/feed.xml")

    def test_invalid_json_returns_400_without_calling_handler(self, client, feed_handler):
        resp = client.post(
            FEEDS_URL,
            content=b'{"feed_url": ',
            headers={**HEADERS, "Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        assert resp.json() == {"error_message": "Malformed JSON body"}
        assert feed_handler.method_calls == []

    def test_missing_feed_url_returns_400(self, client, feed_handler):
        resp = client.post(FEEDS_URL, json={"category_id": 1}, headers=HEADERS)

        assert resp.status_code == 400
        assert resp.json()["error_message"].startswith("feed_url")
        assert feed_handler.method_calls == []

    def test_non_url_returns_400(self, client, feed_handler):
        resp = client.post(FEEDS_URL, json={"feed_url": "not a url"}, headers=HEADERS)

        assert resp.status_code == 400
        assert feed_handler.method_calls == []

    def test_feed_url_is_passed_as_submitted(self, client, feed_handler, sample_feed):
        # 수정 페이로드와 같은 규칙: 공백만 제거하고 경로는 덧붙이지 않는다
        feed_handler.create_feed.return_value = sample_feed

        resp = client.post(FEEDS_URL, json={"feed_url": " http://example.org "}, headers=HEADERS)

        assert resp.status_code == 201
        feed_handler.create_feed.assert_called_once_with(USER_ID, None, "http://example.org")

    def test_blank_feed_url_returns_400(self, client, feed_handler):
        resp = client.post(FEEDS_URL, json={"feed_url": "  "}, headers=HEADERS)

        assert resp.status_code == 400
        assert feed_handler.method_calls == []

    def test_handler_failure_returns_generic_500(self, client, feed_handler, caplog):
        caplog.set_level(logging.ERROR)
        feed_handler.create_feed.side_effect = FeedFetchError("connection refused by 10.0.0.1")

        resp = client.post(FEEDS_URL, json={"feed_url": "http://example.org/feed.xml"}, headers=HEADERS)

        assert resp.status_code == 500
        assert resp.json() == {"error_message": "Unable to create this feed"}
        assert "10.0.0.1" not in resp.text
        # 원인은 서버 로그에만 남는다
        assert "10.0.0.1" in caplog.text


class TestRefreshFeed:
    """PUT /feeds/{feed_id}/refresh"""

    def test_returns_204_with_empty_body(self, client, feed_handler):
        resp = client.put(f"{FEEDS_URL}/7/refresh", headers=HEADERS)

        assert resp.status_code == 204
        assert resp.content == b""
        feed_handler.refresh_feed.assert_called_once_with(USER_ID, 7)

    def test_malformed_feed_id_returns_400(self, client, feed_handler):
        resp = client.put(f"{FEEDS_URL}/abc/refresh", headers=HEADERS)

        assert resp.status_code == 400
        assert feed_handler.method_calls == []

    def test_failure_returns_fixed_message(self, client, feed_handler):
        feed_handler.refresh_feed.side_effect = FeedFetchError("HTTP 503 from upstream")

        resp = client.put(f"{FEEDS_URL}/7/refresh", headers=HEADERS)

        assert resp.status_code == 500
        assert resp.json() == {"error_message": "Unable to refresh this feed"}
        assert "503" not in resp.text

    def test_missing_feed_is_reported_as_refresh_failure(self, client, feed_handler):
        feed_handler.refresh_feed.side_effect = FeedNotFoundException("feed 7 not found")

        resp = client.put(f"{FEEDS_URL}/7/refresh", headers=HEADERS)

        assert resp.status_code == 500
        assert resp.json() == {"error_message": "Unable to refresh this feed"}


class TestUpdateFeed:
    """PUT /feeds/{feed_id}"""

    def test_merges_category_into_existing_feed(self, client, feed_repo, sample_feed):
        feed_repo.get_feed_by_id.return_value = sample_feed

        resp = client.put(f"{FEEDS_URL}/7", json={"category_id": 2}, headers=HEADERS)

        assert resp.status_code == 201
        body = resp.json()
        assert body["feed_url"] == "http://a"
        assert body["category"]["id"] == 2
        feed_repo.get_feed_by_id.assert_called_once_with(USER_ID, 7)
        persisted = feed_repo.update_feed.call_args.args[0]
        assert persisted.feed_url == "http://a"
        assert persisted.category.id == 2
        # 조회한 원본은 수정되지 않는다
        assert sample_feed.category.id == 1

    def test_returns_feed_as_persisted(self, client, feed_repo, sample_feed):
        feed_repo.get_feed_by_id.return_value = sample_feed
        feed_repo.update_feed.side_effect = lambda feed: feed.model_copy(
            update={"category": Category(id=2, title="News")}
        )

        resp = client.put(f"{FEEDS_URL}/7", json={"category_id": 2}, headers=HEADERS)

        assert resp.status_code == 201
        assert resp.json()["category"] == {"id": 2, "title": "News"}

    def test_empty_payload_is_a_no_op(self, client, feed_repo, sample_feed):
        feed_repo.get_feed_by_id.return_value = sample_feed

        resp = client.put(f"{FEEDS_URL}/7", json={}, headers=HEADERS)

        assert resp.status_code == 201
        assert resp.json() == sample_feed.model_dump(mode="json")
        feed_repo.update_feed.assert_called_once_with(sample_feed)

    def test_payload_cannot_retarget_identity(self, client, feed_repo, sample_feed):
        feed_repo.get_feed_by_id.return_value = sample_feed

        resp = client.put(
            f"{FEEDS_URL}/7",
            json={"id": 99, "user_id": 2, "title": "Renamed"},
            headers=HEADERS,
        )

        assert resp.status_code == 201
        persisted = feed_repo.update_feed.call_args.args[0]
        assert persisted.id == 7
        assert persisted.user_id == USER_ID
        assert persisted.title == "Renamed"

    def test_unknown_feed_returns_404(self, client, feed_repo):
        feed_repo.get_feed_by_id.return_value = None

        resp = client.put(f"{FEEDS_URL}/7", json={"title": "x"}, headers=HEADERS)

        assert resp.status_code == 404
        assert resp.json() == {"error_message": "Feed not found"}
        feed_repo.update_feed.assert_not_called()

    def test_malformed_feed_id_returns_400(self, client, feed_repo):
        resp = client.put(f"{FEEDS_URL}/x1", json={"title": "x"}, headers=HEADERS)

        assert resp.status_code == 400
        assert feed_repo.method_calls == []

    def test_malformed_payload_returns_400(self, client, feed_repo):
        resp = client.put(f"{FEEDS_URL}/7", json={"feed_url": "ftp://nope"}, headers=HEADERS)

        assert resp.status_code == 400
        assert feed_repo.method_calls == []

    def test_persistence_failure_returns_500(self, client, feed_repo, sample_feed):
        feed_repo.get_feed_by_id.return_value = sample_feed
        feed_repo.update_feed.side_effect = StorageError("update_feed failed")

        resp = client.put(f"{FEEDS_URL}/7", json={"title": "x"}, headers=HEADERS)

        assert resp.status_code == 500
        assert resp.json() == {"error_message": "Unable to update this feed"}

    def test_feed_removed_between_lookup_and_update_returns_404(self, client, feed_repo, sample_feed):
        feed_repo.get_feed_by_id.return_value = sample_feed
        feed_repo.update_feed.side_effect = FeedNotFoundException("feed 7 not found")

        resp = client.put(f"{FEEDS_URL}/7", json={"title": "x"}, headers=HEADERS)

        assert resp.status_code == 404


class TestGetFeeds:
    """GET /feeds"""

    def test_empty_list_returns_200(self, client, feed_repo):
        feed_repo.get_feeds.return_value = []

        resp = client.get(FEEDS_URL, headers=HEADERS)

        assert resp.status_code == 200
        assert resp.json() == []
        feed_repo.get_feeds.assert_called_once_with(USER_ID)

    def test_returns_feeds_in_store_order(self, client, feed_repo, sample_feed):
        other = Feed(id=3, user_id=USER_ID, feed_url="http://b", title="B")
        feed_repo.get_feeds.return_value = [sample_feed, other]

        resp = client.get(FEEDS_URL, headers=HEADERS)

        assert resp.status_code == 200
        assert [f["id"] for f in resp.json()] == [7, 3]

    def test_store_failure_returns_500(self, client, feed_repo):
        feed_repo.get_feeds.side_effect = StorageError("get_feeds failed")

        resp = client.get(FEEDS_URL, headers=HEADERS)

        assert resp.status_code == 500
        assert resp.json() == {"error_message": "Unable to fetch feeds from the database"}


class TestGetFeed:
    """GET /feeds/{feed_id}"""

    def test_returns_owned_feed(self, client, feed_repo, sample_feed):
        feed_repo.get_feed_by_id.return_value = sample_feed

        resp = client.get(f"{FEEDS_URL}/7", headers=HEADERS)

        assert resp.status_code == 200
        assert resp.json() == sample_feed.model_dump(mode="json")
        feed_repo.get_feed_by_id.assert_called_once_with(USER_ID, 7)

    def test_feed_of_another_user_returns_404(self, client, feed_repo):
        # 저장소는 (user_id, feed_id) 로 조회하므로 다른 사용자의 피드는 None
        feed_repo.get_feed_by_id.return_value = None

        resp = client.get(f"{FEEDS_URL}/7", headers={"X-User-ID": "2"})

        assert resp.status_code == 404
        assert resp.json() == {"error_message": "Feed not found"}
        feed_repo.get_feed_by_id.assert_called_once_with(2, 7)

    def test_non_positive_feed_id_returns_400(self, client, feed_repo):
        resp = client.get(f"{FEEDS_URL}/0", headers=HEADERS)

        assert resp.status_code == 400
        assert feed_repo.method_calls == []

    def test_store_failure_returns_500(self, client, feed_repo):
        feed_repo.get_feed_by_id.side_effect = StorageError("get_feed_by_id failed")

        resp = client.get(f"{FEEDS_URL}/7", headers=HEADERS)

        assert resp.status_code == 500
        assert resp.json() == {"error_message": "Unable to fetch this feed"}


class TestRemoveFeed:
    """DELETE /feeds/{feed_id}"""

    def test_returns_204(self, client, feed_repo):
        feed_repo.feed_exists.return_value = True
        feed_repo.remove_feed.return_value = True

        resp = client.delete(f"{FEEDS_URL}/7", headers=HEADERS)

        assert resp.status_code == 204
        assert resp.content == b""
        feed_repo.feed_exists.assert_called_once_with(USER_ID, 7)
        feed_repo.remove_feed.assert_called_once_with(USER_ID, 7)

    def test_unknown_feed_returns_404(self, client, feed_repo):
        feed_repo.feed_exists.return_value = False

        resp = client.delete(f"{FEEDS_URL}/7", headers=HEADERS)

        assert resp.status_code == 404
        feed_repo.remove_feed.assert_not_called()

    def test_concurrent_delete_returns_404(self, client, feed_repo):
        feed_repo.feed_exists.return_value = True
        feed_repo.remove_feed.return_value = False

        resp = client.delete(f"{FEEDS_URL}/7", headers=HEADERS)

        assert resp.status_code == 404

    def test_malformed_feed_id_returns_400(self, client, feed_repo):
        resp = client.delete(f"{FEEDS_URL}/1.5", headers=HEADERS)

        assert resp.status_code == 400
        assert feed_repo.method_calls == []

    def test_removal_failure_returns_500(self, client, feed_repo):
        feed_repo.feed_exists.return_value = True
        feed_repo.remove_feed.side_effect = StorageError("remove_feed failed")

        resp = client.delete(f"{FEEDS_URL}/7", headers=HEADERS)

        assert resp.status_code == 500
        assert resp.json() == {"error_message": "Unable to remove this feed"}


class TestUpdateThenGet:
    """PUT 응답 본문과 직후 GET 결과가 같은 저장 문서를 보여준다"""

    @pytest.fixture
    def stored(self):
        return {
            7: {
                "_id": 7,
                "user_id": USER_ID,
                "feed_url": "http://a",
                "site_url": "http://a",
                "title": "A",
                "category": {"id": 1, "title": "One"},
                "checked_at": None,
                "etag_header": None,
                "last_modified_header": None,
                "parsing_error_count": 0,
                "parsing_error_msg": None,
            }
        }

    @pytest.fixture
    def repo_client(self, stored):
        feeds = MagicMock()

        def find_one(filt):
            doc = stored.get(filt["_id"])
            return dict(doc) if doc and doc["user_id"] == filt["user_id"] else None

        def update_one(filt, update):
            doc = stored.get(filt["_id"])
            if doc is None or doc["user_id"] != filt["user_id"]:
                return Mock(matched_count=0)
            doc.update(update["$set"])
            return Mock(matched_count=1)

        feeds.find_one.side_effect = find_one
        feeds.update_one.side_effect = update_one
        categories = MagicMock()
        categories.find_one.side_effect = lambda filt: {
            1: {"_id": 1, "user_id": USER_ID, "title": "One"},
            2: {"_id": 2, "user_id": USER_ID, "title": "Two"},
        }.get(filt["_id"])
        db = MagicMock()
        db.__getitem__.side_effect = {"feeds": feeds, "categories": categories}.__getitem__

        app.dependency_overrides[get_feed_repository] = lambda: FeedRepository(db=db)
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_category_change_body_matches_stored_feed(self, repo_client, stored):
        put = repo_client.put(f"{FEEDS_URL}/7", json={"category_id": 2}, headers=HEADERS)
        get = repo_client.get(f"{FEEDS_URL}/7", headers=HEADERS)

        assert put.status_code == 201
        assert get.status_code == 200
        assert put.json() == get.json()
        assert put.json()["category"] == {"id": 2, "title": "Two"}
        assert stored[7]["category"] == {"id": 2, "title": "Two"}


class TestCallerIdentity:
    def test_missing_user_header_is_rejected(self, client, feed_repo):
        resp = client.get(FEEDS_URL)

        assert resp.status_code == 401
        assert feed_repo.method_calls == []

    @pytest.mark.parametrize("value", ["abc", "0", "-3", "1.5"])
    def test_invalid_user_header_is_rejected(self, client, feed_repo, value):
        resp = client.get(FEEDS_URL, headers={"X-User-ID": value})

        assert resp.status_code == 401
        assert feed_repo.method_calls == []
