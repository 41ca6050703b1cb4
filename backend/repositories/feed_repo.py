# backend/repositories/feed_repo.py
import logging
from typing import List, Dict, Any, Optional

from pymongo import ASCENDING
from pymongo.database import Database

from backend.core.exceptions import CategoryNotFoundException, FeedNotFoundException
from backend.schemas.feed import Category, Feed
from .base import BaseRepository, storage_errors

logger = logging.getLogger(__name__)


def _to_document(feed: Feed) -> Dict[str, Any]:
    doc = feed.model_dump(exclude={"id"})
    doc["_id"] = feed.id
    return doc


def _to_feed(doc: Dict[str, Any]) -> Feed:
    data = dict(doc)
    data["id"] = data.pop("_id")
    return Feed.model_validate(data)


class FeedRepository(BaseRepository):
    """
    사용자별 피드 저장소.

    모든 조회/수정/삭제는 user_id 를 필터로 포함한다.
    다른 사용자의 피드는 존재하지 않는 것과 동일하게 취급된다.
    """

    def __init__(self, db: Optional[Database] = None):
        super().__init__("feeds", db=db)

    def create_feed(self, feed: Feed) -> Feed:
        """새 피드 저장 후 ID가 부여된 피드 반환"""
        with storage_errors("create_feed"):
            created = feed.model_copy(update={"id": self.next_sequence("feeds")})
            self.collection.insert_one(_to_document(created))
        logger.info(f"피드 생성: user={created.user_id} id={created.id} url={created.feed_url}")
        return created

    def get_feed_by_id(self, user_id: int, feed_id: int) -> Optional[Feed]:
        with storage_errors("get_feed_by_id"):
            doc = self.collection.find_one({"_id": feed_id, "user_id": user_id})
        return _to_feed(doc) if doc else None

    def get_feeds(self, user_id: int) -> List[Feed]:
        """사용자 피드 목록 (제목, ID 순)"""
        with storage_errors("get_feeds"):
            cursor = self.collection.find({"user_id": user_id}).sort(
                [("title", ASCENDING), ("_id", ASCENDING)]
            )
            return [_to_feed(doc) for doc in cursor]

    def feed_exists(self, user_id: int, feed_id: int) -> bool:
        with storage_errors("feed_exists"):
            return self.collection.count_documents({"_id": feed_id, "user_id": user_id}, limit=1) > 0

    def feed_url_exists(self, user_id: int, feed_url: str) -> bool:
        with storage_errors("feed_url_exists"):
            return self.collection.count_documents({"user_id": user_id, "feed_url": feed_url}, limit=1) > 0

    def update_feed(self, feed: Feed) -> Feed:
        """피드 저장 (id, user_id 로 대상 지정). 실제로 기록한 피드 반환"""
        with storage_errors("update_feed"):
            # 병합으로 바뀐 카테고리는 ID만 가지므로 제목을 채운다
            if feed.category is not None and feed.category.title is None:
                cat = self.db["categories"].find_one({"_id": feed.category.id, "user_id": feed.user_id})
                if cat is None:
                    raise CategoryNotFoundException(f"category {feed.category.id} not found")
                feed = feed.model_copy(update={"category": Category(id=cat["_id"], title=cat.get("title"))})
            doc = _to_document(feed)
            doc.pop("_id")
            result = self.collection.update_one({"_id": feed.id, "user_id": feed.user_id}, {"$set": doc})
        if result.matched_count == 0:
            raise FeedNotFoundException(f"feed {feed.id} not found")
        return feed

    def remove_feed(self, user_id: int, feed_id: int) -> bool:
        """피드 및 엔트리 삭제. 실제로 삭제했으면 True"""
        with storage_errors("remove_feed"):
            result = self.collection.delete_one({"_id": feed_id, "user_id": user_id})
            if result.deleted_count == 0:
                return False
            self.db["entries"].delete_many({"feed_id": feed_id, "user_id": user_id})
        logger.info(f"피드 삭제: user={user_id} id={feed_id}")
        return True

    def create_indexes(self):
        with storage_errors("create_indexes"):
            self.collection.create_index([("user_id", ASCENDING), ("title", ASCENDING)])
            self.collection.create_index([("user_id", ASCENDING), ("feed_url", ASCENDING)], unique=True)
