# backend/services/feed_handler.py
"""피드 생성 및 갱신 서비스 (다운로드 → 파싱 → 저장)"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from backend.core.exceptions import (
    CategoryNotFoundException, FeedAlreadyExistsException, FeedFetchError,
    FeedNotFoundException, FeedParseError, StorageError,
)
from backend.repositories import CategoryRepository, EntryRepository, FeedRepository
from backend.schemas.entry import Entry
from backend.schemas.feed import Feed
from backend.utils.feed_parser import parse_feed
from backend.utils.http_client import FetchResult, fetch_feed

logger = logging.getLogger(__name__)


class FeedHandler:
    """피드 수집 서비스"""

    def __init__(
        self,
        feed_repo: Optional[FeedRepository] = None,
        entry_repo: Optional[EntryRepository] = None,
        category_repo: Optional[CategoryRepository] = None,
        fetcher: Callable[..., FetchResult] = fetch_feed,
    ):
        self.feed_repo = feed_repo or FeedRepository()
        self.entry_repo = entry_repo or EntryRepository()
        self.category_repo = category_repo or CategoryRepository()
        self.fetcher = fetcher

    def _store_entries(self, feed: Feed, entries: List[Entry]) -> int:
        owned = [e.model_copy(update={"feed_id": feed.id, "user_id": feed.user_id}) for e in entries]
        return self.entry_repo.upsert_many(owned)

    def create_feed(self, user_id: int, category_id: Optional[int], feed_url: str) -> Feed:
        """피드 구독 생성 및 최초 수집"""
        logger.info(f"피드 생성 요청: user={user_id} url={feed_url}")

        category = None
        if category_id:
            category = self.category_repo.get_category(user_id, category_id)
            if category is None:
                raise CategoryNotFoundException(f"category {category_id} not found")

        if self.feed_repo.feed_url_exists(user_id, feed_url):
            raise FeedAlreadyExistsException(f"feed already exists: {feed_url}")

        result = self.fetcher(feed_url)
        parsed = parse_feed(result.content, feed_url)

        feed = self.feed_repo.create_feed(Feed(
            user_id=user_id,
            feed_url=feed_url,
            site_url=parsed.site_url,
            title=parsed.title,
            category=category,
            checked_at=datetime.now(timezone.utc),
            etag_header=result.etag,
            last_modified_header=result.last_modified,
        ))
        try:
            stored = self._store_entries(feed, parsed.entries)
        except StorageError:
            # 피드만 남으면 같은 URL 재시도가 중복으로 거부되므로 되돌린다
            logger.error(f"엔트리 저장 실패, 피드 생성 취소: id={feed.id}")
            self.feed_repo.remove_feed(user_id, feed.id)
            raise
        logger.info(f"피드 생성 완료: id={feed.id}, 엔트리 {stored}개")
        return feed

    def refresh_feed(self, user_id: int, feed_id: int) -> None:
        """
        피드 갱신 (동기 실행).

        304 응답이면 checked_at 만 갱신한다.
        다운로드/파싱 실패 시 오류 횟수와 메시지를 기록한 뒤 예외를 다시 발생시킨다.
        """
        feed = self.feed_repo.get_feed_by_id(user_id, feed_id)
        if feed is None:
            raise FeedNotFoundException(f"feed {feed_id} not found")

        now = datetime.now(timezone.utc)
        try:
            result = self.fetcher(
                feed.feed_url,
                etag=feed.etag_header,
                last_modified=feed.last_modified_header,
            )
            if result.not_modified:
                logger.debug(f"피드 변경 없음 (304): id={feed.id}")
                self.feed_repo.update_feed(feed.model_copy(update={"checked_at": now}))
                return
            parsed = parse_feed(result.content, feed.feed_url)
        except (FeedFetchError, FeedParseError) as e:
            logger.warning(f"피드 갱신 실패: id={feed.id} - {str(e)}")
            self.feed_repo.update_feed(feed.model_copy(update={
                "checked_at": now,
                "parsing_error_count": feed.parsing_error_count + 1,
                "parsing_error_msg": str(e),
            }))
            raise

        stored = self._store_entries(feed, parsed.entries)
        self.feed_repo.update_feed(feed.model_copy(update={
            "checked_at": now,
            "etag_header": result.etag,
            "last_modified_header": result.last_modified,
            "parsing_error_count": 0,
            "parsing_error_msg": None,
        }))
        logger.info(f"피드 갱신 완료: id={feed.id}, 엔트리 {stored}개")
