# backend/core/container.py
"""
의존성 컨테이너 (Dependency Container)

객체 생성 로직을 중앙화합니다.
CLI는 이 컨테이너를 통해 저장소와 서비스를 생성합니다.
"""
from typing import Optional

from backend.repositories import CategoryRepository, EntryRepository, FeedRepository
from backend.services.feed_handler import FeedHandler


class Container:
    """의존성 컨테이너 - 서비스 인스턴스 생성 및 관리"""

    @staticmethod
    def get_feed_repository() -> FeedRepository:
        """FeedRepository 인스턴스 반환"""
        return FeedRepository()

    @staticmethod
    def get_entry_repository() -> EntryRepository:
        """EntryRepository 인스턴스 반환"""
        return EntryRepository()

    @staticmethod
    def get_category_repository() -> CategoryRepository:
        """CategoryRepository 인스턴스 반환"""
        return CategoryRepository()

    @staticmethod
    def get_feed_handler(
        feed_repo: Optional[FeedRepository] = None,
        entry_repo: Optional[EntryRepository] = None,
        category_repo: Optional[CategoryRepository] = None,
    ) -> FeedHandler:
        """FeedHandler 인스턴스 반환"""
        if feed_repo is None:
            feed_repo = Container.get_feed_repository()
        if entry_repo is None:
            entry_repo = Container.get_entry_repository()
        if category_repo is None:
            category_repo = Container.get_category_repository()
        return FeedHandler(feed_repo=feed_repo, entry_repo=entry_repo, category_repo=category_repo)
