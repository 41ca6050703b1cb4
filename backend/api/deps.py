# backend/api/deps.py
"""FastAPI 의존성 주입"""
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from backend.repositories import CategoryRepository, EntryRepository, FeedRepository
from backend.services.feed_handler import FeedHandler


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> int:
    """
    인증 게이트웨이가 전달한 사용자 ID (X-User-ID 헤더).

    헤더가 없거나 양의 정수가 아니면 요청 검증(400)이 아닌 인증 실패(401)로 처리한다.
    """
    try:
        user_id = int(x_user_id) if x_user_id is not None else 0
    except ValueError:
        user_id = 0
    if user_id <= 0:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-ID header required")
    return user_id


def get_feed_repository() -> FeedRepository:
    """FeedRepository 인스턴스 반환"""
    return FeedRepository()


def get_entry_repository() -> EntryRepository:
    """EntryRepository 인스턴스 반환"""
    return EntryRepository()


def get_category_repository() -> CategoryRepository:
    """CategoryRepository 인스턴스 반환"""
    return CategoryRepository()


def get_feed_handler(
    feed_repo: FeedRepository = Depends(get_feed_repository),
    entry_repo: EntryRepository = Depends(get_entry_repository),
    category_repo: CategoryRepository = Depends(get_category_repository),
) -> FeedHandler:
    """FeedHandler 인스턴스 반환"""
    return FeedHandler(feed_repo=feed_repo, entry_repo=entry_repo, category_repo=category_repo)
