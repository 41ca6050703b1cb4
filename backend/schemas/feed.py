# backend/schemas/feed.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(BaseModel):
    id: int = Field(..., description="카테고리 ID")
    title: Optional[str] = Field(None, description="카테고리 제목")


class Feed(BaseModel):
    id: int = Field(0, description="피드 ID (저장소가 부여)")
    user_id: int = Field(..., description="소유 사용자 ID")
    feed_url: str = Field(..., description="피드 URL")
    site_url: Optional[str] = Field(None, description="사이트 URL")
    title: Optional[str] = Field(None, description="피드 제목")
    category: Optional[Category] = None
    checked_at: Optional[datetime] = Field(None, description="마지막 갱신 시각")
    etag_header: Optional[str] = None
    last_modified_header: Optional[str] = None
    parsing_error_count: int = 0
    parsing_error_msg: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    def merge(self, patch: FeedModification) -> Feed:
        """
        부분 수정 페이로드를 덮어쓴 새 Feed 반환.

        비어 있지 않은 필드만 반영하고 나머지는 그대로 둔다.
        id / user_id 는 절대 변경되지 않으며, 원본 객체는 수정하지 않는다.
        """
        changes = {}
        if patch.title and patch.title != self.title:
            changes["title"] = patch.title
        if patch.site_url and patch.site_url != self.site_url:
            changes["site_url"] = patch.site_url
        if patch.feed_url and patch.feed_url != self.feed_url:
            changes["feed_url"] = patch.feed_url
        if patch.category_id and (self.category is None or patch.category_id != self.category.id):
            changes["category"] = Category(id=patch.category_id)
        return self.model_copy(update=changes, deep=True)


def _check_http_url(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    pr = urlparse(v)
    if pr.scheme not in ("http", "https") or not pr.netloc:
        raise ValueError("must be an absolute http(s) URL")
    return v


class FeedCreate(BaseModel):
    feed_url: str = Field(..., description="구독할 피드 URL")
    category_id: Optional[int] = Field(None, gt=0, description="카테고리 ID")

    @field_validator("feed_url")
    @classmethod
    def check_feed_url(cls, v: str) -> str:
        v = _check_http_url(v)
        if v is None:
            raise ValueError("must not be empty")
        return v


class FeedModification(BaseModel):
    """부분 수정 페이로드. 모든 필드 선택, 빈 값은 무시"""
    feed_url: Optional[str] = None
    site_url: Optional[str] = None
    title: Optional[str] = None
    category_id: Optional[int] = Field(None, ge=0)

    @field_validator("feed_url", "site_url")
    @classmethod
    def check_urls(cls, v: Optional[str]) -> Optional[str]:
        return _check_http_url(v)
