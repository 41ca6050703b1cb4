# backend/utils/feed_parser.py
from __future__ import annotations
import hashlib
from datetime import datetime, timezone
from typing import Optional

import feedparser
from pydantic import BaseModel

from backend.core.exceptions import FeedParseError
from backend.schemas.entry import Entry


class ParsedFeed(BaseModel):
    title: Optional[str] = None
    site_url: Optional[str] = None
    entries: list[Entry] = []


def _to_dt(e) -> Optional[datetime]:
    for k in ("published_parsed", "updated_parsed"):
        t = e.get(k)
        if t:
            return datetime(*t[:6], tzinfo=timezone.utc)
    return None


def entry_hash(feed_url: str, e) -> str:
    """guid → link → (feed_url|title|published) 순으로 고유 키 생성"""
    key = e.get("id") or e.get("link") or f"{feed_url}|{e.get('title')}|{e.get('published_parsed')}"
    return hashlib.sha256(key.encode("utf-8", "ignore")).hexdigest()


def _content(e) -> Optional[str]:
    blocks = e.get("content") or []
    if blocks:
        return blocks[0].get("value")
    return e.get("summary")


def parse_feed(content: bytes, feed_url: str) -> ParsedFeed:
    """RSS/Atom 문서 파싱. 피드 정보도 엔트리도 없으면 FeedParseError"""
    parsed = feedparser.parse(content)
    if parsed.bozo and not parsed.entries and not parsed.feed.get("title"):
        raise FeedParseError(f"unable to parse {feed_url}: {parsed.get('bozo_exception')}")

    entries = [
        Entry(
            hash=entry_hash(feed_url, e),
            title=e.get("title"),
            url=e.get("link"),
            author=e.get("author"),
            content=_content(e),
            published=_to_dt(e),
        )
        for e in parsed.entries
    ]
    return ParsedFeed(
        title=parsed.feed.get("title") or feed_url,
        site_url=parsed.feed.get("link") or feed_url,
        entries=entries,
    )
