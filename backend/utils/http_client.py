# backend/utils/http_client.py
"""피드 다운로드 (조건부 GET 지원)"""
import logging
from typing import Optional

import requests
from pydantic import BaseModel

from backend.core.config import FEED_FETCH_TIMEOUT, FEED_USER_AGENT
from backend.core.exceptions import FeedFetchError

logger = logging.getLogger(__name__)


class FetchResult(BaseModel):
    url: str
    status_code: int
    content: bytes = b""
    etag: Optional[str] = None
    last_modified: Optional[str] = None

    @property
    def not_modified(self) -> bool:
        return self.status_code == 304


def fetch_feed(
    url: str,
    etag: Optional[str] = None,
    last_modified: Optional[str] = None,
    timeout: float = FEED_FETCH_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> FetchResult:
    """
    피드 URL을 다운로드합니다.

    Args:
        url: 피드 URL
        etag: 이전 응답의 ETag (If-None-Match)
        last_modified: 이전 응답의 Last-Modified (If-Modified-Since)
        timeout: 요청 타임아웃 (초)
        session: 재사용할 requests 세션

    Returns:
        FetchResult (304인 경우 content는 비어 있음)

    Raises:
        FeedFetchError: 네트워크 오류 또는 4xx/5xx 응답
    """
    headers = {"User-Agent": FEED_USER_AGENT}
    if etag:
        headers["If-None-Match"] = etag
    if last_modified:
        headers["If-Modified-Since"] = last_modified

    http = session or requests
    try:
        resp = http.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        logger.warning(f"피드 다운로드 실패: {url} - {str(e)}")
        raise FeedFetchError(f"unable to fetch {url}: {e}") from e

    if resp.status_code >= 400:
        logger.warning(f"피드 다운로드 실패: {url} - HTTP {resp.status_code}")
        raise FeedFetchError(f"unable to fetch {url}: HTTP {resp.status_code}")

    logger.debug(f"피드 다운로드: {url} (HTTP {resp.status_code})")
    return FetchResult(
        url=resp.url or url,
        status_code=resp.status_code,
        content=b"" if resp.status_code == 304 else resp.content,
        etag=resp.headers.get("ETag"),
        last_modified=resp.headers.get("Last-Modified"),
    )
