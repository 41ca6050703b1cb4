# backend/core/exceptions.py
"""커스텀 예외 클래스 및 API 오류 종류"""
from enum import Enum
from typing import Optional


class FeedAPIException(Exception):
    """기본 피드 예외"""
    pass


class FeedNotFoundException(FeedAPIException):
    """피드를 찾을 수 없음"""
    pass


class CategoryNotFoundException(FeedAPIException):
    """카테고리를 찾을 수 없음"""
    pass


class FeedAlreadyExistsException(FeedAPIException):
    """피드가 이미 존재함"""
    pass


class StorageError(FeedAPIException):
    """MongoDB 작업 실패"""
    pass


class FeedFetchError(FeedAPIException):
    """피드 다운로드 실패 (네트워크, HTTP 상태)"""
    pass


class FeedParseError(FeedAPIException):
    """피드 문서 파싱 실패"""
    pass


class ErrorKind(Enum):
    """
    클라이언트에 노출되는 오류 종류.

    각 항목은 (HTTP 상태 코드, 고정 메시지)를 가진다.
    500 계열 메시지는 내부 오류 내용을 절대 포함하지 않는다.
    """
    INVALID_INPUT = (400, "Invalid request")
    FEED_NOT_FOUND = (404, "Feed not found")
    CREATE_FAILED = (500, "Unable to create this feed")
    REFRESH_FAILED = (500, "Unable to refresh this feed")
    UPDATE_FAILED = (500, "Unable to update this feed")
    LIST_FAILED = (500, "Unable to fetch feeds from the database")
    FETCH_FAILED = (500, "Unable to fetch this feed")
    REMOVE_FAILED = (500, "Unable to remove this feed")

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


class APIError(Exception):
    """라우터가 발생시키는 유일한 예외. 앱 예외 핸들러가 JSON 응답으로 변환"""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        # 400 계열만 구체적인 메시지를 허용
        if message is not None and kind.status_code >= 500:
            message = None
        self.kind = kind
        self.message = message or kind.message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code
