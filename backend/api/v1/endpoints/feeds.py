# backend/api/v1/endpoints/feeds.py
"""
피드 리소스 API 엔드포인트

각 핸들러는 사용자 ID와 파라미터를 꺼낸 뒤 협력 객체(저장소 또는 FeedHandler)를
정확히 한 번 호출하고, 결과를 응답 하나로 변환한다.
경로/본문 디코딩 실패는 FastAPI 검증 단계에서 400으로 끝나므로 핸들러 본문에 도달하지 않는다.
"""
from typing import List

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import Response

from backend.api.deps import get_current_user_id, get_feed_handler, get_feed_repository
from backend.core.exceptions import APIError, ErrorKind, FeedAPIException, FeedNotFoundException
from backend.repositories import FeedRepository
from backend.schemas.common import ErrorResponse
from backend.schemas.feed import Feed, FeedCreate, FeedModification
from backend.services.feed_handler import FeedHandler

router = APIRouter(
    prefix="/feeds",
    tags=["feeds"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Feed, summary="피드 생성")
def create_feed(
    payload: FeedCreate,
    user_id: int = Depends(get_current_user_id),
    handler: FeedHandler = Depends(get_feed_handler),
):
    """피드 구독 생성 (최초 수집 포함)"""
    try:
        return handler.create_feed(user_id, payload.category_id, str(payload.feed_url))
    except FeedAPIException as e:
        raise APIError(ErrorKind.CREATE_FAILED) from e


@router.put(
    "/{feed_id}/refresh",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="피드 갱신",
)
def refresh_feed(
    feed_id: int = Path(..., gt=0, description="피드 ID"),
    user_id: int = Depends(get_current_user_id),
    handler: FeedHandler = Depends(get_feed_handler),
):
    """피드를 즉시 다시 수집 (완료될 때까지 대기)"""
    try:
        handler.refresh_feed(user_id, feed_id)
    except FeedAPIException as e:
        raise APIError(ErrorKind.REFRESH_FAILED) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{feed_id}", status_code=status.HTTP_201_CREATED, response_model=Feed, summary="피드 수정")
def update_feed(
    payload: FeedModification,
    feed_id: int = Path(..., gt=0, description="피드 ID"),
    user_id: int = Depends(get_current_user_id),
    feed_repo: FeedRepository = Depends(get_feed_repository),
):
    """기존 피드에 부분 수정 내용을 병합해 저장"""
    try:
        original = feed_repo.get_feed_by_id(user_id, feed_id)
    except FeedAPIException as e:
        raise APIError(ErrorKind.UPDATE_FAILED) from e

    if original is None:
        raise APIError(ErrorKind.FEED_NOT_FOUND)

    try:
        # 카테고리 제목 등 저장소가 채운 값까지 포함된 저장 결과를 응답한다
        return feed_repo.update_feed(original.merge(payload))
    except FeedNotFoundException as e:
        # 조회 이후 다른 요청이 삭제한 경우
        raise APIError(ErrorKind.FEED_NOT_FOUND) from e
    except FeedAPIException as e:
        raise APIError(ErrorKind.UPDATE_FAILED) from e


@router.get("", response_model=List[Feed], summary="피드 목록 조회")
def get_feeds(
    user_id: int = Depends(get_current_user_id),
    feed_repo: FeedRepository = Depends(get_feed_repository),
):
    """사용자의 피드 목록"""
    try:
        return feed_repo.get_feeds(user_id)
    except FeedAPIException as e:
        raise APIError(ErrorKind.LIST_FAILED) from e


@router.get("/{feed_id}", response_model=Feed, summary="피드 조회")
def get_feed(
    feed_id: int = Path(..., gt=0, description="피드 ID"),
    user_id: int = Depends(get_current_user_id),
    feed_repo: FeedRepository = Depends(get_feed_repository),
):
    try:
        feed = feed_repo.get_feed_by_id(user_id, feed_id)
    except FeedAPIException as e:
        raise APIError(ErrorKind.FETCH_FAILED) from e

    if feed is None:
        raise APIError(ErrorKind.FEED_NOT_FOUND)
    return feed


@router.delete(
    "/{feed_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="피드 삭제",
)
def remove_feed(
    feed_id: int = Path(..., gt=0, description="피드 ID"),
    user_id: int = Depends(get_current_user_id),
    feed_repo: FeedRepository = Depends(get_feed_repository),
):
    """피드 및 엔트리 삭제"""
    try:
        exists = feed_repo.feed_exists(user_id, feed_id)
    except FeedAPIException as e:
        raise APIError(ErrorKind.REMOVE_FAILED) from e

    if not exists:
        raise APIError(ErrorKind.FEED_NOT_FOUND)

    try:
        removed = feed_repo.remove_feed(user_id, feed_id)
    except FeedAPIException as e:
        raise APIError(ErrorKind.REMOVE_FAILED) from e

    # 존재 확인 이후 동시 삭제된 경우
    if not removed:
        raise APIError(ErrorKind.FEED_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
