# backend/main.py
"""FastAPI 애플리케이션 진입점"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.core.config import PROJECT_NAME, VERSION, API_V1_PREFIX, CORS_ORIGINS, LOG_LEVEL
from backend.core.database import MongoManager
from backend.core.exceptions import APIError, ErrorKind
from backend.api.v1.api import api_router
from backend.schemas.common import HealthResponse

logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    MongoManager.close()


app = FastAPI(
    title=PROJECT_NAME,
    description="Feed Resource API",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _describe_validation_error(exc: RequestValidationError) -> str:
    """첫 번째 검증 오류를 'field: message' 형태로 요약"""
    errors = exc.errors()
    if not errors:
        return ErrorKind.INVALID_INPUT.message
    err = errors[0]
    if err.get("type") == "json_invalid":
        # loc 에는 필드명 대신 문서 내 오류 위치가 들어 있다
        return "Malformed JSON body"
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query", "header")]
    msg = err.get("msg", ErrorKind.INVALID_INPUT.message)
    return f"{'.'.join(loc)}: {msg}" if loc else msg


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    if exc.status_code >= 500:
        # 원인은 서버 로그에만 남기고 클라이언트에는 고정 메시지만 전달
        logger.error(
            f"{request.method} {request.url.path} 실패 ({exc.kind.name}): {exc.__cause__!r}",
            exc_info=exc.__cause__,
        )
    return JSONResponse(status_code=exc.status_code, content={"error_message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=ErrorKind.INVALID_INPUT.status_code,
        content={"error_message": _describe_validation_error(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} 처리 중 예외", exc_info=exc)
    return JSONResponse(status_code=500, content={"error_message": "Internal server error"})


# API 라우터 등록
app.include_router(api_router, prefix=API_V1_PREFIX)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}
