# backend/core/database.py
"""피드 저장소가 공유하는 MongoDB 연결"""
import logging

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from backend.core.config import MONGO_URI, MONGO_DB, MONGO_TIMEOUT_MS, PROJECT_NAME

logger = logging.getLogger(__name__)


class MongoManager:
    """프로세스 단위로 하나의 MongoClient를 지연 생성해 저장소들이 함께 사용"""
    _client: MongoClient | None = None
    _db: Database | None = None

    @classmethod
    def get_client(cls) -> MongoClient:
        if cls._client is None:
            # uvicorn 워커 포크 이후 첫 요청에서 연결
            cls._client = MongoClient(
                MONGO_URI,
                connect=False,
                appname=PROJECT_NAME,
                serverSelectionTimeoutMS=MONGO_TIMEOUT_MS,
            )
        return cls._client

    @classmethod
    def get_db(cls) -> Database:
        if cls._db is None:
            cls._db = cls.get_client()[MONGO_DB]
        return cls._db

    @classmethod
    def ping(cls) -> bool:
        """서버 응답 여부"""
        try:
            cls.get_client().admin.command("ping")
        except PyMongoError as e:
            logger.error(f"MongoDB 연결 실패 ({MONGO_URI}): {str(e)}")
            return False
        return True

    @classmethod
    def close(cls):
        if cls._client is not None:
            cls._client.close()
            logger.info("MongoDB 연결 종료")
        cls._client = None
        cls._db = None
