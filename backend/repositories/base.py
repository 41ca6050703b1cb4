# backend/repositories/base.py
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Optional

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from backend.core.database import MongoManager
from backend.core.exceptions import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(action: str):
    """pymongo 예외를 StorageError로 변환"""
    try:
        yield
    except PyMongoError as e:
        logger.error(f"MongoDB 작업 실패 ({action}): {str(e)}")
        raise StorageError(f"{action} failed") from e


class BaseRepository(ABC):
    def __init__(self, collection_name: str, db: Optional[Database] = None):
        self.collection_name = collection_name
        self._db = db

    @property
    def db(self) -> Database:
        if self._db is not None:
            return self._db
        return MongoManager.get_db()

    @property
    def collection(self):
        return self.db[self.collection_name]

    def next_sequence(self, name: str) -> int:
        """counters 컬렉션에서 정수 ID 발급"""
        doc = self.db["counters"].find_one_and_update(
            {"_id": name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return doc["seq"]

    @abstractmethod
    def create_indexes(self):
        """인덱스 생성 로직"""
        pass
