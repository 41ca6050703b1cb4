# backend/repositories/entry_repo.py
from typing import List, Optional
from pymongo import ASCENDING, DESCENDING, UpdateOne
from pymongo.database import Database

from backend.schemas.entry import Entry
from .base import BaseRepository, storage_errors


class EntryRepository(BaseRepository):
    def __init__(self, db: Optional[Database] = None):
        super().__init__("entries", db=db)

    def upsert_many(self, entries: List[Entry], batch_size: int = 1000) -> int:
        """대량 삽입/수정 처리. 1000개 단위로 배치 처리. 수정된/삽입된 개수 반환"""
        if not entries:
            return 0

        total = 0
        with storage_errors("upsert_entries"):
            for i in range(0, len(entries), batch_size):
                batch = entries[i:i + batch_size]
                ops = [
                    # (feed_id, hash) 가 엔트리의 자연 키
                    UpdateOne({"feed_id": e.feed_id, "hash": e.hash}, {"$set": e.model_dump()}, upsert=True)
                    for e in batch
                ]
                res = self.collection.bulk_write(ops, ordered=False)
                total += res.upserted_count + res.modified_count
        return total

    def create_indexes(self):
        with storage_errors("create_indexes"):
            self.collection.create_index([("feed_id", ASCENDING), ("hash", ASCENDING)], unique=True)
            self.collection.create_index([("user_id", ASCENDING), ("published", DESCENDING)])
