# backend/repositories/category_repo.py
from typing import Optional
from pymongo import ASCENDING
from pymongo.database import Database

from backend.schemas.feed import Category
from .base import BaseRepository, storage_errors


class CategoryRepository(BaseRepository):
    def __init__(self, db: Optional[Database] = None):
        super().__init__("categories", db=db)

    def create_category(self, user_id: int, title: str) -> Category:
        with storage_errors("create_category"):
            category_id = self.next_sequence("categories")
            self.collection.insert_one({"_id": category_id, "user_id": user_id, "title": title})
        return Category(id=category_id, title=title)

    def get_category(self, user_id: int, category_id: int) -> Optional[Category]:
        with storage_errors("get_category"):
            doc = self.collection.find_one({"_id": category_id, "user_id": user_id})
        return Category(id=doc["_id"], title=doc.get("title")) if doc else None

    def create_indexes(self):
        with storage_errors("create_indexes"):
            self.collection.create_index([("user_id", ASCENDING), ("title", ASCENDING)], unique=True)
