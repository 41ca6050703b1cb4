# backend/repositories package
from .base import BaseRepository
from .feed_repo import FeedRepository
from .entry_repo import EntryRepository
from .category_repo import CategoryRepository

__all__ = [
    "BaseRepository",
    "FeedRepository",
    "EntryRepository",
    "CategoryRepository",
]
