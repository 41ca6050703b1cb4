# backend/schemas/entry.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class Entry(BaseModel):
    feed_id: int = 0
    user_id: int = 0
    hash: str
    title: Optional[str] = None
    url: Optional[str] = None
    author: Optional[str] = None
    content: Optional[str] = None
    published: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
