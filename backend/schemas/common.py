# backend/schemas/common.py
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error_message: str


class HealthResponse(BaseModel):
    ok: bool
