# backend/core/config.py
from dotenv import load_dotenv
load_dotenv()
import os

# FastAPI 설정
PROJECT_NAME = os.getenv("PROJECT_NAME", "Feed Resource API")
VERSION = "0.1.0"
API_V1_PREFIX = "/api/v1"

# Mongo
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "feeds")
MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

# 로깅
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# 피드 수집 (HTTP)
FEED_FETCH_TIMEOUT = float(os.getenv("FEED_FETCH_TIMEOUT", "20"))
FEED_USER_AGENT = os.getenv(
    "FEED_USER_AGENT",
    f"FeedResourceAPI/{VERSION} (+https://github.com/feed-resource-api)",
)

# CORS 설정 (쉼표 구분)
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001").split(",")
    if o.strip()
]
