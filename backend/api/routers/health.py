"""헬스 체크 라우터"""
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from config import settings
from infrastructure.persistence.database import ping_db

router = APIRouter(tags=["시스템"])


@router.get("/health")
async def health_check():
    timestamp = datetime.utcnow().isoformat()
    if await ping_db():
        return {"status": "ok", "timestamp": timestamp, "database": "connected"}
    return JSONResponse(
        status_code=503,
        content={"status": "error", "timestamp": timestamp, "database": "disconnected"},
    )


@router.get("/")
async def root():
    return {"service": settings.APP_NAME, "version": settings.APP_VERSION, "docs": "/docs", "health": "/health"}
