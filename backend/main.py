"""
상품 설명 자동 생성 서비스 - FastAPI 메인 애플리케이션
"""
import os
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from config import settings
from infrastructure.persistence.database import init_db
from api.error_handlers import register_error_handlers
from api.routers import health, products

# 로깅 설정
os.makedirs(os.path.dirname(settings.LOG_FILE) or ".", exist_ok=True)
logger.add(
    settings.LOG_FILE,
    rotation="10 MB",
    retention="30 days",
    level=settings.LOG_LEVEL
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 수명 주기 관리"""
    logger.info("서비스 시작...")
    await init_db()
    logger.info("데이터베이스 초기화 완료")
    logger.info(f"CORS 허용 origin: {', '.join(settings.cors_origin_list)}")

    yield

    logger.info("서비스 종료...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="상품명 등록 및 AI 상품 설명 생성 API",
        lifespan=lifespan
    )

    # CORS 설정 ("*"이면 credentials 없이 전체 허용)
    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-Id"] = request_id
        message = (f"[{request_id}] {request.method} {request.url.path} "
                   f"{response.status_code} {duration_ms:.1f}ms")
        if response.status_code >= 400:
            logger.error(message)
        else:
            logger.info(message)
        return response

    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(products.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
