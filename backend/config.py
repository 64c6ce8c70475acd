"""
상품 설명 자동 생성 서비스 설정
"""
from typing import List, Union
from pydantic_settings import BaseSettings
from functools import lru_cache


def parse_cors_origins(value: str) -> Union[str, List[str]]:
    """CORS 설정 문자열 해석 ("*", 단일 origin, 콤마 구분 목록)"""
    if not value or value.strip() == "*":
        return "*"
    if "," in value:
        return [origin.strip() for origin in value.split(",") if origin.strip()]
    return value.strip()


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 앱 기본 설정
    APP_NAME: str = "상품 설명 자동 생성 서비스"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # 데이터베이스 설정
    DB_URL: str = "sqlite+aiosqlite:///./data/products.db"

    # CORS 설정 ("*", "https://a.com", "https://a.com,https://b.com")
    CORS_ORIGINS: str = "*"

    # Vertex AI (Gemini) 설정
    VERTEX_AI_API_KEY: str = ""
    VERTEX_AI_PROJECT_ID: str = ""
    VERTEX_AI_LOCATION: str = "us-central1"
    VERTEX_AI_MODEL: str = "gemini-1.5-flash"
    AI_TIMEOUT: float = 60.0  # 초

    # 클라이언트 세션 설정 (tools/cli.py)
    STORAGE_BACKEND: str = "api"  # "api" | "local"
    API_BASE_URL: str = "http://localhost:8000"
    API_TIMEOUT: float = 30.0  # 초
    LOCAL_STORAGE_PATH: str = "./data/local_products.json"
    BATCH_SIZE: int = 3

    # 파일 업로드 설정
    MAX_FILE_SIZE_MB: int = 10

    # 로깅 설정
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "./logs/app.log"

    class Config:
        env_file = ".env.backend"  # 백엔드 전용 환경 변수 파일
        case_sensitive = True
        env_file_encoding = "utf-8"

    @property
    def cors_origin_list(self) -> List[str]:
        origins = parse_cors_origins(self.CORS_ORIGINS)
        if origins == "*":
            return ["*"]
        if isinstance(origins, str):
            return [origins]
        return origins


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 반환"""
    return Settings()


# 설정 인스턴스
settings = get_settings()
