"""실행 시점 상품 저장소 선택 (STORAGE_BACKEND: api | local)"""
from typing import Optional

from config import settings
from application.ports.product_repository import ProductRepository
from infrastructure.http.product_api_repository import ProductApiRepository
from infrastructure.storage.local_product_repository import LocalProductRepository

BACKENDS = ("api", "local")


def build_product_repository(backend: Optional[str] = None) -> ProductRepository:
    backend = (backend or settings.STORAGE_BACKEND).strip().lower()
    if backend == "api":
        return ProductApiRepository()
    if backend == "local":
        return LocalProductRepository()
    raise ValueError(f"알 수 없는 저장소 백엔드: {backend} (api | local)")
