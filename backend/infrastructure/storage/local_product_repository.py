"""
상품 Repository - 로컬 파일 구현

키 하나("mgm-products")에 상품 배열 전체를 JSON으로 저장한다.
저장할 때마다 파일 전체를 덮어쓴다 (부분 업데이트 없음).
"""
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from config import settings
from domain.entities.product import ProductEntity, ProductUpdate
from domain.enums import ProductStatus, ProductSource
from domain.exceptions import FetchError, InvalidProductNameError, PersistenceError, ProductNotFoundError
from domain.identifiers import generate_id
from domain.validation import validate_name, validate_names
from application.ports.product_repository import ProductRepository

STORAGE_KEY = "mgm-products"


def to_stored(product: ProductEntity) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "status": product.status.value,
        "source": product.source,
        "error_message": product.error_message,
        "created_at": product.created_at.isoformat(),
        "updated_at": product.updated_at.isoformat(),
    }


def from_stored(data: Dict[str, Any]) -> ProductEntity:
    return ProductEntity(
        id=data["id"],
        name=data["name"],
        description=data.get("description") or "",
        status=ProductStatus(data.get("status", ProductStatus.PENDING.value)),
        source=data.get("source") or ProductSource.MANUAL.value,
        error_message=data.get("error_message"),
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


class LocalProductRepository(ProductRepository):
    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.LOCAL_STORAGE_PATH)

    def _load(self) -> List[ProductEntity]:
        if not self.path.exists():
            return []
        try:
            blob = json.loads(self.path.read_text(encoding="utf-8"))
            items = blob.get(STORAGE_KEY, []) if isinstance(blob, dict) else None
            if not isinstance(items, list):
                raise ValueError(f"'{STORAGE_KEY}' 항목이 배열이 아닙니다.")
            return [from_stored(item) for item in items]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"로컬 상품 저장소 읽기 실패: {self.path} - {e}")
            raise FetchError(f"로컬 상품 저장소를 읽을 수 없습니다: {e}") from e

    def _save(self, products: List[ProductEntity]) -> None:
        blob = {STORAGE_KEY: [to_stored(p) for p in products]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(blob, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"로컬 상품 저장소 쓰기 실패: {self.path} - {e}")
            raise PersistenceError(f"로컬 상품 저장소에 쓸 수 없습니다: {e}") from e

    @staticmethod
    def _new(name: str, source: str) -> ProductEntity:
        now = datetime.utcnow()
        return ProductEntity(id=generate_id(), name=name.strip(), source=source,
                             created_at=now, updated_at=now)

    async def get_all(self) -> List[ProductEntity]:
        return self._load()

    async def get_by_id(self, product_id: str) -> ProductEntity:
        for product in self._load():
            if product.id == product_id:
                return product
        raise ProductNotFoundError(product_id)

    async def create(self, name: str, source: str = ProductSource.MANUAL.value) -> ProductEntity:
        if not validate_name(name):
            raise InvalidProductNameError()
        product = self._new(name, source)
        self._save(self._load() + [product])
        return product

    async def batch_create(self, names: List[str],
                           source: str = ProductSource.EXCEL.value) -> List[ProductEntity]:
        valid = validate_names(names)
        if not valid:
            return []
        products = [self._new(name, source) for name in valid]
        self._save(self._load() + products)
        return products

    async def update(self, product_id: str, fields: ProductUpdate) -> ProductEntity:
        products = self._load()
        for index, product in enumerate(products):
            if product.id == product_id:
                products[index] = product.apply(fields)
                self._save(products)
                return products[index]
        raise ProductNotFoundError(product_id)

    async def delete(self, product_id: str) -> None:
        products = self._load()
        remaining = [p for p in products if p.id != product_id]
        if len(remaining) == len(products):
            raise ProductNotFoundError(product_id)
        self._save(remaining)
