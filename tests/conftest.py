"""공통 테스트 픽스처 및 테스트 더블"""
import os
import tempfile

# config.settings는 import 시점에 생성되므로 다른 import보다 먼저 설정한다
_TEST_DIR = tempfile.mkdtemp(prefix="product-tests-")
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FILE", os.path.join(_TEST_DIR, "app.log"))
os.environ.setdefault("LOCAL_STORAGE_PATH", os.path.join(_TEST_DIR, "local_products.json"))
os.environ.setdefault("VERTEX_AI_API_KEY", "")
os.environ.setdefault("VERTEX_AI_PROJECT_ID", "")

from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pytest

from domain.entities.description import DescriptionResult
from domain.entities.product import ProductEntity, ProductUpdate
from domain.enums import ProductSource
from domain.exceptions import PersistenceError, ProductNotFoundError, ProviderError
from domain.identifiers import generate_id
from domain.validation import validate_names
from application.ports.description_provider import DescriptionProviderPort
from application.ports.product_repository import ProductRepository


class InMemoryProductRepository(ProductRepository):
    """메모리 상품 저장소. fail_on에 메서드 이름을 넣으면 PersistenceError 발생"""

    def __init__(self, products: Optional[List[ProductEntity]] = None):
        self.products: Dict[str, ProductEntity] = {p.id: p for p in products or []}
        self.fail_on = set()
        self.fail_ids = set()
        self.calls: List[tuple] = []

    def _check(self, method: str, product_id: Optional[str] = None) -> None:
        self.calls.append((method, product_id))
        if method in self.fail_on or (product_id is not None and product_id in self.fail_ids):
            raise PersistenceError(f"{method} 실패")

    async def get_all(self) -> List[ProductEntity]:
        self._check("get_all")
        return sorted(self.products.values(), key=lambda p: p.created_at, reverse=True)

    async def get_by_id(self, product_id: str) -> ProductEntity:
        self._check("get_by_id", product_id)
        if product_id not in self.products:
            raise ProductNotFoundError(product_id)
        return self.products[product_id]

    async def create(self, name: str, source: str = ProductSource.MANUAL.value) -> ProductEntity:
        self._check("create")
        product = ProductEntity(id=generate_id(), name=name.strip(), source=source)
        self.products[product.id] = product
        return product

    async def batch_create(self, names: List[str],
                           source: str = ProductSource.EXCEL.value) -> List[ProductEntity]:
        self._check("batch_create")
        created = [ProductEntity(id=generate_id(), name=n, source=source) for n in validate_names(names)]
        for product in created:
            self.products[product.id] = product
        return created

    async def update(self, product_id: str, fields: ProductUpdate) -> ProductEntity:
        self._check("update", product_id)
        if product_id not in self.products:
            raise ProductNotFoundError(product_id)
        self.products[product_id] = self.products[product_id].apply(fields)
        return self.products[product_id]

    async def delete(self, product_id: str) -> None:
        self._check("delete", product_id)
        if product_id not in self.products:
            raise ProductNotFoundError(product_id)
        del self.products[product_id]


class ScriptedProvider(DescriptionProviderPort):
    """
    호출마다 names를 기록하고 응답을 돌려준다.
    responses[i]가 예외면 i번째 호출에서 발생, 없으면 "<이름> 설명"으로 응답
    """

    def __init__(self, responses: Optional[list] = None):
        self.responses = list(responses or [])
        self.calls: List[List[str]] = []

    async def get_descriptions(self, names: List[str]) -> List[DescriptionResult]:
        index = len(self.calls)
        self.calls.append(list(names))
        if index < len(self.responses) and self.responses[index] is not None:
            response = self.responses[index]
            if isinstance(response, Exception):
                raise response
            return response
        return [DescriptionResult(name=n, description=f"{n} 설명") for n in names]


def make_products(*names: str, status=None) -> List[ProductEntity]:
    base = datetime(2024, 1, 1)
    products = []
    for index, name in enumerate(names):
        product = ProductEntity(id=generate_id(), name=name,
                                created_at=base + timedelta(minutes=index),
                                updated_at=base + timedelta(minutes=index))
        if status is not None:
            product = product.with_status(status)
        products.append(product)
    return products


@pytest.fixture
def provider_error():
    return ProviderError("AI 서버에 연결할 수 없습니다.", ProviderError.NETWORK_ERROR)
