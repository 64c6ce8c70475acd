"""상품 Repository - REST API 클라이언트 구현"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Type

import httpx
from loguru import logger

from config import settings
from domain.entities.product import ProductEntity, ProductUpdate
from domain.enums import ProductStatus, ProductSource
from domain.exceptions import (
    FetchError, InvalidProductNameError, PersistenceError, ProductNotFoundError, ValidationError,
)
from domain.validation import validate_name, validate_names
from application.ports.product_repository import ProductRepository


def _parse_datetime(value: Optional[str]) -> datetime:
    if not value:
        return datetime.utcnow()
    return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)


def from_dto(dto: Dict[str, Any]) -> ProductEntity:
    return ProductEntity(
        id=str(dto.get("id") or ""),
        name=dto["name"],
        description=dto.get("description") or "",
        status=ProductStatus(dto.get("status") or ProductStatus.PENDING.value),
        source=dto.get("source") or ProductSource.MANUAL.value,
        error_message=dto.get("error_message"),
        created_at=_parse_datetime(dto.get("created_at")),
        updated_at=_parse_datetime(dto.get("updated_at")),
    )


class ProductApiRepository(ProductRepository):
    """/api/products 엔드포인트와 통신. 응답 봉투 {success, data, error}를 해석한다"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url if base_url is not None else settings.API_BASE_URL).strip().rstrip("/")
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT
        self._transport = transport

    async def _request(self, method: str, path: str = "", payload: Optional[dict] = None,
                       product_id: Optional[str] = None,
                       error_cls: Type[PersistenceError] = PersistenceError) -> Any:
        url = f"{self.base_url}/api/products{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"상품 API 시간 초과: {method} {url}")
            raise error_cls("상품 API 응답 시간이 초과되었습니다.") from e
        except httpx.RequestError as e:
            logger.error(f"상품 API 연결 실패: {method} {url} - {e}")
            raise error_cls(f"상품 API에 연결할 수 없습니다: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("success") is True:
            return body.get("data")

        message = f"HTTP {response.status_code}"
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message") or message
        elif response.is_success:
            message = "서버 응답 형식이 올바르지 않습니다."

        if response.status_code == 404 and product_id is not None:
            raise ProductNotFoundError(product_id)
        if response.status_code == 400:
            raise ValidationError(message)
        logger.error(f"상품 API 오류: {method} {url} - {message}")
        raise error_cls(message)

    async def get_all(self) -> List[ProductEntity]:
        data = await self._request("GET", error_cls=FetchError)
        if not isinstance(data, list):
            raise FetchError("상품 목록 응답 형식이 올바르지 않습니다.")
        return [from_dto(item) for item in data]

    async def get_by_id(self, product_id: str) -> ProductEntity:
        data = await self._request("GET", f"/{product_id}", product_id=product_id)
        return from_dto(data)

    async def create(self, name: str, source: str = ProductSource.MANUAL.value) -> ProductEntity:
        if not validate_name(name):
            raise InvalidProductNameError()
        data = await self._request("POST", payload={
            "name": name.strip(), "description": "",
            "status": ProductStatus.PENDING.value, "source": source,
        })
        return from_dto(data)

    async def batch_create(self, names: List[str],
                           source: str = ProductSource.EXCEL.value) -> List[ProductEntity]:
        valid = validate_names(names)
        if not valid:
            return []
        products = [{"name": name, "description": "", "status": ProductStatus.PENDING.value,
                     "source": source} for name in valid]
        data = await self._request("POST", "/batch", payload={"products": products})
        return [from_dto(item) for item in data or []]

    async def update(self, product_id: str, fields: ProductUpdate) -> ProductEntity:
        data = await self._request("PUT", f"/{product_id}", payload=fields.to_dict(),
                                   product_id=product_id)
        return from_dto(data)

    async def delete(self, product_id: str) -> None:
        await self._request("DELETE", f"/{product_id}", product_id=product_id)
