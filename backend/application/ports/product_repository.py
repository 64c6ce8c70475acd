"""상품 Repository 인터페이스 (REST / 로컬 저장소 / SQL 구현 공용)"""
from abc import ABC, abstractmethod
from typing import Optional, List

from domain.entities.product import ProductEntity, ProductUpdate
from domain.enums import ProductStatus, ProductSource


class ProductRepository(ABC):
    @abstractmethod
    async def get_all(self) -> List[ProductEntity]: ...
    @abstractmethod
    async def get_by_id(self, product_id: str) -> ProductEntity: ...
    @abstractmethod
    async def create(self, name: str, source: str = ProductSource.MANUAL.value) -> ProductEntity: ...
    @abstractmethod
    async def batch_create(self, names: List[str],
                           source: str = ProductSource.EXCEL.value) -> List[ProductEntity]: ...
    @abstractmethod
    async def update(self, product_id: str, fields: ProductUpdate) -> ProductEntity: ...
    @abstractmethod
    async def delete(self, product_id: str) -> None: ...

    async def update_status(self, product_id: str, status: ProductStatus,
                            error_message: Optional[str] = None) -> ProductEntity:
        return await self.update(product_id, ProductUpdate(status=status, error_message=error_message))

    async def update_description(self, product_id: str, description: str) -> ProductEntity:
        return await self.update(product_id, ProductUpdate(description=description))
