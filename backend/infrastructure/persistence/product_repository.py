"""상품 Repository - SQLAlchemy 구현 (서버 측)"""
import uuid
from datetime import datetime
from typing import List

from loguru import logger
from sqlalchemy import select, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.product import ProductDraft, ProductEntity, ProductUpdate
from domain.enums import ProductStatus, ProductSource
from domain.exceptions import (
    FetchError, InvalidProductNameError, PersistenceError, ProductNotFoundError,
)
from domain.validation import validate_name, validate_names
from application.ports.product_repository import ProductRepository
from infrastructure.persistence.models.product import Product


def to_entity(row: Product) -> ProductEntity:
    return ProductEntity(
        id=row.id,
        name=row.name,
        description=row.description or "",
        status=ProductStatus(row.status),
        source=row.source or ProductSource.MANUAL.value,
        error_message=row.error_message,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_row(draft: ProductDraft) -> Product:
    if not validate_name(draft.name):
        raise InvalidProductNameError()
    now = datetime.utcnow()
    description = draft.description or ""
    status = ProductStatus(draft.status) if draft.status else ProductStatus.PENDING
    if description:
        status = ProductStatus.COMPLETED
    elif status == ProductStatus.COMPLETED:
        status = ProductStatus.PENDING
    return Product(id=str(uuid.uuid4()), name=draft.name.strip(), description=description,
                   status=status, source=draft.source or ProductSource.MANUAL.value,
                   created_at=now, updated_at=now)


class SqlAlchemyProductRepository(ProductRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_all(self) -> List[ProductEntity]:
        try:
            result = await self._session.execute(
                select(Product).order_by(desc(Product.created_at), Product.id)
            )
        except SQLAlchemyError as e:
            logger.error(f"상품 목록 조회 실패: {e}")
            raise FetchError("상품 목록을 불러오지 못했습니다.") from e
        return [to_entity(row) for row in result.scalars().all()]

    async def _get_row(self, product_id: str) -> Product:
        try:
            row = await self._session.get(Product, product_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"상품 조회 실패: {product_id}") from e
        if row is None:
            raise ProductNotFoundError(product_id)
        return row

    async def get_by_id(self, product_id: str) -> ProductEntity:
        return to_entity(await self._get_row(product_id))

    async def create(self, name: str, source: str = ProductSource.MANUAL.value) -> ProductEntity:
        created = await self.create_drafts([ProductDraft(name=name, source=source)])
        return created[0]

    async def batch_create(self, names: List[str],
                           source: str = ProductSource.EXCEL.value) -> List[ProductEntity]:
        valid = validate_names(names)
        if not valid:
            return []
        return await self.create_drafts([ProductDraft(name=name, source=source) for name in valid])

    async def create_drafts(self, drafts: List[ProductDraft]) -> List[ProductEntity]:
        """한 번의 flush로 저장 (전부 성공 또는 전부 실패)"""
        rows = [to_row(draft) for draft in drafts]
        if not rows:
            return []
        self._session.add_all(rows)
        await self._flush()
        logger.info(f"상품 생성: {len(rows)}건")
        return [to_entity(row) for row in rows]

    async def update(self, product_id: str, fields: ProductUpdate) -> ProductEntity:
        row = await self._get_row(product_id)
        updated = to_entity(row).apply(fields)
        row.name = updated.name
        row.description = updated.description
        row.status = updated.status
        row.error_message = updated.error_message
        row.updated_at = updated.updated_at
        await self._flush()
        return updated

    async def delete(self, product_id: str) -> None:
        row = await self._get_row(product_id)
        await self._session.delete(row)
        await self._flush()
        logger.info(f"상품 삭제: {product_id}")

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            logger.error(f"상품 저장 실패: {e}")
            raise PersistenceError("상품을 저장하지 못했습니다.") from e
