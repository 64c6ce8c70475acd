"""
FastAPI 의존성 주입 (Depends)

모든 라우터에서 사용하는 공통 의존성을 정의한다.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.persistence.database import get_session
from infrastructure.persistence.product_repository import SqlAlchemyProductRepository


async def get_product_repository(
    session: AsyncSession = Depends(get_session)
) -> SqlAlchemyProductRepository:
    """요청 단위 세션에 묶인 상품 Repository"""
    return SqlAlchemyProductRepository(session)
