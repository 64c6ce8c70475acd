"""상품 CRUD 라우터"""
from typing import List

from fastapi import APIRouter, Depends, status

from domain.entities.product import ProductDraft, ProductUpdate
from api.dependencies import get_product_repository
from api.schemas.common import ResponseBase, DataResponse
from api.schemas.products import (
    ProductCreate, ProductBatchCreate, ProductUpdateRequest, ProductOut,
)
from infrastructure.persistence.product_repository import SqlAlchemyProductRepository

router = APIRouter(prefix="/api/products", tags=["상품"])


def _draft(item: ProductCreate) -> ProductDraft:
    return ProductDraft(name=item.name, source=item.source, description=item.description or "",
                        status=item.status)


@router.get("", response_model=DataResponse[List[ProductOut]])
async def list_products(repo: SqlAlchemyProductRepository = Depends(get_product_repository)):
    """전체 상품 목록 (최신순)"""
    products = await repo.get_all()
    return DataResponse(data=[ProductOut.model_validate(p) for p in products])


@router.get("/{product_id}", response_model=DataResponse[ProductOut])
async def get_product(product_id: str,
                      repo: SqlAlchemyProductRepository = Depends(get_product_repository)):
    product = await repo.get_by_id(product_id)
    return DataResponse(data=ProductOut.model_validate(product))


@router.post("", response_model=DataResponse[ProductOut], status_code=status.HTTP_201_CREATED)
async def create_product(request: ProductCreate,
                         repo: SqlAlchemyProductRepository = Depends(get_product_repository)):
    created = await repo.create_drafts([_draft(request)])
    return DataResponse(data=ProductOut.model_validate(created[0]))


@router.post("/batch", response_model=DataResponse[List[ProductOut]],
             status_code=status.HTTP_201_CREATED)
async def batch_create_products(request: ProductBatchCreate,
                                repo: SqlAlchemyProductRepository = Depends(get_product_repository)):
    """상품 일괄 생성 (엑셀 업로드)"""
    created = await repo.create_drafts([_draft(item) for item in request.products])
    return DataResponse(data=[ProductOut.model_validate(p) for p in created])


@router.put("/{product_id}", response_model=DataResponse[ProductOut])
async def update_product(product_id: str, request: ProductUpdateRequest,
                         repo: SqlAlchemyProductRepository = Depends(get_product_repository)):
    """부분 수정. description이 있으면 status는 completed"""
    fields = ProductUpdate(**request.model_dump(exclude_unset=True))
    updated = await repo.update(product_id, fields)
    return DataResponse(data=ProductOut.model_validate(updated))


@router.delete("/{product_id}", response_model=ResponseBase, response_model_exclude_none=True)
async def delete_product(product_id: str,
                         repo: SqlAlchemyProductRepository = Depends(get_product_repository)):
    await repo.delete(product_id)
    return ResponseBase(success=True)
