"""상품 스키마"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.enums import ProductStatus, ProductSource


def _check_name(value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("상품명은 필수입니다.")
    return value.strip()


class ProductCreate(BaseModel):
    name: str
    description: Optional[str] = ""
    status: Optional[ProductStatus] = None
    source: Optional[str] = ProductSource.MANUAL.value

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, v):
        return _check_name(v)


class ProductBatchCreate(BaseModel):
    products: List[ProductCreate] = Field(..., min_length=1)


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProductStatus] = None
    error_message: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def name_not_blank(cls, v):
        return v if v is None else _check_name(v)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str = ""
    status: ProductStatus
    source: str = ProductSource.MANUAL.value
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime
