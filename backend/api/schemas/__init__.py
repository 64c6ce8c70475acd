"""
API 스키마 re-export

사용법:
  from api.schemas import DataResponse, ProductOut
"""
from api.schemas.common import ErrorDetail, ResponseBase, DataResponse
from api.schemas.products import (
    ProductCreate, ProductBatchCreate, ProductUpdateRequest, ProductOut,
)
