"""공통 응답 스키마 - {success, data?, error?: {message, code?}}"""
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ErrorDetail(BaseModel):
    message: str
    code: Optional[str] = None


class ResponseBase(BaseModel):
    success: bool = True
    error: Optional[ErrorDetail] = None


class DataResponse(ResponseBase, Generic[T]):
    data: Optional[T] = None
