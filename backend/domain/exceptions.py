"""도메인 예외"""
from typing import Optional


class DomainError(Exception):
    """도메인 레이어 기본 예외"""
    pass


class ValidationError(DomainError):
    """잘못된 입력 (HTTP 400)"""
    pass


class InvalidProductNameError(ValidationError):
    def __init__(self):
        super().__init__("상품명이 올바르지 않습니다.")


class ProductNotFoundError(DomainError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"상품을 찾을 수 없습니다: {product_id}")


class PersistenceError(DomainError):
    """저장소 접근 실패"""
    pass


class FetchError(PersistenceError):
    """상품 목록 조회 실패 (부분 결과 없음)"""
    pass


class DescriptionProviderError(DomainError):
    """AI 설명 생성 실패 기본 예외"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class ConfigurationError(DescriptionProviderError):
    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR")


class InvalidInputError(DescriptionProviderError):
    def __init__(self, message: str = "상품명 목록이 비어 있습니다."):
        super().__init__(message, code="INVALID_INPUT")


class ProviderError(DescriptionProviderError):
    """네트워크/HTTP/응답 파싱 오류. code로 종류 구분"""
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    NO_RESPONSE = "NO_RESPONSE"
    INVALID_JSON = "INVALID_JSON"
    INVALID_FORMAT = "INVALID_FORMAT"

    @staticmethod
    def http_code(status_code: int) -> str:
        return f"HTTP_{status_code}"
