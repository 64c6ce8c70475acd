"""도메인 열거형"""
import enum


class ProductStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class ProductSource(str, enum.Enum):
    MANUAL = "manual"
    EXCEL = "excel"


# 설명 생성 대상 상태 (error 상품은 다음 실행에서 재시도)
ELIGIBLE_STATUSES = (ProductStatus.PENDING, ProductStatus.ERROR)
