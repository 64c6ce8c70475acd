"""상품 도메인 엔티티"""
from dataclasses import dataclass, field, replace, asdict
from datetime import datetime
from typing import Optional, Dict, Any

from domain.enums import ELIGIBLE_STATUSES, ProductStatus, ProductSource
from domain.exceptions import ValidationError


def utcnow() -> datetime:
    return datetime.utcnow()


@dataclass(frozen=True)
class ProductEntity:
    """설명 생성 대상 상품. 상태 변경은 항상 새 인스턴스를 반환한다."""
    id: str
    name: str
    description: str = ""
    status: ProductStatus = ProductStatus.PENDING
    source: str = ProductSource.MANUAL.value
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_eligible(self) -> bool:
        """처리 대상 여부 (pending 또는 error)"""
        return self.status in ELIGIBLE_STATUSES

    def with_status(self, status: ProductStatus, error_message: Optional[str] = None) -> "ProductEntity":
        if status == ProductStatus.COMPLETED and not self.description:
            raise ValidationError("설명 없이 completed 상태로 변경할 수 없습니다.")
        return replace(self, status=status, error_message=error_message, updated_at=utcnow())

    def mark_processing(self) -> "ProductEntity":
        return self.with_status(ProductStatus.PROCESSING)

    def complete(self, description: str) -> "ProductEntity":
        if not description or not description.strip():
            raise ValidationError("빈 설명으로 완료 처리할 수 없습니다.")
        return replace(self, description=description, status=ProductStatus.COMPLETED,
                       error_message=None, updated_at=utcnow())

    def fail(self, message: Optional[str] = None) -> "ProductEntity":
        # 이전 성공의 설명은 그대로 둔다
        return self.with_status(ProductStatus.ERROR, error_message=message)

    def apply(self, update: "ProductUpdate") -> "ProductEntity":
        """부분 수정 적용. error 이외 상태로 바뀌면 error_message는 지운다"""
        update = update.normalized()
        name = self.name if update.name is None else update.name.strip()
        description = self.description if update.description is None else update.description
        status = self.status if update.status is None else ProductStatus(update.status)
        error_message = self.error_message
        if update.error_message is not None:
            error_message = update.error_message
        elif update.status is not None and status != ProductStatus.ERROR:
            error_message = None
        if not name:
            raise ValidationError("상품명이 올바르지 않습니다.")
        if status == ProductStatus.COMPLETED and not description:
            raise ValidationError("설명 없이 completed 상태로 변경할 수 없습니다.")
        return replace(self, name=name, description=description, status=status,
                       error_message=error_message, updated_at=utcnow())


@dataclass
class ProductUpdate:
    """부분 수정 필드 (None은 변경 없음). description이 있으면 status는 completed로 강제"""
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProductStatus] = None
    error_message: Optional[str] = None

    def normalized(self) -> "ProductUpdate":
        status = self.status
        if self.description is not None:
            status = ProductStatus.COMPLETED
        return ProductUpdate(name=self.name, description=self.description,
                             status=status, error_message=self.error_message)

    def to_dict(self) -> Dict[str, Any]:
        data = {k: v for k, v in asdict(self.normalized()).items() if v is not None}
        if "status" in data:
            data["status"] = ProductStatus(data["status"]).value
        return data


@dataclass
class ProductDraft:
    """저장 전 신규 상품 입력값"""
    name: str
    source: str = ProductSource.MANUAL.value
    description: str = ""
    status: Optional[ProductStatus] = None
