"""상품 ORM 모델"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Enum
from infrastructure.persistence.database import Base
from domain.enums import ProductStatus, ProductSource


class Product(Base):
    __tablename__ = "products"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(500), nullable=False)
    description = Column(Text, default="", nullable=False)
    status = Column(Enum(ProductStatus), default=ProductStatus.PENDING, nullable=False, index=True)
    source = Column(String(50), default=ProductSource.MANUAL.value, nullable=False)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Product {self.id} - {self.name} ({self.status})>"
