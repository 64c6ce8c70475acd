"""AI 상품 설명 생성 포트 인터페이스"""
from abc import ABC, abstractmethod
from typing import List

from domain.entities.description import DescriptionResult


class DescriptionProviderPort(ABC):
    @abstractmethod
    async def get_descriptions(self, names: List[str]) -> List[DescriptionResult]: ...
