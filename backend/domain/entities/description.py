"""AI 설명 생성 결과 값 객체"""
from dataclasses import dataclass


@dataclass(frozen=True)
class DescriptionResult:
    name: str
    description: str
