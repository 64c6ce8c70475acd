"""
AI 결과 ↔ 상품 매칭

1단계: 대소문자/공백 정규화 후 이름 완전 일치
2단계: 이름 일치가 없고 결과 수 == 배치 수이면 같은 위치의 결과 사용 (best-effort)

2단계는 AI가 이름을 바꿔 쓰거나 순서를 바꾼 경우를 완전히 보장하지 못한다.
다른 상품과 이름으로 이미 매칭된 결과는 위치 매칭에 쓰지 않는다.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from domain.entities.description import DescriptionResult
from domain.entities.product import ProductEntity

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    return _WHITESPACE_RE.sub(" ", name).strip().lower()


@dataclass(frozen=True)
class MatchOutcome:
    product: ProductEntity
    result: Optional[DescriptionResult] = None
    used_fallback: bool = False

    @property
    def matched(self) -> bool:
        return self.result is not None


def _usable(result: DescriptionResult) -> bool:
    return bool(result.description and result.description.strip())


def match_results(batch: Sequence[ProductEntity],
                  results: Sequence[DescriptionResult]) -> List[MatchOutcome]:
    """배치 순서대로 각 상품의 매칭 결과 반환"""
    by_name = {}
    for index, result in enumerate(results):
        # 같은 이름이 여러 번 오면 첫 결과 사용
        by_name.setdefault(normalize_name(result.name), index)

    name_matched = {}
    for position, product in enumerate(batch):
        index = by_name.get(normalize_name(product.name))
        if index is not None and _usable(results[index]):
            name_matched[position] = index
    claimed = set(name_matched.values())

    positional = len(results) == len(batch)
    outcomes = []
    for position, product in enumerate(batch):
        if position in name_matched:
            outcomes.append(MatchOutcome(product, results[name_matched[position]]))
            continue
        if positional and position not in claimed and _usable(results[position]):
            outcomes.append(MatchOutcome(product, results[position], used_fallback=True))
            continue
        outcomes.append(MatchOutcome(product))
    return outcomes
