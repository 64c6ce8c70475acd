"""
낙관적 업데이트 헬퍼

스냅샷 → 메모리 반영 → 원격 반영 시도 → 실패 시 되돌리고 예외 재발생.
add/remove/clear가 같은 흐름을 공유한다.
"""
from typing import Awaitable, Callable, List, Optional, TypeVar

from loguru import logger

from domain.entities.product import ProductEntity

T = TypeVar("T")
Products = List[ProductEntity]


async def optimistic_update(
    holder,
    apply: Callable[[Products], Products],
    effect: Callable[[], Awaitable[T]],
    revert: Optional[Callable[[Products, Products], Products]] = None,
    commit: Optional[Callable[[Products, T], Products]] = None,
) -> T:
    """
    holder: snapshot()/set_all()을 제공하는 상태 저장소
    apply: 현재 목록 → 낙관적 목록
    effect: 원격 저장 작업
    revert: (현재 목록, 스냅샷) → 복구 목록. 없으면 스냅샷 전체 복원
    commit: (현재 목록, effect 결과) → 확정 목록 (임시 ID 교체 등)
    """
    snapshot = holder.snapshot()
    holder.set_all(apply(list(snapshot)))
    try:
        result = await effect()
    except Exception as e:
        current = holder.snapshot()
        holder.set_all(revert(current, snapshot) if revert else list(snapshot))
        logger.warning(f"낙관적 업데이트 롤백: {e}")
        raise
    if commit is not None:
        holder.set_all(commit(holder.snapshot(), result))
    return result
