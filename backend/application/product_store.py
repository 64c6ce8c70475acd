"""
세션 상품 상태 저장소

현재 세션의 상품 목록을 보관한다. 저장소(Repository)에 닿는 변경은 모두
낙관적으로 먼저 메모리에 반영하고, 실패하면 되돌린 뒤 예외를 올린다.
"""
import asyncio
from typing import Callable, List, Optional, Tuple

from loguru import logger

from domain.entities.product import ProductEntity
from domain.enums import ProductStatus, ProductSource
from domain.exceptions import DomainError, InvalidProductNameError
from domain.identifiers import generate_temp_id
from domain.validation import validate_name, validate_names
from application.optimistic import optimistic_update
from application.ports.product_repository import ProductRepository
from application.use_cases.process_products import ProcessProductsOutput, ProcessProductsUseCase

ChangeListener = Callable[[Tuple[ProductEntity, ...]], None]


class ProductStateStore:
    def __init__(self, repository: ProductRepository, on_change: Optional[ChangeListener] = None):
        self._repository = repository
        self._products: Tuple[ProductEntity, ...] = ()
        self.on_change = on_change
        self.error: Optional[str] = None
        self.is_loading = False
        self.is_processing = False

    # ==================== 조회 ====================

    @property
    def products(self) -> Tuple[ProductEntity, ...]:
        return self._products

    def snapshot(self) -> List[ProductEntity]:
        return list(self._products)

    def pending_or_error(self) -> List[ProductEntity]:
        return [p for p in self._products if p.is_eligible]

    def completed(self) -> List[ProductEntity]:
        return [p for p in self._products if p.status == ProductStatus.COMPLETED]

    @property
    def completed_count(self) -> int:
        return len(self.completed())

    @property
    def has_pending(self) -> bool:
        return any(p.is_eligible for p in self._products)

    # ==================== 변경 ====================

    def set_all(self, products: List[ProductEntity]) -> None:
        ids = [p.id for p in products]
        if len(ids) != len(set(ids)):
            raise ValueError("상품 ID가 중복되었습니다.")
        self._products = tuple(products)
        if self.on_change:
            self.on_change(self._products)

    def clear_error(self) -> None:
        self.error = None

    async def load(self) -> None:
        """저장소에서 전체 목록을 다시 읽는다. 실패 시 기존 목록 유지"""
        self.is_loading = True
        self.error = None
        try:
            self.set_all(await self._repository.get_all())
        except DomainError as e:
            self.error = str(e)
            logger.error(f"상품 목록 로드 실패: {e}")
        finally:
            self.is_loading = False

    async def add(self, name: str, source: str = ProductSource.MANUAL.value) -> ProductEntity:
        if not validate_name(name):
            raise InvalidProductNameError()
        temp = ProductEntity(id=generate_temp_id(), name=name.strip(), source=source)

        return await optimistic_update(
            self,
            apply=lambda current: current + [temp],
            effect=lambda: self._repository.create(name, source),
            revert=lambda current, _: [p for p in current if p.id != temp.id],
            commit=lambda current, created: [created if p.id == temp.id else p for p in current],
        )

    async def add_many(self, names: List[str], source: str = ProductSource.EXCEL.value) -> List[ProductEntity]:
        valid = validate_names(names)
        if not valid:
            return []
        temps = [ProductEntity(id=generate_temp_id(), name=n, source=source) for n in valid]
        temp_ids = {p.id for p in temps}

        def commit(current: List[ProductEntity], created: List[ProductEntity]) -> List[ProductEntity]:
            return [p for p in current if p.id not in temp_ids] + list(created)

        return await optimistic_update(
            self,
            apply=lambda current: current + temps,
            effect=lambda: self._repository.batch_create(valid, source),
            revert=lambda current, _: [p for p in current if p.id not in temp_ids],
            commit=commit,
        )

    async def remove(self, product_id: str) -> None:
        index = next((i for i, p in enumerate(self._products) if p.id == product_id), None)
        if index is None:
            return
        removed = self._products[index]

        def revert(current: List[ProductEntity], _) -> List[ProductEntity]:
            if any(p.id == product_id for p in current):
                return current
            return current[:index] + [removed] + current[index:]

        await optimistic_update(
            self,
            apply=lambda current: [p for p in current if p.id != product_id],
            effect=lambda: self._repository.delete(product_id),
            revert=revert,
        )

    async def clear(self) -> None:
        """전체 삭제. 삭제 요청은 동시에 보내고 하나라도 실패하면 전체 목록 복원"""
        ids = [p.id for p in self._products]
        if not ids:
            return

        async def delete_all() -> None:
            await asyncio.gather(*(self._repository.delete(product_id) for product_id in ids))

        await optimistic_update(self, apply=lambda current: [], effect=delete_all)

    # ==================== 설명 생성 ====================

    async def process(self, use_case: ProcessProductsUseCase) -> ProcessProductsOutput:
        """대기/오류 상품 설명 생성. 진행 상황은 set_all로 계속 반영된다. 실행 중이면 아무것도 하지 않는다"""
        if self.is_processing:
            logger.warning("이미 상품 설명 생성이 진행 중입니다.")
            return ProcessProductsOutput(products=self.snapshot())
        self.is_processing = True
        self.error = None
        try:
            output = await use_case.execute(self.snapshot(), on_progress=self._merge_progress)
        finally:
            self.is_processing = False
        if output.has_error:
            self.error = output.error_message
        return output

    def _merge_progress(self, products: List[ProductEntity]) -> None:
        # 처리 중 추가/삭제된 상품을 잃지 않도록 id 기준으로 병합
        by_id = {p.id: p for p in products}
        self.set_all([by_id.get(p.id, p) for p in self._products])
