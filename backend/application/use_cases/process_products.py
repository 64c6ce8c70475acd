"""상품 설명 일괄 생성 유스케이스 (배치 처리 엔진)"""
import inspect
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Union

from loguru import logger

from domain.entities.product import ProductEntity
from domain.enums import ProductStatus
from domain.exceptions import DescriptionProviderError, DomainError
from domain.identifiers import is_temp_id
from domain.reconciliation import match_results
from application.ports.description_provider import DescriptionProviderPort
from application.ports.product_repository import ProductRepository

DEFAULT_BATCH_SIZE = 3
BATCH_FAILED_MESSAGE = "AI 연결 중 오류가 발생했습니다. 일부 상품이 실패했습니다."
UNMATCHED_MESSAGE = "AI 응답에서 해당 상품의 설명을 찾지 못했습니다."
UNEXPECTED_ERROR_MESSAGE = "AI 설명 생성 중 예상하지 못한 오류가 발생했습니다"
UNEXPECTED_ERROR_CODE = "UNEXPECTED_ERROR"

ProgressCallback = Callable[[List[ProductEntity]], Union[None, Awaitable[None]]]


@dataclass
class BatchReport:
    index: int
    product_ids: List[str]
    success: bool
    completed_ids: List[str] = field(default_factory=list)
    fallback_ids: List[str] = field(default_factory=list)
    unmatched_ids: List[str] = field(default_factory=list)
    error: Optional[str] = None
    error_code: Optional[str] = None


@dataclass
class ProcessProductsOutput:
    products: List[ProductEntity]
    batches: List[BatchReport] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    persistence_errors: List[str] = field(default_factory=list)

    @property
    def has_error(self) -> bool:
        return any(not b.success for b in self.batches)

    @property
    def error_message(self) -> Optional[str]:
        return BATCH_FAILED_MESSAGE if self.has_error else None


def chunk(items: Sequence[ProductEntity], size: int) -> List[List[ProductEntity]]:
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def replace_products(products: Sequence[ProductEntity],
                     updated: Dict[str, ProductEntity]) -> List[ProductEntity]:
    """id 기준으로 교체한 새 목록 (입력 목록은 변경하지 않음)"""
    return [updated.get(p.id, p) for p in products]


class ProcessProductsUseCase:
    """
    pending/error 상품을 배치 단위로 AI에 보내 설명을 채운다.

    배치는 순차 실행하고, 배치마다 저장 후 진행 상황을 콜백으로 전달한다.
    실패한 배치는 해당 상품만 error로 표시하고 다음 배치를 계속 처리한다.
    """

    def __init__(self, repository: ProductRepository, provider: DescriptionProviderPort,
                 batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError("batch_size는 1 이상이어야 합니다.")
        self._repository = repository
        self._provider = provider
        self._batch_size = batch_size

    async def execute(self, products: Sequence[ProductEntity],
                      on_progress: Optional[ProgressCallback] = None) -> ProcessProductsOutput:
        # 1. 처리 대상 선택 (아직 서버에 저장되지 않은 임시 상품 제외)
        eligible = [p for p in products if p.is_eligible and not is_temp_id(p.id)]
        output = ProcessProductsOutput(products=list(products))
        if not eligible:
            return output

        logger.info(f"상품 설명 생성 시작: {len(eligible)}건, 배치 크기 {self._batch_size}")

        # 2. processing 상태로 전환. 게시는 저장 요청보다 먼저 (동시 실행이 같은 상품을 고르지 않음)
        processing = {p.id: p.mark_processing() for p in eligible}
        output.products = replace_products(output.products, processing)
        await self._publish(on_progress, output.products)
        for product_id in processing:
            await self._persist(output, product_id, ProductStatus.PROCESSING)

        # 3~4. 배치 순차 처리
        batches = chunk([processing[p.id] for p in eligible], self._batch_size)
        for index, batch in enumerate(batches):
            report = await self._process_batch(index, batch, output)
            output.batches.append(report)
            await self._publish(on_progress, output.products)

        completed = sum(len(b.completed_ids) for b in output.batches)
        logger.info(f"상품 설명 생성 종료: 완료 {completed}/{len(eligible)}건, "
                    f"실패 배치 {sum(1 for b in output.batches if not b.success)}개")
        return output

    async def _process_batch(self, index: int, batch: List[ProductEntity],
                             output: ProcessProductsOutput) -> BatchReport:
        report = BatchReport(index=index, product_ids=[p.id for p in batch], success=True)
        names = [p.name for p in batch]
        updated: Dict[str, ProductEntity] = {}

        try:
            results = await self._provider.get_descriptions(names)
        except DescriptionProviderError as e:
            logger.error(f"배치 {index + 1} 설명 생성 실패 [{e.code}]: {e}")
            self._fail_batch(report, batch, updated, output, str(e), e.code)
        except Exception as e:
            # 그 밖의 오류도 해당 배치만 실패 처리
            logger.exception(f"배치 {index + 1} 설명 생성 중 예상하지 못한 오류")
            self._fail_batch(report, batch, updated, output,
                             f"{UNEXPECTED_ERROR_MESSAGE}: {type(e).__name__}: {e}", UNEXPECTED_ERROR_CODE)
        else:
            for outcome in match_results(batch, results):
                product = outcome.product
                if outcome.matched:
                    if outcome.used_fallback:
                        logger.warning(f"위치 기반 매칭 사용: '{product.name}' ← '{outcome.result.name}'")
                        report.fallback_ids.append(product.id)
                    updated[product.id] = product.complete(outcome.result.description)
                    report.completed_ids.append(product.id)
                else:
                    logger.warning(f"AI 결과 매칭 실패: '{product.name}'")
                    updated[product.id] = product.fail(UNMATCHED_MESSAGE)
                    report.unmatched_ids.append(product.id)

        output.products = replace_products(output.products, updated)
        for product in batch:
            result = updated[product.id]
            if result.status == ProductStatus.COMPLETED:
                await self._persist(output, product.id, description=result.description)
            else:
                await self._persist(output, product.id, ProductStatus.ERROR, result.error_message)
        return report

    @staticmethod
    def _fail_batch(report: BatchReport, batch: List[ProductEntity], updated: Dict[str, ProductEntity],
                    output: ProcessProductsOutput, message: str, code: Optional[str]) -> None:
        report.success = False
        report.error = message
        report.error_code = code
        output.errors.append(message)
        for product in batch:
            updated[product.id] = product.fail(message)

    async def _persist(self, output: ProcessProductsOutput, product_id: str,
                       status: Optional[ProductStatus] = None, error_message: Optional[str] = None,
                       description: Optional[str] = None) -> None:
        """저장 실패는 기록만 하고 실행은 계속한다 (다음 조회 시 서버 상태로 맞춰짐)"""
        try:
            if description is not None:
                await self._repository.update_description(product_id, description)
            else:
                await self._repository.update_status(product_id, status, error_message)
        except DomainError as e:
            logger.error(f"상품 상태 저장 실패: {product_id} - {e}")
            output.persistence_errors.append(f"{product_id}: {e}")

    @staticmethod
    async def _publish(on_progress: Optional[ProgressCallback], products: List[ProductEntity]) -> None:
        if on_progress is None:
            return
        result = on_progress(list(products))
        if inspect.isawaitable(result):
            await result
