"""상품 설명 생성 클라이언트 CLI

Usage:
    python tools/cli.py list                           # 상품 목록
    python tools/cli.py add "신라면" "초코파이"          # 상품 추가
    python tools/cli.py import upload/products.xlsx    # 엑셀 첫 열에서 상품명 가져오기
    python tools/cli.py process                        # 대기/오류 상품 설명 생성
    python tools/cli.py export result.xlsx             # 완료 상품 엑셀로 내보내기
    python tools/cli.py remove <id>                    # 상품 삭제
    python tools/cli.py clear                          # 전체 삭제
    python tools/cli.py list --backend local --json    # 로컬 저장소 사용, JSON 출력
"""
import argparse
import asyncio
import json
import sys
import os
from pathlib import Path

_BACKEND_ROOT = str(Path(__file__).resolve().parent.parent)
if _BACKEND_ROOT not in sys.path:
    sys.path.insert(0, _BACKEND_ROOT)
# 파일 인자는 실행 위치 기준, 설정(.env.backend)과 저장소 경로는 backend 기준
_INVOCATION_DIR = os.getcwd()
os.chdir(_BACKEND_ROOT)

from loguru import logger

from config import settings
from domain.enums import ProductStatus
from domain.exceptions import DomainError
from application.product_store import ProductStateStore
from application.use_cases.process_products import ProcessProductsUseCase
from infrastructure.ai.vertex_description_provider import VertexDescriptionProvider
from infrastructure.repository_factory import BACKENDS, build_product_repository
from infrastructure.spreadsheet.excel import DEFAULT_EXPORT_FILE, export_products, read_product_names

STATUS_LABELS = {
    ProductStatus.PENDING: "대기",
    ProductStatus.PROCESSING: "처리중",
    ProductStatus.COMPLETED: "완료",
    ProductStatus.ERROR: "오류",
}


def format_product(p) -> str:
    label = STATUS_LABELS.get(p.status, p.status.value)
    line = f"  {p.id:<36} | {label:<4} | {p.name}"
    if p.status == ProductStatus.ERROR and p.error_message:
        line += f"\n{'':>40}→ {p.error_message}"
    return line


def print_products(products, as_json: bool = False):
    if as_json:
        rows = [{"id": p.id, "name": p.name, "description": p.description,
                 "status": p.status.value, "source": p.source,
                 "error_message": p.error_message,
                 "created_at": p.created_at, "updated_at": p.updated_at} for p in products]
        print(json.dumps(rows, ensure_ascii=False, indent=2, default=str))
        return
    if not products:
        print("등록된 상품이 없습니다.")
        return
    for p in products:
        print(format_product(p))
    completed = sum(1 for p in products if p.status == ProductStatus.COMPLETED)
    print(f"\n총 {len(products)}건 (완료 {completed}건)")


PATH_COMMANDS = ("import", "export")


def resolve_user_paths(args, cwd: str):
    """import/export 파일 경로는 실행한 위치 기준 절대 경로로 바꾼다"""
    if args.command not in PATH_COMMANDS:
        return args
    paths = args.args or ([DEFAULT_EXPORT_FILE] if args.command == "export" else [])
    args.args = [p if os.path.isabs(p) else os.path.join(cwd, p) for p in paths]
    return args


def print_progress(products):
    counts = {status: 0 for status in ProductStatus}
    for p in products:
        counts[p.status] += 1
    summary = ", ".join(f"{STATUS_LABELS[s]} {n}" for s, n in counts.items())
    print(f"  진행: {summary}")


async def run(args) -> int:
    repository = build_product_repository(args.backend)
    store = ProductStateStore(repository)
    await store.load()
    if store.error:
        print(f"상품 목록을 불러오지 못했습니다: {store.error}", file=sys.stderr)
        return 1

    cmd = args.command
    if cmd == "list":
        print_products(store.products, args.json)

    elif cmd == "add":
        for name in args.args:
            product = await store.add(name)
            print(f"추가: {product.name} ({product.id})")

    elif cmd == "import":
        if not args.args:
            print("엑셀 파일을 지정해주세요: cli.py import <file.xlsx>", file=sys.stderr)
            return 2
        names = read_product_names(args.args[0])
        created = await store.add_many(names)
        print(f"가져오기 완료: {len(created)}건")

    elif cmd == "process":
        if not store.has_pending:
            print("처리할 상품이 없습니다.")
            return 0
        use_case = ProcessProductsUseCase(repository, VertexDescriptionProvider(),
                                          batch_size=args.batch_size)
        store.on_change = print_progress
        output = await store.process(use_case)
        store.on_change = None
        for report in output.batches:
            if report.fallback_ids:
                print(f"  배치 {report.index + 1}: 위치 기반 매칭 {len(report.fallback_ids)}건")
        print_products(store.products)
        if output.has_error:
            print(f"\n{output.error_message}", file=sys.stderr)
            return 1

    elif cmd == "export":
        path = args.args[0] if args.args else DEFAULT_EXPORT_FILE
        saved = export_products(store.completed(), Path(path))
        print(f"내보내기 완료: {saved} ({store.completed_count}건)")

    elif cmd == "remove":
        for product_id in args.args:
            await store.remove(product_id)
            print(f"삭제: {product_id}")

    elif cmd == "clear":
        count = len(store.products)
        await store.clear()
        print(f"전체 삭제: {count}건")

    else:
        print(f"알 수 없는 명령: {cmd}", file=sys.stderr)
        return 2
    return 0


def main():
    ap = argparse.ArgumentParser(description="상품 설명 생성 CLI")
    ap.add_argument("command", help="list | add | import | process | export | remove | clear")
    ap.add_argument("args", nargs="*", help="추가 인자")
    ap.add_argument("--backend", "-b", choices=BACKENDS, default=settings.STORAGE_BACKEND,
                    help="상품 저장소 (api | local)")
    ap.add_argument("--batch-size", type=int, default=settings.BATCH_SIZE, help="AI 배치 크기")
    ap.add_argument("--json", action="store_true", help="JSON 출력 (list)")
    ap.add_argument("--verbose", "-v", action="store_true", help="상세 로그")
    args = resolve_user_paths(ap.parse_args(), _INVOCATION_DIR)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    try:
        code = asyncio.run(run(args))
    except DomainError as e:
        print(f"오류: {e}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
