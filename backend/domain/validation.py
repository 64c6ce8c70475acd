"""상품명/업로드 파일 검증"""
from typing import Any, Iterable, List

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls")


def validate_name(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def validate_names(values: Iterable[Any]) -> List[str]:
    """유효한 상품명만 남기고 앞뒤 공백 제거 (순서 유지)"""
    if not values:
        return []
    return [value.strip() for value in values if validate_name(value)]


def is_valid_spreadsheet_file(filename: str) -> bool:
    return filename.lower().endswith(SPREADSHEET_EXTENSIONS)


def validate_file_size(size: int, max_size_mb: int = 10) -> bool:
    return size <= max_size_mb * 1024 * 1024
