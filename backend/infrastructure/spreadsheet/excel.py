"""엑셀 상품명 가져오기 / 결과 내보내기"""
import io
from pathlib import Path
from typing import Iterable, List, Union

import pandas as pd

from config import settings
from domain.entities.product import ProductEntity
from domain.exceptions import ValidationError
from domain.validation import is_valid_spreadsheet_file, validate_file_size, validate_names

EXPORT_HEADERS = ["상품명", "상품 설명"]
DEFAULT_EXPORT_FILE = "product-descriptions.xlsx"


def read_product_names(source: Union[str, Path, bytes], filename: str = None) -> List[str]:
    """첫 번째 시트의 첫 번째 열에서 상품명 읽기"""
    if isinstance(source, (str, Path)):
        path = Path(source)
        filename = filename or path.name
        content = path.read_bytes()
    else:
        content = source

    if not filename or not is_valid_spreadsheet_file(filename):
        raise ValidationError("올바르지 않은 파일입니다. 엑셀 파일(.xlsx, .xls)만 허용됩니다.")
    if not validate_file_size(len(content), settings.MAX_FILE_SIZE_MB):
        raise ValidationError(f"파일이 너무 큽니다. 최대 {settings.MAX_FILE_SIZE_MB}MB까지 가능합니다.")

    try:
        workbook = pd.ExcelFile(io.BytesIO(content))
        if not workbook.sheet_names:
            raise ValidationError("엑셀 파일에 시트가 없습니다.")
        frame = workbook.parse(workbook.sheet_names[0], header=None, dtype=object)
    except ValidationError:
        raise
    except Exception as e:
        raise ValidationError(f"엑셀 파일을 읽는 중 오류가 발생했습니다: {e}") from e

    column = frame.iloc[:, 0].tolist() if frame.shape[1] > 0 else []
    names = validate_names([value for value in column if isinstance(value, str)])
    if not names:
        raise ValidationError("파일에서 유효한 상품명을 찾을 수 없습니다.")
    return names


def export_products(products: Iterable[ProductEntity], path: Union[str, Path] = DEFAULT_EXPORT_FILE) -> Path:
    """상품명/설명을 엑셀로 저장"""
    rows = [[p.name, p.description] for p in products]
    if not rows:
        raise ValidationError("내보낼 데이터가 없습니다.")

    path = Path(path)
    frame = pd.DataFrame(rows, columns=EXPORT_HEADERS)
    try:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            frame.to_excel(writer, sheet_name="상품", index=False)
            sheet = writer.sheets["상품"]
            sheet.column_dimensions["A"].width = 30
            sheet.column_dimensions["B"].width = 80
    except OSError as e:
        raise ValidationError(f"엑셀 파일로 내보내는 중 오류가 발생했습니다: {e}") from e
    return path
