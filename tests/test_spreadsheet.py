"""엑셀 상품명 가져오기 / 내보내기 테스트"""
import pandas as pd
import pytest
from openpyxl import load_workbook

from conftest import make_products
from domain.exceptions import ValidationError
from infrastructure.spreadsheet.excel import EXPORT_HEADERS, export_products, read_product_names


def write_sheet(path, rows, sheet_name="Sheet1"):
    pd.DataFrame(rows).to_excel(path, sheet_name=sheet_name, index=False, header=False)
    return path


class TestReadProductNames:
    def test_reads_first_column_of_first_sheet(self, tmp_path):
        path = tmp_path / "products.xlsx"
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame([["신라면", "무시"], ["  초코파이 ", "x"], ["", "y"], ["새우깡", "z"]]) \
                .to_excel(writer, sheet_name="first", index=False, header=False)
            pd.DataFrame([["다른 시트"]]).to_excel(writer, sheet_name="second", index=False, header=False)

        assert read_product_names(path) == ["신라면", "초코파이", "새우깡"]

    def test_reads_bytes_with_filename(self, tmp_path):
        path = write_sheet(tmp_path / "upload.xlsx", [["a"], ["b"]])
        assert read_product_names(path.read_bytes(), filename="upload.xlsx") == ["a", "b"]

    def test_rejects_non_excel_extension(self, tmp_path):
        path = tmp_path / "products.csv"
        path.write_text("a\nb\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            read_product_names(path)

    def test_rejects_sheet_without_names(self, tmp_path):
        path = write_sheet(tmp_path / "empty.xlsx", [["   "], [None]])
        with pytest.raises(ValidationError):
            read_product_names(path)

    def test_rejects_broken_file(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"not a workbook")
        with pytest.raises(ValidationError):
            read_product_names(path)

    def test_reads_legacy_xls(self, tmp_path):
        xlwt = pytest.importorskip("xlwt")
        book = xlwt.Workbook()
        sheet = book.add_sheet("Sheet1")
        for row, name in enumerate(["신라면", "  초코파이 ", ""]):
            sheet.write(row, 0, name)
        path = tmp_path / "legacy.xls"
        book.save(str(path))

        assert read_product_names(path) == ["신라면", "초코파이"]


class TestExportProducts:
    def test_export_completed_products(self, tmp_path):
        a, b = make_products("신라면", "초코파이")
        path = export_products([a.complete("라면 설명"), b.complete("파이 설명")], tmp_path / "out.xlsx")

        frame = pd.read_excel(path)
        assert list(frame.columns) == EXPORT_HEADERS
        assert frame.values.tolist() == [["신라면", "라면 설명"], ["초코파이", "파이 설명"]]

        sheet = load_workbook(path).active
        assert sheet.column_dimensions["A"].width == 30
        assert sheet.column_dimensions["B"].width == 80

    def test_export_nothing(self, tmp_path):
        with pytest.raises(ValidationError):
            export_products([], tmp_path / "out.xlsx")
