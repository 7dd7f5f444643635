"""
Excel export of analysis results.

One sheet with a row per institution (Korean headers, styled header row,
Excel table, fitted column widths) and one summary sheet.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from loguru import logger
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table as ExcelTable
from openpyxl.worksheet.table import TableStyleInfo
from openpyxl.worksheet.worksheet import Worksheet

from apps.reconciliation.records import AnalysisRow


@dataclass(frozen=True)
class ExportColumn:
    name: str
    header: str
    number_format: str | None = None


PERCENT = "0.0"

ANALYSIS_COLUMNS = [
    ExportColumn("institution_code", "기관코드"),
    ExportColumn("institution_name", "기관명"),
    ExportColumn("region", "광역시"),
    ExportColumn("district", "지자체"),
    ExportColumn("management", "관리주체"),
    ExportColumn("allocated_gov_social", "배정_전담(복지부)"),
    ExportColumn("allocated_gov_life", "배정_생활(복지부)"),
    ExportColumn("allocated_gov_total", "배정_계(복지부)"),
    ExportColumn("allocated_social", "배정_전담(기관)"),
    ExportColumn("allocated_life", "배정_생활(기관)"),
    ExportColumn("allocated_total", "배정_계(기관)"),
    ExportColumn("hired_social", "채용_전담"),
    ExportColumn("hired_life", "채용_생활"),
    ExportColumn("hired_total", "채용_계"),
    ExportColumn("employment_social_rate", "채용률_전담(%)", PERCENT),
    ExportColumn("employment_life_rate", "채용률_생활(%)", PERCENT),
    ExportColumn("employment_rate", "채용률_계(%)", PERCENT),
    ExportColumn("active_social", "재직_전담"),
    ExportColumn("active_life", "재직_생활"),
    ExportColumn("active_total", "재직_계"),
    ExportColumn("fill_social_rate", "충원률_전담(%)", PERCENT),
    ExportColumn("fill_life_rate", "충원률_생활(%)", PERCENT),
    ExportColumn("fill_rate", "충원률_계(%)", PERCENT),
    ExportColumn("tenure_social", "평균근속_전담(일)"),
    ExportColumn("tenure_life", "평균근속_생활(일)"),
    ExportColumn("education_target_social", "교육대상_전담"),
    ExportColumn("education_target_life", "교육대상_생활"),
    ExportColumn("education_target_total", "교육대상_계"),
    ExportColumn("education_completed_social", "이수_전담"),
    ExportColumn("education_completed_life", "이수_생활"),
    ExportColumn("education_completed_total", "이수_계"),
    ExportColumn("education_rate_social", "이수율_전담(%)", PERCENT),
    ExportColumn("education_rate_life", "이수율_생활(%)", PERCENT),
    ExportColumn("education_rate_total", "이수율_계(%)", PERCENT),
    ExportColumn("education_d_rate_social", "채용대비이수율_전담(%)", PERCENT),
    ExportColumn("education_d_rate_life", "채용대비이수율_생활(%)", PERCENT),
    ExportColumn("education_d_rate_total", "채용대비이수율_계(%)", PERCENT),
    ExportColumn("employment_reference", "기준일"),
]

SUMMARY_LABELS = [
    ("total_institutions", "기관 수"),
    ("total_allocated_gov", "배정 인원(복지부)"),
    ("total_allocated", "배정 인원(기관)"),
    ("total_employed", "채용 인원"),
    ("total_social_workers", "채용 전담사회복지사"),
    ("total_life_support", "채용 생활지원사"),
    ("total_active", "재직 인원"),
    ("total_completed", "교육 이수 인원"),
    ("avg_employment_rate", "평균 채용률(%)"),
    ("avg_education_rate", "평균 이수율(%)"),
]

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill("solid", fgColor="DDDDDD")


class AnalysisWorkbookBuilder:
    """Builds the analysis export workbook."""

    INSTITUTION_SHEET_NAME = "기관별 분석"
    SUMMARY_SHEET_NAME = "요약"
    TABLE_NAME = "InstitutionAnalysis"

    def __init__(self, columns: Sequence[ExportColumn] = ANALYSIS_COLUMNS, style_iter: int = 9):
        self.columns = list(columns)
        self.style_iter = style_iter

    def build_workbook(
        self, rows: Sequence[AnalysisRow], summary: dict[str, Any] | None
    ) -> Workbook:
        wb = Workbook()

        ws_rows = wb.active
        ws_rows.title = self.INSTITUTION_SHEET_NAME
        self._write_rows(ws_rows, rows)
        self._fit_column_widths(ws_rows, rows)
        if rows:
            self._create_table(ws_rows, len(rows))
        ws_rows.freeze_panes = "C2"

        ws_summary = wb.create_sheet(title=self.SUMMARY_SHEET_NAME)
        self._write_summary(ws_summary, summary)

        return wb

    def save(
        self,
        rows: Sequence[AnalysisRow],
        summary: dict[str, Any] | None,
        path: str | Path,
    ) -> Path:
        """Write the workbook to ``path``, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.build_workbook(rows, summary).save(path)
        logger.info(f"Wrote analysis of {len(rows)} institutions to {path}")
        return path

    def _write_rows(self, ws: Worksheet, rows: Sequence[AnalysisRow]) -> None:
        for col_idx, column in enumerate(self.columns, start=1):
            cell = ws.cell(row=1, column=col_idx, value=column.header)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

        for row_idx, row in enumerate(rows, start=2):
            values = row.to_dict()
            for col_idx, column in enumerate(self.columns, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=values.get(column.name))
                if column.number_format:
                    cell.number_format = column.number_format

    def _fit_column_widths(self, ws: Worksheet, rows: Sequence[AnalysisRow]) -> None:
        for col_idx, column in enumerate(self.columns, start=1):
            # Hangul renders about twice as wide as Latin characters
            max_width = len(column.header) * 2
            for row in rows:
                value = getattr(row, column.name, None)
                if value is not None:
                    max_width = max(max_width, len(str(value)) * 2)
            ws.column_dimensions[get_column_letter(col_idx)].width = max(10, min(max_width + 2, 40))

    def _create_table(self, ws: Worksheet, row_count: int) -> None:
        """Formats the data range as an official Excel Table."""
        max_col_letter = get_column_letter(len(self.columns))
        table = ExcelTable(
            displayName=self.TABLE_NAME,
            ref=f"A1:{max_col_letter}{row_count + 1}",
        )
        table.tableStyleInfo = TableStyleInfo(
            name=f"TableStyleMedium{self.style_iter}",
            showFirstColumn=False,
            showLastColumn=False,
            showRowStripes=True,
            showColumnStripes=False,
        )
        ws.add_table(table)

    def _write_summary(self, ws: Worksheet, summary: dict[str, Any] | None) -> None:
        for col_idx, header in enumerate(("항목", "값"), start=1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL

        if summary is None:
            ws.cell(row=2, column=1, value="분석할 기관이 없습니다")
        else:
            for row_idx, (key, label) in enumerate(SUMMARY_LABELS, start=2):
                ws.cell(row=row_idx, column=1, value=label)
                ws.cell(row=row_idx, column=2, value=summary.get(key))

        ws.column_dimensions["A"].width = 28
        ws.column_dimensions["B"].width = 16
