"""
Tests for spreadsheet reading and record building.
"""

from datetime import date

import polars as pl
import pytest

from apps.ingest.exceptions import DatasetFileError
from apps.ingest.services.readers import build_records, fill_region, read_dataframe
from apps.ingest.services.standardizer import (
    BASIC_EDUCATION,
    EMPLOYEE,
    INSTITUTION,
    PARTICIPANT,
)
from apps.reconciliation.records import EducationRecord, Employee, Institution, Participant


class TestReadDataframe:
    def test_reads_first_excel_sheet(self, write_xlsx):
        path = write_xlsx(
            "employees.xlsx",
            ["성명", "기관명"],
            [["김철수", "창원시종합사회복지관"], ["이영희", "거제노인통합지원센터"]],
        )

        df = read_dataframe(path)

        assert df.columns == ["성명", "기관명"]
        assert df["성명"].to_list() == ["김철수", "이영희"]

    def test_reads_csv_as_text(self, tmp_path):
        path = tmp_path / "institutions.csv"
        path.write_text("수행기관코드,수행기관명\n00123,창원시종합사회복지관\n", encoding="utf-8")

        df = read_dataframe(path)

        # No schema inference, so leading zeros survive
        assert df["수행기관코드"].to_list() == ["00123"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(DatasetFileError, match="File not found"):
            read_dataframe(tmp_path / "missing.xlsx")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{}", encoding="utf-8")

        with pytest.raises(DatasetFileError, match="Unsupported file type"):
            read_dataframe(path)

    def test_unreadable_workbook(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"not a workbook")

        with pytest.raises(DatasetFileError, match="Could not read broken.xlsx"):
            read_dataframe(path)


class TestFillRegion:
    def test_region_inferred_from_name(self):
        row = fill_region({"institution": "창원시종합사회복지관"}, "institution")

        assert row["region"] == "경상남도"
        assert row["district"] == "창원시"

    def test_existing_region_is_kept(self):
        row = fill_region(
            {"name": "창원시종합사회복지관", "region": "경남", "district": "마산"},
            "name",
        )

        assert row["region"] == "경남"
        assert row["district"] == "마산"

    def test_unknown_name_leaves_none(self):
        row = fill_region({"institution": "알수없는기관"}, "institution")

        assert row["region"] is None
        assert row["district"] is None


class TestBuildRecords:
    def test_employee_column_shift_is_repaired(self):
        df = pl.DataFrame(
            {
                "name": ["특화", "이영희"],
                "career_type": ["김철수", "4년이상"],
                "birth_date": ["4년이상", "1985-05-05"],
                "gender": ["1990-01-01", "여"],
                "hire_date": ["남", "2023-07-01"],
                "resign_date": ["2024-01-01", None],
                "notes": ["2024-06-30 퇴사", None],
                "institution": ["창원시종합사회복지관", "창원시종합사회복지관"],
                "row_number": [2, 3],
            }
        )

        records, corrected = build_records(df, EMPLOYEE, now=date(2025, 1, 1))

        assert corrected == 1
        assert all(isinstance(record, Employee) for record in records)
        shifted, regular = records
        assert shifted.name == "김철수"
        assert shifted.birth_date == "1990-01-01"
        assert shifted.gender == "남"
        assert shifted.hire_date == "2024-01-01"
        assert shifted.resign_date == "2024-06-30"
        assert shifted.is_active is False
        assert shifted.corrected is True
        assert regular.name == "이영희"
        assert regular.corrected is False
        assert regular.extra["row_number"] == 3

    def test_institution_counts_are_parsed(self):
        df = pl.DataFrame(
            {
                "code": ["A48120001"],
                "name": ["창원시종합사회복지관"],
                "allocated_social_workers_gov": ["2.0"],
                "allocated_life_support_gov": ["4"],
                "hired_life_support": [None],
            }
        )

        records, corrected = build_records(df, INSTITUTION)

        assert corrected == 0
        (institution,) = records
        assert isinstance(institution, Institution)
        assert institution.allocated_social_workers_gov == 2
        assert institution.allocated_life_support_gov == 4
        assert institution.hired_life_support == 0
        assert institution.allocated_social_workers == 0
        assert institution.district == "창원시"

    def test_education_status_and_course_type(self):
        df = pl.DataFrame(
            {
                "name": ["김철수", "이영희"],
                "course": ["전담사회복지사 기본교육", "직무역량 강화"],
                "status": ["수료", None],
                "institution": ["창원시종합사회복지관", "창원시종합사회복지관"],
            }
        )

        records, _ = build_records(df, BASIC_EDUCATION)

        assert all(isinstance(record, EducationRecord) for record in records)
        assert [record.status for record in records] == ["수료", "미수료"]
        assert [record.course_type for record in records] == ["기본", "기본"]

    def test_participant_gender_keeps_unknown_values(self):
        df = pl.DataFrame({"name": ["김철수", "최수진"], "gender": ["M", "기타"]})

        records, _ = build_records(df, PARTICIPANT)

        assert all(isinstance(record, Participant) for record in records)
        assert [record.gender for record in records] == ["남", "기타"]
