"""
Central pytest configuration and shared fixtures.

This file provides common fixtures for all tests in the project.
Fixtures are available to all test files automatically.
"""
from datetime import date
from pathlib import Path
from typing import Callable, Generator

import pytest
from loguru import logger
from openpyxl import Workbook

from apps.reconciliation.records import EducationRecord, Employee, Institution, Participant

SNAPSHOT_DATE = date(2025, 1, 1)


# ============================================================================
# Logging Fixtures
# ============================================================================

@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """
    Capture loguru messages emitted during the test.

    Yields the list that collects the formatted message text of every record
    at DEBUG level and above.
    """
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        level="DEBUG",
        format="{message}",
    )
    yield messages
    logger.remove(handler_id)


# ============================================================================
# Path Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def write_xlsx(tmp_path: Path) -> Callable[..., Path]:
    """
    Return a helper that writes rows under a header into a temporary workbook.

    Usage:
        path = write_xlsx("employees.xlsx", ["성명", "기관명"], [["김철수", "..."]])
    """

    def _write(filename: str, headers: list[str], rows: list[list]) -> Path:
        wb = Workbook()
        ws = wb.active
        ws.append(headers)
        for row in rows:
            ws.append(row)
        path = tmp_path / filename
        wb.save(path)
        return path

    return _write


# ============================================================================
# Dataset Fixtures
# ============================================================================

@pytest.fixture
def snapshot_date() -> date:
    return SNAPSHOT_DATE


@pytest.fixture
def sample_institutions() -> list[Institution]:
    """Two institutions in different districts, one without staffing figures."""
    return [
        Institution(
            code="A48120001",
            name="창원시종합사회복지관",
            region="경상남도",
            district="창원시",
            allocated_social_workers=2,
            allocated_life_support=4,
            allocated_social_workers_gov=2,
            allocated_life_support_gov=4,
            hired_social_workers=2,
            hired_life_support=3,
        ),
        Institution(
            code="A48310002",
            name="거제노인통합지원센터",
            region="경상남도",
            district="거제시",
        ),
    ]


@pytest.fixture
def sample_employees() -> list[Employee]:
    return [
        Employee(
            name="김철수",
            institution="창원시종합사회복지관",
            institution_code="A48120001",
            job_type="전담사회복지사",
            birth_date="1990-01-01",
            hire_date="2024-01-01",
        ),
        Employee(
            name="이영희",
            institution="창원시종합사회복지관",
            institution_code="A48120001",
            job_type="생활지원사",
            birth_date="1985-05-05",
            hire_date="2023-07-01",
        ),
        Employee(
            name="박민수",
            institution="창원시종합사회복지관",
            institution_code="A48120001",
            job_type="생활지원사",
            birth_date="1970-03-03",
            hire_date="2020-01-01",
            resign_date="2024-06-30",
        ),
    ]


@pytest.fixture
def sample_participants() -> list[Participant]:
    return [
        Participant(
            name="김철수",
            institution="창원시종합사회복지관",
            institution_code="A48120001",
            job_type="전담사회복지사",
            birth_date="1990-01-01",
            status="정상",
            basic_training="수료",
            advanced_education="수료",
            final_completion="수료",
        ),
        Participant(
            name="최수진",
            institution="거제노인통합지원센터",
            institution_code="A48310002",
            job_type="생활지원사",
            birth_date="1992-02-02",
            status="정상",
            basic_training="수료",
        ),
    ]


@pytest.fixture
def sample_basic_education() -> list[EducationRecord]:
    return [
        EducationRecord(
            name="김철수",
            institution="창원시종합사회복지관",
            institution_code="A48120001",
            course="전담사회복지사 기본교육",
            course_type="기본",
            status="수료",
            job_type="전담사회복지사",
            year="2024",
        ),
        EducationRecord(
            name="이영희",
            institution="창원시종합사회복지관",
            institution_code="A48120001",
            course="생활지원사 기본교육",
            course_type="기본",
            status="진행중",
            job_type="생활지원사",
            year="2024",
        ),
    ]


@pytest.fixture
def sample_advanced_education() -> list[EducationRecord]:
    return [
        EducationRecord(
            name="김철수",
            institution="창원시종합사회복지관",
            institution_code="A48120001",
            course="전담사회복지사 심화교육",
            course_type="심화",
            status="수료",
            job_type="전담사회복지사",
            year="2024",
        ),
    ]


# ============================================================================
# Test Markers Documentation
# ============================================================================

def pytest_configure(config):
    """
    Configure custom pytest markers.

    This makes the markers available to all tests and allows
    pytest to validate marker usage with --strict-markers.
    """
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers",
        "pipeline: marks end-to-end pipeline tests"
    )
    config.addinivalue_line(
        "markers",
        "unit: marks fast unit tests"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks integration tests"
    )
