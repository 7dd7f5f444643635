"""
Snapshot analysis pipeline.

Loads the datasets stored on a snapshot and runs the integrated analysis
with the snapshot date as reference date.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from django.conf import settings
from loguru import logger

from apps.ingest.exceptions import SnapshotNotFound
from apps.ingest.models import DatasetUpload, Snapshot
from apps.reconciliation.records import (
    AnalysisRow,
    EducationRecord,
    Employee,
    Institution,
    Participant,
)
from apps.reconciliation.services import (
    InstitutionRef,
    analyze,
    calculate_summary_stats,
    find_best_matching_institution,
)


@dataclass
class SnapshotDatasets:
    snapshot_date: date
    employees: list[Employee] = field(default_factory=list)
    institutions: list[Institution] = field(default_factory=list)
    basic_education: list[EducationRecord] = field(default_factory=list)
    advanced_education: list[EducationRecord] = field(default_factory=list)
    participants: list[Participant] = field(default_factory=list)


@dataclass
class AnalysisResult:
    snapshot_date: date
    rows: list[AnalysisRow]
    summary: dict[str, Any] | None
    unmatched_institutions: list[str]


def get_snapshot(snapshot_date: date | None = None) -> Snapshot:
    """
    Snapshot for ``snapshot_date``, or the current one when no date is given.

    Raises:
        SnapshotNotFound: if there is no such snapshot
    """
    if snapshot_date is None:
        snapshot = Snapshot.current()
        if snapshot is None:
            raise SnapshotNotFound("No snapshots have been imported yet")
        return snapshot
    try:
        return Snapshot.objects.get(date=snapshot_date)
    except Snapshot.DoesNotExist as e:
        raise SnapshotNotFound(f"No snapshot for {snapshot_date.isoformat()}") from e


def load_snapshot_datasets(snapshot_date: date | None = None) -> SnapshotDatasets:
    """
    Typed records of every completed upload on a snapshot.

    Kinds without a completed upload load as empty lists.
    """
    snapshot = get_snapshot(snapshot_date)
    datasets = SnapshotDatasets(snapshot_date=snapshot.date)
    attribute = {
        DatasetUpload.Kind.EMPLOYEE: "employees",
        DatasetUpload.Kind.INSTITUTION: "institutions",
        DatasetUpload.Kind.BASIC_EDUCATION: "basic_education",
        DatasetUpload.Kind.ADVANCED_EDUCATION: "advanced_education",
        DatasetUpload.Kind.PARTICIPANT: "participants",
    }
    uploads = snapshot.uploads.filter(status=DatasetUpload.Status.COMPLETED)
    for upload in uploads:
        setattr(datasets, attribute[upload.kind], upload.load_records())

    logger.info(
        f"Loaded {snapshot}: {len(datasets.employees)} employees, "
        f"{len(datasets.institutions)} institutions, "
        f"{len(datasets.basic_education)} basic / {len(datasets.advanced_education)} advanced, "
        f"{len(datasets.participants)} participants"
    )
    return datasets


def find_unmatched_institutions(employees: list[Any], institutions: list[Any]) -> list[str]:
    """Institution names/codes used by employees that match no institution row."""
    unmatched = set()
    seen = set()
    for employee in employees:
        ref = InstitutionRef.of(employee)
        if ref in seen or (ref.code is None and ref.name is None):
            continue
        seen.add(ref)
        if find_best_matching_institution(employee, institutions) is None:
            unmatched.add(ref.name or ref.code)
    return sorted(unmatched)


def run_snapshot_analysis(snapshot_date: date | None = None) -> AnalysisResult:
    """Analyze a snapshot (the current one by default)."""
    datasets = load_snapshot_datasets(snapshot_date)
    rows = analyze(
        datasets.employees,
        datasets.institutions,
        datasets.basic_education,
        datasets.advanced_education,
        datasets.participants,
        snapshot_date=datasets.snapshot_date,
        default_management=settings.DEFAULT_AREA_NAME,
        default_region=settings.DEFAULT_REGION,
    )
    unmatched = find_unmatched_institutions(datasets.employees, datasets.institutions)
    if unmatched:
        logger.warning(
            f"{len(unmatched)} employee institutions match no institution row: "
            f"{', '.join(unmatched[:10])}{' ...' if len(unmatched) > 10 else ''}"
        )
    return AnalysisResult(
        snapshot_date=datasets.snapshot_date,
        rows=rows,
        summary=calculate_summary_stats(rows),
        unmatched_institutions=unmatched,
    )

