"""
Dataset import service.

Reads one spreadsheet, standardizes and validates it, builds reconciliation
records and stores them on a snapshot, replacing any earlier upload of the
same kind.
"""

from datetime import date
from pathlib import Path

from django.db import transaction
from django.utils import timezone
from loguru import logger

from apps.ingest.exceptions import DatasetValidationError
from apps.ingest.models import DatasetUpload, Snapshot
from apps.ingest.services.readers import build_records, read_dataframe
from apps.ingest.services.standardizer import standardize_dataframe
from apps.ingest.services.validators import validate_dataset


class DatasetImporter:
    """
    Imports one dataset file into a snapshot.

    Statistics are kept in ``self.stats`` and copied onto the
    DatasetUpload row together with the final status.
    """

    def __init__(self, snapshot: Snapshot, kind: str, path: str | Path):
        self.snapshot = snapshot
        self.kind = kind
        self.path = Path(path)
        self.upload: DatasetUpload | None = None
        self.stats = {
            "total": 0,
            "stored": 0,
            "skipped": 0,
            "corrected": 0,
        }

    def _start(self) -> DatasetUpload:
        upload, _ = DatasetUpload.objects.get_or_create(
            snapshot=self.snapshot, kind=self.kind
        )
        upload.source_filename = self.path.name
        upload.status = DatasetUpload.Status.PROCESSING
        upload.started_at = timezone.now()
        upload.completed_at = None
        upload.error_message = None
        upload.total_rows = 0
        upload.rows_stored = 0
        upload.rows_skipped = 0
        upload.rows_corrected = 0
        upload.records = []
        upload.save()
        return upload

    def run(self) -> DatasetUpload:
        """
        Main processing entry point.

        On failure the error is saved on the upload row and re-raised.
        """
        self.upload = self._start()
        upload = self.upload
        try:
            df = read_dataframe(self.path)
            self.stats["total"] = df.height

            df = standardize_dataframe(df, self.kind)
            logger.info(f"Standardized {self.kind}: {df.height} rows remaining after filtering")

            is_valid, errors = validate_dataset(df, self.kind)
            if not is_valid:
                raise DatasetValidationError(errors)

            records, corrected = build_records(df, self.kind, now=self.snapshot.date)
            self.stats["stored"] = len(records)
            self.stats["skipped"] = self.stats["total"] - len(records)
            self.stats["corrected"] = corrected

            with transaction.atomic():
                upload.records = [record.to_dict() for record in records]
                upload.total_rows = self.stats["total"]
                upload.rows_stored = self.stats["stored"]
                upload.rows_skipped = self.stats["skipped"]
                upload.rows_corrected = self.stats["corrected"]
                upload.status = DatasetUpload.Status.COMPLETED
                upload.completed_at = timezone.now()
                upload.save()

            logger.info(
                f"Imported {self.kind} from {self.path.name} into {self.snapshot}: "
                f"{self.stats['stored']} stored, "
                f"{self.stats['skipped']} skipped, "
                f"{self.stats['corrected']} corrected"
            )
            return upload

        except Exception as e:
            logger.error(f"Importing {self.kind} from {self.path.name} failed: {e}")
            upload.status = DatasetUpload.Status.FAILED
            upload.error_message = str(e)
            upload.total_rows = self.stats["total"]
            upload.completed_at = timezone.now()
            upload.save(
                update_fields=["status", "error_message", "total_rows", "completed_at"]
            )
            raise


def get_or_create_snapshot(snapshot_date: date, description: str | None = None) -> Snapshot:
    """
    Snapshot for ``snapshot_date``, created on first use.

    A new snapshot becomes current when no later snapshot exists.
    """
    snapshot, created = Snapshot.objects.get_or_create(
        date=snapshot_date, defaults={"description": description or ""}
    )
    if created:
        logger.info(f"Created {snapshot}")
        if not Snapshot.objects.filter(date__gt=snapshot_date).exists():
            snapshot.set_current()
    elif description is not None and description != snapshot.description:
        snapshot.description = description
        snapshot.save(update_fields=["description", "updated_at"])
    return snapshot


def import_dataset(
    kind: str, path: str | Path, snapshot_date: date, description: str | None = None
) -> DatasetUpload:
    """Import ``path`` as dataset ``kind`` into the snapshot for ``snapshot_date``."""
    snapshot = get_or_create_snapshot(snapshot_date, description)
    return DatasetImporter(snapshot, kind, path).run()
