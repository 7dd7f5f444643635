from django.core.serializers.json import DjangoJSONEncoder
from django.db import models, transaction
from django.utils.translation import gettext_lazy as _


class Snapshot(models.Model):
    """
    A dated set of uploaded datasets.

    Each snapshot holds at most one upload per dataset kind. Analysis runs
    against one snapshot and uses its date as the reference date.
    """

    date = models.DateField(unique=True, help_text="Reference date of the data")
    description = models.CharField(
        max_length=255, blank=True, default="", help_text="Free-text label"
    )
    is_current = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Snapshot used when no date is requested",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "ingest_snapshots"
        verbose_name = "Snapshot"
        verbose_name_plural = "Snapshots"
        ordering = ["-date"]

    def __str__(self):
        marker = " (current)" if self.is_current else ""
        return f"Snapshot {self.date.isoformat()}{marker}"

    def set_current(self):
        """Make this the only current snapshot."""
        with transaction.atomic():
            Snapshot.objects.filter(is_current=True).exclude(pk=self.pk).update(
                is_current=False
            )
            self.is_current = True
            self.save(update_fields=["is_current", "updated_at"])

    @classmethod
    def current(cls):
        """The current snapshot, else the most recent one, else None."""
        return cls.objects.filter(is_current=True).first() or cls.objects.first()

    def upload_for(self, kind):
        return self.uploads.filter(kind=kind).first()


class DatasetUpload(models.Model):
    """
    One parsed spreadsheet stored on a snapshot.

    Re-importing a kind replaces the stored records of that kind wholesale.
    Records are kept as JSON dicts in the shape of the reconciliation
    record types.
    """

    class Kind(models.TextChoices):
        EMPLOYEE = "EMPLOYEE", _("Employees")
        INSTITUTION = "INSTITUTION", _("Institutions")
        BASIC_EDUCATION = "BASIC_EDUCATION", _("Basic Education")
        ADVANCED_EDUCATION = "ADVANCED_EDUCATION", _("Advanced Education")
        PARTICIPANT = "PARTICIPANT", _("Training Participants")

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        PROCESSING = "PROCESSING", _("Processing")
        COMPLETED = "COMPLETED", _("Completed Successfully")
        FAILED = "FAILED", _("Failed with Errors")

    snapshot = models.ForeignKey(
        Snapshot,
        on_delete=models.CASCADE,
        related_name="uploads",
        help_text="Snapshot this dataset belongs to",
    )
    kind = models.CharField(
        max_length=30, choices=Kind.choices, help_text="Type of dataset"
    )
    source_filename = models.CharField(
        max_length=512, blank=True, default="", help_text="Name of the uploaded file"
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    # Processing State
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True
    )
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    # Statistics
    total_rows = models.IntegerField(default=0, help_text="Rows in the source file")
    rows_stored = models.IntegerField(default=0, help_text="Records stored")
    rows_skipped = models.IntegerField(
        default=0, help_text="Rows dropped during standardization"
    )
    rows_corrected = models.IntegerField(
        default=0, help_text="Employee rows repaired for shifted columns"
    )

    error_message = models.TextField(
        null=True, blank=True, help_text="Error if the import failed"
    )

    records = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)

    class Meta:
        db_table = "ingest_dataset_uploads"
        verbose_name = "Dataset Upload"
        verbose_name_plural = "Dataset Uploads"
        ordering = ["snapshot", "kind"]
        constraints = [
            models.UniqueConstraint(
                fields=["snapshot", "kind"], name="unique_dataset_per_snapshot"
            )
        ]
        indexes = [
            models.Index(fields=["kind", "status"], name="ingest_upload_kind_status_idx"),
        ]

    def __str__(self):
        return f"{self.get_kind_display()} @ {self.snapshot.date.isoformat()} ({self.status})"

    @property
    def duration(self):
        if self.started_at and self.completed_at:
            return self.completed_at - self.started_at
        return None

    def load_records(self) -> list:
        """Stored records as reconciliation record instances."""
        from apps.ingest.services.readers import RECORD_TYPES

        record_type = RECORD_TYPES[self.kind]
        return [record_type.from_row(row) for row in self.records]
