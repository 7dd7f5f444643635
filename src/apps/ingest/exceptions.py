"""
Errors raised at the ingestion boundary.

The reconciliation core never raises on bad data; these are for files that
cannot be read at all, files that lack required columns, and lookups of
snapshots that do not exist.
"""


class IngestError(Exception):
    """Base class for ingestion failures."""


class DatasetFileError(IngestError):
    """File is missing, unreadable or of an unsupported type."""


class DatasetValidationError(IngestError):
    """Standardized data failed validation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Validation errors: " + "; ".join(self.errors))


class SnapshotNotFound(IngestError):
    """No snapshot exists for the requested date."""
