from datetime import date

from django.core.management.base import BaseCommand, CommandError

from apps.ingest.exceptions import IngestError
from apps.ingest.models import DatasetUpload
from apps.ingest.services import import_dataset


class Command(BaseCommand):
    help = "Imports an employee, institution, education or participant spreadsheet into a snapshot."

    def add_arguments(self, parser):
        parser.add_argument(
            "kind",
            type=str.upper,
            choices=DatasetUpload.Kind.values,
            help="Dataset kind (case-insensitive).",
        )
        parser.add_argument(
            "file_path",
            type=str,
            help="Path to the .xlsx, .xls or .csv file.",
        )
        parser.add_argument(
            "--date",
            required=True,
            help="Snapshot date (YYYY-MM-DD).",
        )
        parser.add_argument(
            "--description",
            default=None,
            help="Label stored on the snapshot.",
        )

    def handle(self, *args, **options):
        try:
            snapshot_date = date.fromisoformat(options["date"])
        except ValueError as e:
            raise CommandError(f"Invalid --date {options['date']!r}: expected YYYY-MM-DD") from e

        self.stdout.write(f"Importing {options['kind']} from {options['file_path']}")

        try:
            upload = import_dataset(
                options["kind"],
                options["file_path"],
                snapshot_date,
                description=options["description"],
            )
        except IngestError as e:
            raise CommandError(str(e)) from e

        self.stdout.write(
            self.style.SUCCESS(f"Import complete: {upload}")
        )
        self.stdout.write(f"  Rows in file:    {upload.total_rows}")
        self.stdout.write(f"  Records stored:  {upload.rows_stored}")
        self.stdout.write(f"  Rows skipped:    {upload.rows_skipped}")
        if upload.rows_corrected:
            self.stdout.write(
                self.style.WARNING(f"  Rows corrected:  {upload.rows_corrected}")
            )
