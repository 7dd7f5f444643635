from datetime import date
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.analysis.services import AnalysisWorkbookBuilder, run_snapshot_analysis
from apps.ingest.exceptions import SnapshotNotFound


class Command(BaseCommand):
    help = "Runs the per-institution analysis on a snapshot and writes it to Excel."

    def add_arguments(self, parser):
        parser.add_argument(
            "--date",
            default=None,
            help="Snapshot date (YYYY-MM-DD). Defaults to the current snapshot.",
        )
        parser.add_argument(
            "--output",
            default=None,
            help="Workbook path. Defaults to EXPORT_DIR/analysis_<date>.xlsx.",
        )

    def handle(self, *args, **options):
        snapshot_date = None
        if options["date"]:
            try:
                snapshot_date = date.fromisoformat(options["date"])
            except ValueError as e:
                raise CommandError(
                    f"Invalid --date {options['date']!r}: expected YYYY-MM-DD"
                ) from e

        try:
            result = run_snapshot_analysis(snapshot_date)
        except SnapshotNotFound as e:
            raise CommandError(str(e)) from e

        output = options["output"] or (
            Path(settings.EXPORT_DIR) / f"analysis_{result.snapshot_date.isoformat()}.xlsx"
        )
        path = AnalysisWorkbookBuilder().save(result.rows, result.summary, output)

        self.stdout.write(
            self.style.SUCCESS(
                f"Analyzed {len(result.rows)} institutions as of {result.snapshot_date}"
            )
        )
        if result.summary:
            self.stdout.write(f"  Employed:         {result.summary['total_employed']}")
            self.stdout.write(f"  Active:           {result.summary['total_active']}")
            self.stdout.write(f"  Completed:        {result.summary['total_completed']}")
            self.stdout.write(f"  Avg. employment:  {result.summary['avg_employment_rate']}%")
            self.stdout.write(f"  Avg. education:   {result.summary['avg_education_rate']}%")
        if result.unmatched_institutions:
            self.stdout.write(
                self.style.WARNING(
                    f"  {len(result.unmatched_institutions)} employee institutions "
                    "matched no institution row"
                )
            )
        self.stdout.write(f"Written to {path}")
