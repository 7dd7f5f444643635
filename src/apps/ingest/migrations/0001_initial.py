import django.core.serializers.json
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Snapshot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(help_text="Reference date of the data", unique=True)),
                ("description", models.CharField(blank=True, default="", help_text="Free-text label", max_length=255)),
                ("is_current", models.BooleanField(db_index=True, default=False, help_text="Snapshot used when no date is requested")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Snapshot",
                "verbose_name_plural": "Snapshots",
                "db_table": "ingest_snapshots",
                "ordering": ["-date"],
            },
        ),
        migrations.CreateModel(
            name="DatasetUpload",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("kind", models.CharField(choices=[("EMPLOYEE", "Employees"), ("INSTITUTION", "Institutions"), ("BASIC_EDUCATION", "Basic Education"), ("ADVANCED_EDUCATION", "Advanced Education"), ("PARTICIPANT", "Training Participants")], help_text="Type of dataset", max_length=30)),
                ("source_filename", models.CharField(blank=True, default="", help_text="Name of the uploaded file", max_length=512)),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("PROCESSING", "Processing"), ("COMPLETED", "Completed Successfully"), ("FAILED", "Failed with Errors")], db_index=True, default="PENDING", max_length=20)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("total_rows", models.IntegerField(default=0, help_text="Rows in the source file")),
                ("rows_stored", models.IntegerField(default=0, help_text="Records stored")),
                ("rows_skipped", models.IntegerField(default=0, help_text="Rows dropped during standardization")),
                ("rows_corrected", models.IntegerField(default=0, help_text="Employee rows repaired for shifted columns")),
                ("error_message", models.TextField(blank=True, help_text="Error if the import failed", null=True)),
                ("records", models.JSONField(blank=True, default=list, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ("snapshot", models.ForeignKey(help_text="Snapshot this dataset belongs to", on_delete=django.db.models.deletion.CASCADE, related_name="uploads", to="ingest.snapshot")),
            ],
            options={
                "verbose_name": "Dataset Upload",
                "verbose_name_plural": "Dataset Uploads",
                "db_table": "ingest_dataset_uploads",
                "ordering": ["snapshot", "kind"],
                "indexes": [models.Index(fields=["kind", "status"], name="ingest_upload_kind_status_idx")],
                "constraints": [models.UniqueConstraint(fields=("snapshot", "kind"), name="unique_dataset_per_snapshot")],
            },
        ),
    ]
