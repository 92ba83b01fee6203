import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AppError",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("message", models.TextField()),
                ("data", models.JSONField(blank=True, null=True)),
                ("app", models.CharField(blank=True, max_length=50, null=True)),
                ("file", models.CharField(blank=True, max_length=200, null=True)),
                ("function", models.CharField(blank=True, max_length=100, null=True)),
                ("severity", models.IntegerField(default=40)),
                ("client_id", models.UUIDField(blank=True, null=True)),
                ("contact_id", models.UUIDField(blank=True, null=True)),
                ("resolved", models.BooleanField(default=False)),
                ("resolved_timestamp", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "Application Error",
                "verbose_name_plural": "Application Errors",
                "db_table": "workflow_app_error",
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(
                        fields=["timestamp", "severity"],
                        name="workflow_ap_timesta_4f1c2e_idx",
                    ),
                    models.Index(
                        fields=["resolved", "timestamp"],
                        name="workflow_ap_resolve_8d3a61_idx",
                    ),
                    models.Index(
                        fields=["app", "severity"],
                        name="workflow_ap_app_2b9e70_idx",
                    ),
                ],
            },
        ),
    ]
