import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ConfigEntry",
            fields=[
                ("key", models.CharField(max_length=100, primary_key=True, serialize=False, verbose_name="Key")),
                ("value", models.JSONField(blank=True, null=True, verbose_name="Value")),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Configuration entry",
                "verbose_name_plural": "Configuration entries",
                "ordering": ["key"],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=64)),
                ("target_type", models.CharField(max_length=64)),
                ("target_id", models.CharField(blank=True, max_length=64)),
                ("success", models.BooleanField(default=True)),
                ("error_code", models.CharField(blank=True, max_length=32)),
                ("reason", models.TextField(blank=True)),
                ("diff", models.JSONField(blank=True, default=dict)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.TextField(blank=True)),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="audit_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Audit log entry",
                "verbose_name_plural": "Audit log",
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(fields=["actor", "timestamp"], name="core_auditl_actor_i_5d1c2a_idx"),
                    models.Index(fields=["action", "timestamp"], name="core_auditl_action_8b0e4f_idx"),
                    models.Index(fields=["target_type", "target_id"], name="core_auditl_target__3f9a7c_idx"),
                ],
            },
        ),
    ]
