import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Building",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("is_enabled", models.BooleanField(default=True, verbose_name="Enabled")),
                ("sort_order", models.IntegerField(default=0, verbose_name="Sort order")),
                ("remark", models.CharField(blank=True, max_length=500, verbose_name="Remark")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "Building",
                "verbose_name_plural": "Buildings",
                "ordering": ["sort_order", "name"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("deleted_at__isnull", True)),
                        fields=("name",),
                        name="building_name_unique_alive",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("floor_no", models.IntegerField(help_text="Basement floors are negative.", verbose_name="Floor")),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("capacity", models.PositiveIntegerField(blank=True, null=True, verbose_name="Capacity")),
                ("is_enabled", models.BooleanField(default=True, verbose_name="Enabled")),
                ("sort_order", models.IntegerField(default=0, verbose_name="Sort order")),
                ("remark", models.CharField(blank=True, max_length=500, verbose_name="Remark")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                (
                    "building",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="rooms",
                        to="facilities.building",
                    ),
                ),
            ],
            options={
                "verbose_name": "Room",
                "verbose_name_plural": "Rooms",
                "ordering": ["building__sort_order", "floor_no", "sort_order", "name"],
                "indexes": [
                    models.Index(fields=["building", "floor_no"], name="facilities_building_floor_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("deleted_at__isnull", True)),
                        fields=("building", "floor_no", "name"),
                        name="room_name_unique_per_floor_alive",
                    )
                ],
            },
        ),
    ]
