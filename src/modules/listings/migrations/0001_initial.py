import django.db.models.deletion
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Listing",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "deleted_at",
                    models.DateTimeField(
                        blank=True, db_index=True, default=None, null=True
                    ),
                ),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("price", models.PositiveIntegerField()),
                ("delivery_fee", models.PositiveIntegerField(default=0)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("electronics", "Electronics"),
                            ("fashion", "Fashion"),
                            ("home", "Home & Garden"),
                            ("vehicles", "Vehicles"),
                            ("other", "Other"),
                        ],
                        default="other",
                        max_length=20,
                    ),
                ),
                ("condition", models.CharField(blank=True, default="", max_length=50)),
                ("image_url", models.URLField(blank=True, default="")),
                (
                    "visibility",
                    models.CharField(
                        choices=[("PUBLIC", "Public"), ("PRIVATE", "Private")],
                        default="PUBLIC",
                        max_length=10,
                    ),
                ),
                ("is_pre_order", models.BooleanField(default=False)),
                ("expected_arrival", models.DateField(blank=True, null=True)),
                (
                    "pre_order_note",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                ("is_active", models.BooleanField(default=True)),
                (
                    "seller",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="listings",
                        to="accounts.profile",
                    ),
                ),
            ],
            options={
                "db_table": "listings",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["seller", "-created_at"], name="listings_seller_idx"
                    ),
                    models.Index(fields=["category"], name="listings_category_idx"),
                ],
            },
        ),
    ]
