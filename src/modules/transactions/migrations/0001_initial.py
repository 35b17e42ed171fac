import django.db.models.deletion
import uuid6
from django.db import migrations, models

import modules.transactions.models

STATUS_CHOICES = [
    ("pending_setup", "Setting Up"),
    ("awaiting_payment", "Awaiting Payment"),
    ("escrow_held", "Payment Secured"),
    ("in_transit_to_hub", "Shipped to Hub"),
    ("at_prolist_hub", "Received at Hub"),
    ("out_for_delivery", "Out for Delivery"),
    ("delivered_awaiting_confirmation", "Delivered - Awaiting Confirmation"),
    ("completed", "Completed"),
    ("refunded", "Refunded"),
    ("cancelled", "Cancelled"),
]


def uuid_pk():
    return (
        "id",
        models.UUIDField(
            default=uuid6.uuid7,
            editable=False,
            primary_key=True,
            serialize=False,
        ),
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("listings", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Transaction",
            fields=[
                uuid_pk(),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("product_name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("price", models.PositiveIntegerField()),
                ("delivery_fee", models.PositiveIntegerField(default=0)),
                ("buyer_name", models.CharField(blank=True, default="", max_length=150)),
                (
                    "buyer_phone",
                    models.CharField(blank=True, db_index=True, default="", max_length=32),
                ),
                ("buyer_email", models.EmailField(blank=True, default="", max_length=254)),
                ("buyer_city", models.CharField(blank=True, default="", max_length=100)),
                (
                    "delivery_city",
                    models.CharField(blank=True, default="", max_length=100),
                ),
                (
                    "delivery_address",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                ("delivery_notes", models.TextField(blank=True, default="")),
                (
                    "dropoff_company",
                    models.CharField(blank=True, default="", max_length=150),
                ),
                ("dropoff_city", models.CharField(blank=True, default="", max_length=100)),
                ("dropoff_note", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(
                        choices=STATUS_CHOICES, default="pending_setup", max_length=40
                    ),
                ),
                ("is_pre_order", models.BooleanField(default=False)),
                ("expected_arrival", models.DateField(blank=True, null=True)),
                (
                    "pre_order_note",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                (
                    "confirmation_code",
                    models.CharField(
                        default=modules.transactions.models.generate_confirmation_code,
                        editable=False,
                        max_length=6,
                    ),
                ),
                (
                    "payment_reference",
                    models.CharField(blank=True, default="", max_length=100),
                ),
                ("closing_reason", models.TextField(blank=True, default="")),
                ("escrow_held_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("closed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "assigned_agent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="deliveries",
                        to="accounts.profile",
                    ),
                ),
                (
                    "buyer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchases",
                        to="accounts.profile",
                    ),
                ),
                (
                    "listing",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="listings.listing",
                    ),
                ),
                (
                    "seller",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="accounts.profile",
                    ),
                ),
            ],
            options={
                "db_table": "transactions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="transactions_status_idx"),
                    models.Index(
                        fields=["seller", "-created_at"], name="transactions_seller_idx"
                    ),
                    models.Index(
                        fields=["buyer", "-created_at"], name="transactions_buyer_idx"
                    ),
                    models.Index(
                        fields=["assigned_agent", "status"],
                        name="transactions_agent_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("assigned_agent__isnull", True),
                                (
                                    "status__in",
                                    [
                                        "at_prolist_hub",
                                        "awaiting_payment",
                                        "escrow_held",
                                        "in_transit_to_hub",
                                        "pending_setup",
                                    ],
                                ),
                            ),
                            models.Q(
                                ("assigned_agent__isnull", False),
                                (
                                    "status__in",
                                    [
                                        "completed",
                                        "delivered_awaiting_confirmation",
                                        "out_for_delivery",
                                    ],
                                ),
                            ),
                            ("status__in", ["cancelled", "refunded"]),
                            _connector="OR",
                        ),
                        name="transactions_agent_matches_status",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="TransactionStatusHistory",
            fields=[
                uuid_pk(),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "old_status",
                    models.CharField(
                        blank=True, choices=STATUS_CHOICES, max_length=40, null=True
                    ),
                ),
                (
                    "new_status",
                    models.CharField(choices=STATUS_CHOICES, max_length=40),
                ),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="accounts.profile",
                    ),
                ),
                (
                    "transaction",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="status_history",
                        to="transactions.transaction",
                    ),
                ),
            ],
            options={
                "db_table": "transaction_status_history",
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["transaction", "created_at"],
                        name="tsh_transaction_created_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[
                uuid_pk(),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("number", models.CharField(max_length=32, unique=True)),
                ("issued_at", models.DateTimeField()),
                ("seller_name", models.CharField(max_length=150)),
                ("seller_phone", models.CharField(blank=True, default="", max_length=32)),
                ("seller_city", models.CharField(blank=True, default="", max_length=100)),
                ("buyer_name", models.CharField(blank=True, default="", max_length=150)),
                ("buyer_phone", models.CharField(blank=True, default="", max_length=32)),
                ("buyer_city", models.CharField(blank=True, default="", max_length=100)),
                ("item_title", models.CharField(max_length=200)),
                ("item_price", models.PositiveIntegerField()),
                ("delivery_fee", models.PositiveIntegerField(default=0)),
                ("total", models.PositiveIntegerField()),
                ("is_pre_order", models.BooleanField(default=False)),
                (
                    "transaction",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoice",
                        to="transactions.transaction",
                    ),
                ),
            ],
            options={
                "db_table": "invoices",
                "ordering": ["-issued_at"],
            },
        ),
    ]
