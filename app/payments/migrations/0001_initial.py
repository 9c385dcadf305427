import django.db.models.deletion
import django.utils.timezone
import django_fsm
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Subscription",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "order_code",
                    models.CharField(
                        help_text="Order code the payer puts in the transfer memo (DH + digits)",
                        max_length=32,
                        unique=True,
                    ),
                ),
                (
                    "package",
                    models.CharField(
                        choices=[
                            ("3_THANG", "3 months"),
                            ("6_THANG", "6 months"),
                            ("12_THANG", "12 months"),
                        ],
                        help_text="Purchased subscription package",
                        max_length=16,
                    ),
                ),
                (
                    "amount",
                    models.PositiveBigIntegerField(
                        blank=True,
                        help_text="Price in VND captured when the order was placed",
                        null=True,
                    ),
                ),
                (
                    "transferred_amount",
                    models.PositiveBigIntegerField(
                        blank=True,
                        help_text="Amount in VND reported by the gateway on activation",
                        null=True,
                    ),
                ),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("ACTIVE", "Active"),
                            ("EXPIRED", "Expired"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        db_index=True,
                        default="PENDING",
                        help_text="Current state of the order (managed by FSM)",
                        max_length=50,
                        protected=True,
                    ),
                ),
                (
                    "start_date",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="When the order was placed",
                    ),
                ),
                (
                    "expiry_date",
                    models.DateTimeField(
                        help_text="End of the pending window, or of the package once active",
                    ),
                ),
                (
                    "activated_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the confirming bank transfer was processed",
                        null=True,
                    ),
                ),
                (
                    "version",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Incremented on each persisted change",
                    ),
                ),
                (
                    "account",
                    models.ForeignKey(
                        help_text="Account that placed the order",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="subscriptions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Subscription",
                "verbose_name_plural": "Subscriptions",
                "ordering": ["-start_date"],
                "indexes": [
                    models.Index(
                        fields=["account", "start_date"],
                        name="sub_account_start_idx",
                    ),
                    models.Index(
                        fields=["status", "expiry_date"],
                        name="sub_status_expiry_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("amount__isnull", True), ("amount__gt", 0), _connector="OR"
                        ),
                        name="subscription_amount_positive",
                    ),
                ],
            },
        ),
    ]
