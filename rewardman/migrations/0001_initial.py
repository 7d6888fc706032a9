# Initial Rewardman schema

import uuid
from decimal import Decimal

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("handle", models.CharField(help_text="Public account handle (uid)", max_length=32, unique=True, verbose_name="handle")),
                ("external_id", models.CharField(help_text="Login provider identifier", max_length=100, unique=True, verbose_name="external id")),
                ("phone", models.CharField(blank=True, db_index=True, max_length=20, verbose_name="phone")),
                ("display_name", models.CharField(blank=True, max_length=150, verbose_name="display name")),
                ("picture_url", models.URLField(blank=True, max_length=500, verbose_name="picture")),
                ("balance", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=14, verbose_name="point balance")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "account",
                "verbose_name_plural": "accounts",
                "db_table": "rewardman_account",
                "ordering": ["handle"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(balance__gte=0),
                        name="rewardman_account_balance_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("account_handle", models.CharField(db_index=True, max_length=32, verbose_name="account")),
                ("actor", models.CharField(help_text="Employee code or SYSTEM", max_length=50, verbose_name="actor")),
                ("actor_name", models.CharField(blank=True, max_length=150, verbose_name="actor name")),
                ("lookup_input", models.CharField(blank=True, max_length=100, verbose_name="lookup input")),
                ("lookup_kind", models.CharField(blank=True, max_length=20, verbose_name="lookup kind")),
                ("amount", models.DecimalField(decimal_places=4, max_digits=14, verbose_name="points")),
                ("direction", models.CharField(blank=True, choices=[("credit", "Credit"), ("debit", "Debit")], max_length=10, null=True, verbose_name="direction")),
                ("balance_after", models.DecimalField(decimal_places=4, max_digits=14, verbose_name="balance after")),
                ("description", models.CharField(max_length=255, verbose_name="description")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "ledger entry",
                "verbose_name_plural": "ledger entries",
                "db_table": "rewardman_ledger_entry",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["account_handle", "-created_at"], name="rewardman_ledger_acct_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Coupon",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("account_handle", models.CharField(db_index=True, max_length=32, verbose_name="account")),
                ("reward_id", models.CharField(max_length=50, verbose_name="reward id")),
                ("reward_name", models.CharField(max_length=150, verbose_name="reward name")),
                ("title", models.CharField(max_length=200, verbose_name="title")),
                ("image_ref", models.CharField(blank=True, max_length=500, verbose_name="image")),
                ("point_cost", models.DecimalField(decimal_places=4, max_digits=14, verbose_name="point cost")),
                ("unit", models.PositiveIntegerField(default=1, verbose_name="unit")),
                ("code", models.CharField(help_text="Code presented at the point of sale", max_length=20, unique=True, verbose_name="code")),
                ("issued_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="issued at")),
                ("expires_at", models.DateTimeField(db_index=True, verbose_name="expires at")),
                ("valid", models.BooleanField(default=True, verbose_name="valid")),
            ],
            options={
                "verbose_name": "coupon",
                "verbose_name_plural": "coupons",
                "db_table": "rewardman_coupon",
                "ordering": ["-issued_at"],
                "indexes": [
                    models.Index(fields=["account_handle", "valid"], name="rewardman_coupon_acct_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CouponUsage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("coupon_id", models.UUIDField(db_index=True, verbose_name="coupon")),
                ("staff_actor", models.CharField(max_length=50, verbose_name="staff")),
                ("account_handle", models.CharField(db_index=True, max_length=32, verbose_name="account")),
                ("reward_name", models.CharField(max_length=150, verbose_name="reward name")),
                ("unit", models.PositiveIntegerField(default=1, verbose_name="unit")),
                ("description", models.CharField(max_length=255, verbose_name="description")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "coupon usage",
                "verbose_name_plural": "coupon usages",
                "db_table": "rewardman_coupon_usage",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="RedemptionRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("coupon_id", models.UUIDField(unique=True, verbose_name="coupon")),
                ("code", models.CharField(max_length=20, verbose_name="code")),
                ("staff_actor", models.CharField(max_length=50, verbose_name="staff")),
                ("staff_name", models.CharField(blank=True, max_length=150, verbose_name="staff name")),
                ("account_handle", models.CharField(db_index=True, max_length=32, verbose_name="account")),
                ("reward_name", models.CharField(max_length=150, verbose_name="reward name")),
                ("point_cost", models.DecimalField(decimal_places=4, max_digits=14, verbose_name="point cost")),
                ("unit", models.PositiveIntegerField(default=1, verbose_name="unit")),
                ("status_label", models.CharField(default="used", max_length=30, verbose_name="status")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "redemption record",
                "verbose_name_plural": "redemption records",
                "db_table": "rewardman_redemption_record",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20, unique=True, verbose_name="code")),
                ("first_name", models.CharField(max_length=100, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, max_length=100, verbose_name="last name")),
                ("display_name", models.CharField(blank=True, max_length=150, verbose_name="display name")),
                ("email", models.EmailField(blank=True, db_index=True, max_length=254, verbose_name="email")),
                ("phone", models.CharField(blank=True, db_index=True, max_length=20, verbose_name="phone")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "employee",
                "verbose_name_plural": "employees",
                "db_table": "rewardman_employee",
                "ordering": ["code"],
            },
        ),
    ]
