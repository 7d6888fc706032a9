"""Rewardman admin.

Audit models (ledger entries, coupon usages, redemption records) are
read-only: no add, change or delete from the admin.
"""

from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from rewardman.models import (
    Account,
    Coupon,
    CouponUsage,
    Direction,
    Employee,
    LedgerEntry,
    RedemptionRecord,
)
from rewardman.services.coupons import CouponLifecycle


class ReadOnlyAdminMixin:
    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ===========================================
# Account Admin
# ===========================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ["handle", "display_name", "external_id", "phone", "balance", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["handle", "external_id", "phone", "display_name"]
    # Balance changes only through the ledger
    readonly_fields = ["balance", "created_at", "updated_at"]


# ===========================================
# Ledger Admin
# ===========================================


@admin.register(LedgerEntry)
class LedgerEntryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = [
        "created_at",
        "account_handle",
        "points_display",
        "balance_after",
        "actor",
        "description",
    ]
    list_filter = ["direction"]
    search_fields = ["account_handle", "actor", "description"]
    date_hierarchy = "created_at"

    def points_display(self, obj):
        if obj.direction == Direction.CREDIT:
            return format_html('<span style="color:green">+{}</span>', obj.amount)
        if obj.direction == Direction.DEBIT:
            return format_html('<span style="color:red">-{}</span>', obj.amount)
        return obj.amount

    points_display.short_description = "Points"


# ===========================================
# Coupon Admin
# ===========================================


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ["code", "account_handle", "reward_name", "point_cost", "status_badge", "expires_at"]
    list_filter = ["valid"]
    search_fields = ["code", "account_handle", "reward_name"]
    readonly_fields = [
        "account_handle",
        "code",
        "point_cost",
        "valid",
        "issued_at",
        "expires_at",
    ]

    def status_badge(self, obj):
        if not obj.valid:
            color, label = "#6c757d", "used"
        elif obj.is_expired():
            color, label = "#dc3545", "expired"
        else:
            color, label = "#28a745", "valid"
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            color,
            label,
        )

    status_badge.short_description = "Status"

    # Only expired coupons may be deleted
    def has_delete_permission(self, request, obj=None):
        if obj is not None and not obj.is_expired():
            return False
        return super().has_delete_permission(request, obj)

    def delete_model(self, request, obj):
        CouponLifecycle.delete(obj.pk)

    def delete_queryset(self, request, queryset):
        queryset.filter(expires_at__lte=timezone.now()).delete()


@admin.register(CouponUsage)
class CouponUsageAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["created_at", "account_handle", "reward_name", "staff_actor"]
    search_fields = ["account_handle", "staff_actor"]


@admin.register(RedemptionRecord)
class RedemptionRecordAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["created_at", "code", "account_handle", "reward_name", "staff_name", "status_label"]
    search_fields = ["code", "account_handle", "staff_actor"]
    date_hierarchy = "created_at"


# ===========================================
# Employee Admin
# ===========================================


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "email", "phone", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["code", "first_name", "last_name", "email", "phone"]
    readonly_fields = ["code", "created_at"]
