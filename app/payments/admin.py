"""
Payment admin configuration.

Registers subscription orders with the Django admin. Orders are
read-only here: state changes go through the webhook reconciler so the
account tier and the order status never diverge.
"""

from django.contrib import admin

from payments.models import Subscription

__all__ = [
    "SubscriptionAdmin",
]


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    """
    Admin configuration for Subscription.

    Provides visibility into orders and their states.
    """

    list_display = [
        "order_code",
        "account",
        "package",
        "amount",
        "status",
        "start_date",
        "expiry_date",
        "activated_at",
    ]
    list_filter = ["status", "package", "start_date"]
    search_fields = ["order_code", "account__email"]
    readonly_fields = [
        "id",
        "account",
        "order_code",
        "package",
        "amount",
        "transferred_amount",
        "status",
        "start_date",
        "expiry_date",
        "activated_at",
        "version",
        "created_at",
        "updated_at",
    ]
    ordering = ["-start_date"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "account", "order_code", "package"),
            },
        ),
        (
            "Payment",
            {
                "fields": ("amount", "transferred_amount", "status", "activated_at"),
            },
        ),
        (
            "Validity",
            {
                "fields": ("start_date", "expiry_date"),
            },
        ),
        (
            "Metadata",
            {
                "fields": ("version", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
