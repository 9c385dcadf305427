"""
Accounts and their entitlement tier.

The tier is the only thing the payments app changes on an account, and it
does so through EntitlementService, never by saving a User instance.
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class AccountTier(models.TextChoices):
    """FREE until a bank transfer activates an order, then PREMIUM."""

    FREE = "FREE", "Free"
    PREMIUM = "PREMIUM", "Premium"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Account that signs in with email and password.

    Usage:
        payer = User.objects.create_user(email="payer@example.com", password="...")
        payer.is_premium  # False
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="Login and contact address",
    )
    tier = models.CharField(
        max_length=16,
        choices=AccountTier.choices,
        default=AccountTier.FREE,
        db_index=True,
        help_text="Set to PREMIUM when a paid order is activated",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Untick to block sign-in without deleting order history.",
    )
    is_staff = models.BooleanField(default=False, help_text="Can open the admin site.")

    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    @property
    def is_premium(self) -> bool:
        return self.tier == AccountTier.PREMIUM
