"""
Account manager and queryset.

Accounts log in by email. Every new account starts on the FREE tier;
only the payments flow moves an account to PREMIUM (see
EntitlementService.upgrade_tier).
"""

from django.contrib.auth.models import BaseUserManager
from django.db import models


class AccountQuerySet(models.QuerySet):
    """Tier filters used by the admin and by reporting."""

    def premium(self):
        return self.filter(tier="PREMIUM")

    def free(self):
        return self.filter(tier="FREE")


class UserManager(BaseUserManager.from_queryset(AccountQuerySet)):
    """
    Creates accounts keyed by email.

    Usage:
        User.objects.create_user(email="payer@example.com", password="...")
        User.objects.premium().count()
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create a regular account.

        Without a password the account gets an unusable one, so it can only
        sign in through a token issued elsewhere.

        Raises:
            ValueError: If email is empty
        """
        if not email:
            raise ValueError("An email address is required")

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("tier", "FREE")

        account = self.model(email=self.normalize_email(email), **extra_fields)
        if password:
            account.set_password(password)
        else:
            account.set_unusable_password()
        account.save(using=self._db)
        return account

    def create_superuser(self, email, password=None, **extra_fields):
        """Create a staff account with every permission."""
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        for flag in ("is_staff", "is_superuser"):
            if extra_fields.get(flag) is not True:
                raise ValueError(f"Superuser must have {flag}=True.")

        return self.create_user(email, password, **extra_fields)
