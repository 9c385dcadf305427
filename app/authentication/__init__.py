"""
Authentication application.

This app owns the account record and its entitlement tier. Other apps
read and upgrade the tier only through EntitlementService.

Key components:
    - User model: Custom email-based user with an entitlement tier
    - EntitlementService: Tier upgrades applied on order activation

Usage:
    from authentication.models import AccountTier, User
    from authentication.services import EntitlementService
"""
