"""
Pytest fixtures for authentication tests.
"""

import pytest

from authentication.models import AccountTier
from authentication.tests.factories import UserFactory


@pytest.fixture
def user(db):
    """Create a free-tier user."""
    return UserFactory()


@pytest.fixture
def premium_user(db):
    """Create a premium user."""
    return UserFactory(tier=AccountTier.PREMIUM)
