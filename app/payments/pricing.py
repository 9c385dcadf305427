"""
Package pricing and validity policy.

Pure lookups with no state: the price of each subscription package (VND)
and how long a package stays valid once activated.

Usage:
    from payments.pricing import expiry_of, price_of

    price_of("3_THANG")           # 99000
    price_of("LIFETIME")          # 0, unpriced
    expiry_of("6_THANG", now)     # now + 6 calendar months

Note:
    A price of 0 means "unpriced", never "free". Callers must refuse to
    activate an order whose expected amount is 0.
"""

from __future__ import annotations

import calendar
from typing import TYPE_CHECKING

from payments.state_machines import SubscriptionPackage

if TYPE_CHECKING:
    from datetime import datetime


PACKAGE_PRICES: dict[SubscriptionPackage, int] = {
    SubscriptionPackage.THREE_MONTHS: 99_000,
    SubscriptionPackage.SIX_MONTHS: 179_000,
    SubscriptionPackage.TWELVE_MONTHS: 299_000,
}

PACKAGE_DURATION_MONTHS: dict[SubscriptionPackage, int] = {
    SubscriptionPackage.THREE_MONTHS: 3,
    SubscriptionPackage.SIX_MONTHS: 6,
    SubscriptionPackage.TWELVE_MONTHS: 12,
}


def parse_package(package: str | None) -> SubscriptionPackage | None:
    """Return the package enum member for a code, or None if unknown."""
    if package is None:
        return None
    try:
        return SubscriptionPackage(package)
    except ValueError:
        return None


def price_of(package: str | None) -> int:
    """Price of a package in VND; 0 for unknown package codes."""
    member = parse_package(package)
    if member is None:
        return 0
    return PACKAGE_PRICES[member]


def duration_months(package: str | None) -> int:
    """Validity period of a package in calendar months; 0 for unknown codes."""
    member = parse_package(package)
    if member is None:
        return 0
    return PACKAGE_DURATION_MONTHS[member]


def add_months(moment: datetime, months: int) -> datetime:
    """
    Add calendar months to a datetime.

    The day of month is clamped to the last day of the target month
    (Jan 31 + 1 month = Feb 28/29). Time and tzinfo are preserved.
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def expiry_of(package: str | None, start: datetime) -> datetime:
    """
    Expiry of a package activated at ``start``.

    Unknown package codes return ``start`` unchanged; that value is not a
    valid expiry and must not be relied on.
    """
    months = duration_months(package)
    if not months:
        return start
    return add_months(start, months)
