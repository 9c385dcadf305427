"""
Order codes: the correlation key between an order and a bank transfer.

An order code is the literal prefix ``DH`` followed by a run of decimal
digits (milliseconds since the Unix epoch at creation). Payers type it
into the free-text memo of their bank transfer; the gateway echoes that
memo back in the webhook and the reconciler scans it for the code. The
format is a contract with human payers and must not change.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

ORDER_CODE_PREFIX = "DH"

ORDER_CODE_PATTERN = re.compile(rf"{ORDER_CODE_PREFIX}\d+")
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def timestamp_ms(moment: datetime) -> int:
    """Milliseconds since the Unix epoch for an aware datetime."""
    return (moment - EPOCH) // timedelta(milliseconds=1)


def build_order_code(millis: int) -> str:
    """Order code for a millisecond timestamp."""
    return f"{ORDER_CODE_PREFIX}{millis}"


def extract_order_code(content: str | None) -> str | None:
    """
    First order-code-shaped token in a transfer memo, or None.

    Banks sometimes strip spaces or append their own reference, so the
    token is matched anywhere in the text rather than as a whole word.
    """
    if not content:
        return None
    match = ORDER_CODE_PATTERN.search(content)
    if match is None:
        return None
    return match.group(0)
