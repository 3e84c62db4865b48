"""Health rate of a node or pod health record.

The rate is ``floor(100 * healthy / total)``; truncation means 2 of 3 healthy
units report as 66, not 67. A record with ``total == 0`` has no meaningful
rate: :func:`health_rate` returns :data:`NOT_APPLICABLE` for it, or raises
:class:`DegenerateHealthRecordError` when called with ``strict=True``.
"""

from __future__ import annotations

from typing import Optional

from dumpreport.model.health import HealthRecord

#: Rate returned for records that inspected no units.
NOT_APPLICABLE: Optional[int] = None


class DegenerateHealthRecordError(ZeroDivisionError):
    """A health rate was requested for a record with ``total == 0``."""


def health_rate(record: HealthRecord, strict: bool = False) -> Optional[int]:
    """Return the percentage of healthy units, truncated to an integer.

    Args:
        record: Health record with ``0 <= healthy <= total``.
        strict: Raise instead of returning NOT_APPLICABLE when ``total == 0``.

    Returns:
        Integer in ``[0, 100]``, or NOT_APPLICABLE for an empty record.

    Raises:
        DegenerateHealthRecordError: If ``strict`` and ``record.total == 0``.
    """
    if record.total == 0:
        if strict:
            raise DegenerateHealthRecordError(
                "Health rate is undefined for a record with no inspected units"
            )
        return NOT_APPLICABLE
    return (100 * record.healthy) // record.total


def format_health_rate(rate: Optional[int]) -> str:
    """Render a rate as ``"66%"``, or ``"n/a"`` for NOT_APPLICABLE."""
    if rate is NOT_APPLICABLE:
        return "n/a"
    return f"{rate}%"
