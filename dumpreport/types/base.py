"""Status enumeration for result-tree leaves."""

from __future__ import annotations

from enum import Enum
from typing import Any


class Status(str, Enum):
    """Outcome of a single test or check.

    Members compare equal to their lowercase string value, so documents and
    templates can keep working with plain strings.
    """

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    #: The plugin did not report within its timeout; reported like a failure.
    TIMEOUT = "timeout"
    #: Fallback for anything that is not one of the values above.
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: Any) -> "Status":
        """Parse a status value, folding anything unrecognized into UNKNOWN.

        Matching is case-insensitive and ignores surrounding whitespace.
        ``None``, empty strings and non-string values map to UNKNOWN. This
        never raises.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_failure(self) -> bool:
        """True for failure-equivalent statuses (failed, timeout)."""
        return self in FAILURE_STATUSES


#: Leaf statuses reported in the failed-test list.
FAILURE_STATUSES = frozenset({Status.FAILED, Status.TIMEOUT})
