"""Shared enums and constants."""

from dumpreport.types.base import FAILURE_STATUSES, Status

__all__ = ["Status", "FAILURE_STATUSES"]
