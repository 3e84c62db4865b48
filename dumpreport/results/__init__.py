"""Aggregated result types."""

from dumpreport.results.summary import RunSummary, StatusSummary

__all__ = ["RunSummary", "StatusSummary"]
