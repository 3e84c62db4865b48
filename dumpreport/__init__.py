"""dumpreport: aggregate test-run result dumps into a browsable report.

A plugin result dump is a tree of named, statused items (plugin -> suite ->
test case). dumpreport reduces each tree to a status histogram and a list of
failed tests, computes node and pod health rates from the cluster health dump,
and exposes everything through an immutable ReportModel that the CLI, the web
server and the notebook export read.

Primary API:
    load_report() - Load plugin dumps and the cluster dump into a ReportModel
    summarize() - Reduce one result tree to a StatusSummary
    health_rate() - Truncated percentage of healthy units in a HealthRecord
    ReportModel, ReportHolder - Read model and its atomically swapped holder

Example:
    from dumpreport import load_result_yaml, summarize

    root = load_result_yaml(text)
    summary = summarize(root)
    print(summary.total, summary.failed_names)
"""

from __future__ import annotations

from dumpreport import cli, logging
from dumpreport._version import __version__
from dumpreport.aggregate import summarize, summarize_run, summarize_runs
from dumpreport.health import (
    NOT_APPLICABLE,
    DegenerateHealthRecordError,
    format_health_rate,
    health_rate,
)
from dumpreport.io.loader import (
    load_cluster_file,
    load_cluster_yaml,
    load_report,
    load_result_file,
    load_result_yaml,
)
from dumpreport.model.health import ClusterHealthSummary, HealthDetail, HealthRecord
from dumpreport.model.result import (
    MalformedTreeError,
    ResultContainer,
    ResultItem,
    ResultLeaf,
    item_from_dict,
)
from dumpreport.report_model import ReportHolder, ReportModel, build_report_model
from dumpreport.results.summary import RunSummary, StatusSummary
from dumpreport.types.base import FAILURE_STATUSES, Status

__all__ = [
    # Version
    "__version__",
    # Model
    "Status",
    "FAILURE_STATUSES",
    "ResultItem",
    "ResultLeaf",
    "ResultContainer",
    "item_from_dict",
    "HealthDetail",
    "HealthRecord",
    "ClusterHealthSummary",
    # Aggregation
    "summarize",
    "summarize_run",
    "summarize_runs",
    "StatusSummary",
    "RunSummary",
    "MalformedTreeError",
    # Health
    "health_rate",
    "format_health_rate",
    "NOT_APPLICABLE",
    "DegenerateHealthRecordError",
    # Report model
    "ReportModel",
    "ReportHolder",
    "build_report_model",
    # Loading
    "load_report",
    "load_result_yaml",
    "load_result_file",
    "load_cluster_yaml",
    "load_cluster_file",
    # Utilities
    "cli",
    "logging",
]
