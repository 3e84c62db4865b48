"""Data model for result trees and cluster health."""

from dumpreport.model.health import (
    ClusterHealthSummary,
    ErrorSummary,
    HealthDetail,
    HealthRecord,
    cluster_summary_from_dict,
    health_record_from_dict,
)
from dumpreport.model.result import (
    MalformedTreeError,
    ResultContainer,
    ResultItem,
    ResultLeaf,
    count_leaves,
    group_leaves_by_suite,
    is_leaf,
    item_from_dict,
    item_to_dict,
    iter_leaves,
    iter_leaves_with_path,
)

__all__ = [
    "ClusterHealthSummary",
    "ErrorSummary",
    "HealthDetail",
    "HealthRecord",
    "MalformedTreeError",
    "cluster_summary_from_dict",
    "health_record_from_dict",
    "ResultContainer",
    "ResultItem",
    "ResultLeaf",
    "count_leaves",
    "group_leaves_by_suite",
    "is_leaf",
    "item_from_dict",
    "item_to_dict",
    "iter_leaves",
    "iter_leaves_with_path",
]
