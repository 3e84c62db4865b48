"""Loading of result and cluster health artifacts."""

from dumpreport.io.loader import (
    load_cluster_file,
    load_cluster_yaml,
    load_report,
    load_result_file,
    load_result_yaml,
)

__all__ = [
    "load_cluster_file",
    "load_cluster_yaml",
    "load_report",
    "load_result_file",
    "load_result_yaml",
]
