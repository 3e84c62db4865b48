"""YAML loaders for result dump artifacts.

Two artifact kinds are read:

- plugin result dumps: one result tree per file (``name``, ``status``,
  ``meta``, ``details``, nested ``items``)
- the cluster health dump: ``node_health``, ``pod_health``, ``api_version``
  and ``error_summary``

Each document is parsed with ``yaml.safe_load``, has YAML key quirks
normalized, is validated against its packaged JSON schema and is then
converted into the immutable data model.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import jsonschema
import yaml

from dumpreport.aggregate import summarize_run
from dumpreport.logging import get_logger
from dumpreport.model.health import ClusterHealthSummary, cluster_summary_from_dict
from dumpreport.model.result import MalformedTreeError, ResultItem, item_from_dict
from dumpreport.report_model import ReportModel, build_report_model
from dumpreport.results.summary import RunSummary
from dumpreport.utils.yaml_utils import normalize_yaml_dict_keys

logger = get_logger(__name__)

PathLike = Union[str, Path]

RESULT_SCHEMA = "result_item.json"
CLUSTER_SCHEMA = "cluster_summary.json"


@lru_cache(maxsize=None)
def _load_schema(name: str) -> Dict[str, Any]:
    schema_file = resources.files("dumpreport.schemas").joinpath(name)
    with schema_file.open("r", encoding="utf-8") as f:
        return json.load(f)


def _parse_mapping(yaml_str: str, what: str, source: str = "") -> Dict[Any, Any]:
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        where = f" {source}" if source else ""
        raise ValueError(
            f"The {what} document{where} must map to a dictionary at top-level."
        )
    return data


def _reject_back_references(value: Any, active: set[int]) -> None:
    """Raise MalformedTreeError if ``value`` reaches an enclosing node or itself."""
    if not isinstance(value, (dict, list)):
        return
    if id(value) in active:
        raise MalformedTreeError("Result details refer back to an enclosing node")
    active.add(id(value))
    try:
        for child in value.values() if isinstance(value, dict) else value:
            _reject_back_references(child, active)
    finally:
        active.discard(id(value))


def _normalize_result_node(node: Any, active: set[int]) -> Any:
    """Copy a result node with string ``meta``/``details`` keys.

    Raises MalformedTreeError for a node that contains itself or whose
    details refer back to it, which YAML anchors can produce and which schema
    validation would never finish.
    """
    if not isinstance(node, dict):
        return node
    if id(node) in active:
        raise MalformedTreeError(
            f"Result item '{node.get('name', '')}' contains itself"
        )
    active.add(id(node))
    try:
        out = dict(node)
        _reject_back_references(out.get("details"), active)
        for key in ("meta", "details"):
            if isinstance(out.get(key), dict):
                out[key] = normalize_yaml_dict_keys(out[key])
        if isinstance(out.get("items"), list):
            out["items"] = [
                _normalize_result_node(child, active) for child in out["items"]
            ]
        return out
    finally:
        active.discard(id(node))


def load_result_yaml(yaml_str: str, source: str = "") -> ResultItem:
    """Parse a plugin result dump into a result tree.

    Raises:
        ValueError: If the document is not a mapping.
        MalformedTreeError: If the document is recursive.
        jsonschema.ValidationError: If the document does not match the schema.
    """
    data = _normalize_result_node(_parse_mapping(yaml_str, "result", source), set())
    jsonschema.validate(data, _load_schema(RESULT_SCHEMA))
    return item_from_dict(data)


def load_cluster_yaml(yaml_str: str, source: str = "") -> ClusterHealthSummary:
    """Parse the cluster health dump.

    Raises:
        ValueError: If the document is not a mapping or health counts are
            inconsistent (healthy greater than total).
        jsonschema.ValidationError: If the document does not match the schema.
    """
    data = _parse_mapping(yaml_str, "cluster health", source)
    if isinstance(data.get("error_summary"), dict):
        data["error_summary"] = {
            str(category): (
                normalize_yaml_dict_keys(hits) if isinstance(hits, dict) else hits
            )
            for category, hits in data["error_summary"].items()
        }
    jsonschema.validate(data, _load_schema(CLUSTER_SCHEMA))
    try:
        return cluster_summary_from_dict(data)
    except ValueError as e:
        if not source:
            raise
        raise ValueError(f"{source}: {e}") from e


def load_result_file(path: PathLike) -> ResultItem:
    return load_result_yaml(Path(path).read_text(encoding="utf-8"), source=str(path))


def load_cluster_file(path: PathLike) -> ClusterHealthSummary:
    return load_cluster_yaml(Path(path).read_text(encoding="utf-8"), source=str(path))


def load_run(path: PathLike) -> RunSummary:
    """Load and summarize one plugin file.

    Any load failure yields an unavailable RunSummary keyed by ``path``
    instead of raising.
    """
    source = str(path)
    logger.info(f"Loading plugin results from: {source}")
    try:
        root = load_result_file(path)
    except (
        OSError,
        ValueError,
        RecursionError,
        yaml.YAMLError,
        jsonschema.ValidationError,
    ) as e:
        if isinstance(e, jsonschema.ValidationError):
            reason = e.message
        elif isinstance(e, RecursionError):
            reason = "result tree is nested too deeply"
        else:
            reason = str(e)
        logger.error(
            f"Failed to load plugin results {source}: {type(e).__name__}: {reason}"
        )
        return RunSummary.unavailable(source, f"{type(e).__name__}: {reason}")
    return summarize_run(source, root)


def load_report(
    plugin_files: Iterable[PathLike],
    cluster_file: Optional[PathLike],
    strict_health: bool = False,
) -> ReportModel:
    """Load all artifacts and assemble a ReportModel.

    Plugin files are loaded in the given order; a broken plugin file becomes
    an unavailable run. A cluster file that cannot be loaded raises, since the
    report has no health section without it. ``cluster_file=None`` produces an
    empty health section.

    Raises:
        DegenerateHealthRecordError: If ``strict_health`` is set and a health
            record inspected no units.
    """
    runs = tuple(load_run(path) for path in plugin_files)

    if cluster_file is None:
        cluster = ClusterHealthSummary()
        cluster_source = ""
    else:
        cluster_source = str(cluster_file)
        logger.info(f"Loading cluster health summary from: {cluster_source}")
        cluster = load_cluster_file(cluster_file)

    available = sum(1 for run in runs if run.available)
    logger.info(f"Loaded {available}/{len(runs)} plugin result sets")
    return build_report_model(
        runs, cluster, cluster_source=cluster_source, strict_health=strict_health
    )
