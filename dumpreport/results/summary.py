"""Aggregated statistics for result trees.

- `StatusSummary`: status histogram and failure list for one tree or subtree
- `RunSummary`: one ingested artifact, its tree and its StatusSummary

Both are immutable. Summaries of sibling subtrees combine with
:meth:`StatusSummary.merge`, which keeps the failure list in pre-order when
the inputs are given in sibling order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from dumpreport.model.result import (
    ResultContainer,
    ResultItem,
    ResultLeaf,
    item_to_dict,
)
from dumpreport.types.base import FAILURE_STATUSES, Status


@dataclass(frozen=True)
class StatusSummary:
    """Status histogram plus the names of failure-equivalent leaves.

    Attributes:
        counts: Leaf count per observed status. Statuses that were never
            observed are absent (implicit zero).
        failed_names: Names of ``failed``/``timeout`` leaves in pre-order.
            Duplicates are kept.
    """

    counts: Mapping[Status, int] = field(default_factory=dict)
    failed_names: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        cleaned: Dict[Status, int] = {}
        for key, n in self.counts.items():
            if n:
                status = Status.from_string(key)
                cleaned[status] = cleaned.get(status, 0) + int(n)
        object.__setattr__(self, "counts", MappingProxyType(cleaned))
        object.__setattr__(self, "failed_names", tuple(self.failed_names))

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def failed_count(self) -> int:
        """Number of failure-equivalent leaves."""
        return sum(self.counts.get(s, 0) for s in FAILURE_STATUSES)

    def count(self, status: Status | str) -> int:
        return self.counts.get(Status.from_string(status), 0)

    @classmethod
    def empty(cls) -> "StatusSummary":
        return cls()

    @classmethod
    def for_leaf(cls, leaf: ResultLeaf) -> "StatusSummary":
        status = Status.from_string(leaf.status)
        failed = (leaf.name,) if status in FAILURE_STATUSES else ()
        return cls(counts={status: 1}, failed_names=failed)

    @classmethod
    def merge(cls, *summaries: "StatusSummary") -> "StatusSummary":
        """Combine summaries of sibling subtrees, preserving argument order."""
        counts: Dict[Status, int] = {}
        failed: list[str] = []
        for summary in summaries:
            for status, n in summary.counts.items():
                counts[status] = counts.get(status, 0) + n
            failed.extend(summary.failed_names)
        return cls(counts=counts, failed_names=tuple(failed))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "counts": {status.value: n for status, n in self.counts.items()},
            "failed": list(self.failed_names),
        }


@dataclass(frozen=True)
class RunSummary:
    """Statistics for one ingested result artifact.

    Attributes:
        source: Opaque source identifier (normally the artifact path). Passed
            through unchanged and usable as a navigation key.
        root: Root of the result tree, or None when the artifact could not be
            loaded.
        summary: Aggregated statistics, or None when aggregation failed.
        error: Reason the run is unavailable, None on success.
    """

    source: str
    root: Optional[ResultItem]
    summary: Optional[StatusSummary]
    error: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.summary is not None and self.error is None

    @property
    def name(self) -> str:
        """Plugin name (root item name), falling back to the source."""
        if self.root is not None and self.root.name:
            return self.root.name
        return self.source

    @property
    def declared_status(self) -> Optional[str]:
        """Status the artifact declares for its root, for display only."""
        if isinstance(self.root, ResultContainer):
            return self.root.declared_status
        if isinstance(self.root, ResultLeaf):
            return self.root.status.value
        return None

    @classmethod
    def unavailable(
        cls, source: str, error: str, root: Optional[ResultItem] = None
    ) -> "RunSummary":
        return cls(source=source, root=root, summary=None, error=error)

    def to_dict(self, include_tree: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "source": self.source,
            "status": self.declared_status,
            "available": self.available,
            "summary": self.summary.to_dict() if self.summary is not None else None,
        }
        if self.error is not None:
            out["error"] = self.error
        if include_tree and self.root is not None:
            out["tree"] = item_to_dict(self.root)
        return out
