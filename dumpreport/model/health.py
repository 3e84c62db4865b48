"""Cluster health records.

The cluster health artifact carries two health dimensions (nodes and pods),
each with a total/healthy count and per-unit details, plus the API server
version and a summary of error hits found in collected logs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

#: error category -> source location (file path) -> occurrence count
ErrorSummary = Mapping[str, Mapping[str, int]]


@dataclass(frozen=True)
class HealthDetail:
    """Health of a single node or pod."""

    name: str
    healthy: bool
    ready: str = ""
    reason: str = ""
    message: str = ""
    namespace: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HealthDetail":
        return cls(
            name=str(data.get("name", "")),
            healthy=bool(data.get("healthy", False)),
            ready=str(data.get("ready", "") or ""),
            reason=str(data.get("reason", "") or ""),
            message=str(data.get("message", "") or ""),
            namespace=str(data.get("namespace", "") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "healthy": self.healthy,
            "ready": self.ready,
        }
        for key in ("reason", "message", "namespace"):
            value = getattr(self, key)
            if value:
                out[key] = value
        return out


@dataclass(frozen=True)
class HealthRecord:
    """Health counts for one infrastructure dimension.

    Attributes:
        total: Number of units inspected.
        healthy: Number of healthy units, ``0 <= healthy <= total``.
        details: Per-unit facts for drill-down listings; not used for rates.
    """

    total: int = 0
    healthy: int = 0
    details: Tuple[HealthDetail, ...] = ()

    def __post_init__(self) -> None:
        if self.total < 0:
            raise ValueError(f"Health total must be >= 0, got {self.total}")
        if not 0 <= self.healthy <= self.total:
            raise ValueError(
                f"Healthy count {self.healthy} is outside [0, {self.total}]"
            )
        object.__setattr__(self, "details", tuple(self.details))

    @property
    def is_degraded(self) -> bool:
        return self.healthy < self.total

    def unhealthy_details(self) -> Tuple[HealthDetail, ...]:
        """Return details of units reported unhealthy, in document order."""
        return tuple(d for d in self.details if not d.healthy)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "HealthRecord":
        """Build from the artifact shape (``total_nodes``/``healthy_nodes``)."""
        data = data or {}
        return cls(
            total=int(data.get("total_nodes", 0) or 0),
            healthy=int(data.get("healthy_nodes", 0) or 0),
            details=tuple(HealthDetail.from_dict(d) for d in data.get("details") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "total_nodes": self.total,
            "healthy_nodes": self.healthy,
        }
        if self.details:
            out["details"] = [d.to_dict() for d in self.details]
        return out


def _freeze_error_summary(data: Optional[Mapping[str, Any]]) -> ErrorSummary:
    frozen: Dict[str, Mapping[str, int]] = {}
    for category, hits in (data or {}).items():
        frozen[str(category)] = MappingProxyType(
            {str(location): int(count) for location, count in (hits or {}).items()}
        )
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class ClusterHealthSummary:
    """Cluster-level health loaded from the cluster health artifact."""

    node_health: HealthRecord = field(default_factory=HealthRecord)
    pod_health: HealthRecord = field(default_factory=HealthRecord)
    api_version: str = ""
    error_summary: ErrorSummary = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "error_summary", _freeze_error_summary(self.error_summary)
        )

    @property
    def total_error_hits(self) -> int:
        return sum(
            count for hits in self.error_summary.values() for count in hits.values()
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClusterHealthSummary":
        return cls(
            node_health=HealthRecord.from_dict(data.get("node_health")),
            pod_health=HealthRecord.from_dict(data.get("pod_health")),
            api_version=str(data.get("api_version", "") or ""),
            error_summary=data.get("error_summary") or {},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_health": self.node_health.to_dict(),
            "pod_health": self.pod_health.to_dict(),
            "api_version": self.api_version,
            "error_summary": {
                category: dict(hits) for category, hits in self.error_summary.items()
            },
        }


def health_record_from_dict(data: Optional[Mapping[str, Any]]) -> HealthRecord:
    return HealthRecord.from_dict(data)


def cluster_summary_from_dict(data: Mapping[str, Any]) -> ClusterHealthSummary:
    return ClusterHealthSummary.from_dict(data)
