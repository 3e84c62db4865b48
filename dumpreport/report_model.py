"""Read model consumed by the presentation layer.

A :class:`ReportModel` is assembled once per loaded artifact set and never
modified afterwards. :class:`ReportHolder` keeps the active model for a
long-running server; re-ingestion builds a new model and publishes it with a
single reference swap, so concurrent readers see either the old or the new
snapshot, never a mix.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from dumpreport.health import health_rate
from dumpreport.model.health import ClusterHealthSummary
from dumpreport.results.summary import RunSummary, StatusSummary


@dataclass(frozen=True)
class ReportModel:
    """Immutable view over all run summaries and the cluster health summary.

    Attributes:
        runs: Run summaries in ingestion order.
        cluster: Cluster health summary.
        cluster_source: Source identifier of the cluster health artifact.
        strict_health: Reject health records with no inspected units instead
            of reporting their rate as "not applicable".

    Raises:
        DegenerateHealthRecordError: On construction, if ``strict_health`` is
            set and a health record has ``total == 0``.
    """

    runs: Tuple[RunSummary, ...] = ()
    cluster: ClusterHealthSummary = field(default_factory=ClusterHealthSummary)
    cluster_source: str = ""
    strict_health: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "runs", tuple(self.runs))
        if self.strict_health:
            health_rate(self.cluster.node_health, strict=True)
            health_rate(self.cluster.pod_health, strict=True)

    def __iter__(self) -> Iterator[RunSummary]:
        return iter(self.runs)

    def __len__(self) -> int:
        return len(self.runs)

    @property
    def plugin_names(self) -> Tuple[str, ...]:
        return tuple(run.name for run in self.runs)

    def find_run(self, key: Optional[str]) -> Optional[RunSummary]:
        """Return the run whose source identifier, or else plugin name, is ``key``."""
        if not key:
            return None
        for run in self.runs:
            if run.source == key:
                return run
        for run in self.runs:
            if run.name == key:
                return run
        return None

    def get_run(self, key: Optional[str]) -> Optional[RunSummary]:
        """Like :meth:`find_run` but fall back to the first run.

        Returns None only when the model holds no runs.
        """
        run = self.find_run(key)
        if run is not None:
            return run
        return self.runs[0] if self.runs else None

    @property
    def node_health_rate(self) -> Optional[int]:
        return health_rate(self.cluster.node_health, strict=self.strict_health)

    @property
    def pod_health_rate(self) -> Optional[int]:
        return health_rate(self.cluster.pod_health, strict=self.strict_health)

    @property
    def overall(self) -> StatusSummary:
        """Statistics merged across every available run."""
        return StatusSummary.merge(
            *(run.summary for run in self.runs if run.summary is not None)
        )

    @property
    def unavailable_runs(self) -> Tuple[RunSummary, ...]:
        return tuple(run for run in self.runs if not run.available)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe export of runs, cluster health and derived rates."""
        return {
            "runs": [run.to_dict() for run in self.runs],
            "overall": self.overall.to_dict(),
            "cluster": {
                "source": self.cluster_source,
                **self.cluster.to_dict(),
                "node_health_rate": self.node_health_rate,
                "pod_health_rate": self.pod_health_rate,
            },
        }


def build_report_model(
    runs: Iterable[RunSummary],
    cluster: ClusterHealthSummary,
    cluster_source: str = "",
    strict_health: bool = False,
) -> ReportModel:
    return ReportModel(
        runs=tuple(runs),
        cluster=cluster,
        cluster_source=cluster_source,
        strict_health=strict_health,
    )


class ReportHolder:
    """Holds the active ReportModel for concurrent readers.

    Readers access :attr:`current` without locking. Writers call
    :meth:`publish`, which replaces the reference in one assignment.
    """

    def __init__(self, model: Optional[ReportModel] = None):
        self._current: ReportModel = model if model is not None else ReportModel()
        self._write_lock = threading.Lock()
        self._generation = 0

    @property
    def current(self) -> ReportModel:
        return self._current

    @property
    def generation(self) -> int:
        """Number of models published since construction."""
        return self._generation

    def publish(self, model: ReportModel) -> ReportModel:
        """Make ``model`` the active snapshot and return the previous one."""
        if not isinstance(model, ReportModel):
            raise TypeError(f"Expected ReportModel, got {type(model).__name__}")
        with self._write_lock:
            previous = self._current
            self._current = model
            self._generation += 1
        return previous
