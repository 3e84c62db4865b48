"""Configuration for loading and serving a report."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import yaml

from dumpreport.utils.yaml_utils import normalize_yaml_dict_keys


@dataclass(frozen=True)
class ReportConfig:
    """Where the artifacts are and how the report is served."""

    # Plugin result dumps, one result tree per file, in display order
    plugin_files: Tuple[str, ...] = (
        "results_dump_e2e.yaml",
        "results_dump_systemd_logs.yaml",
    )

    # Cluster health dump; None disables the health section
    cluster_file: Optional[str] = "results_dump_sonobuoy.yaml"

    host: str = "127.0.0.1"
    port: int = 8080

    # Raw files are only served from below this directory
    artifact_root: str = "."

    # Raise on health records with no inspected units instead of showing n/a
    strict_health: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "plugin_files", tuple(self.plugin_files))
        object.__setattr__(self, "port", int(self.port))
        if not 0 < self.port < 65536:
            raise ValueError(f"Port must be in 1..65535, got {self.port}")

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], base_dir: Optional[Path] = None
    ) -> "ReportConfig":
        """Build a config from a mapping, rejecting unknown keys.

        Relative paths are resolved against ``base_dir`` when given.
        """
        data = normalize_yaml_dict_keys(data)
        allowed = {f.name for f in fields(cls)}
        extra = set(data) - allowed
        if extra:
            raise ValueError(
                f"Unrecognized config key(s): {', '.join(sorted(extra))}. "
                f"Allowed keys are {sorted(allowed)}"
            )

        plugin_files = data.get("plugin_files", cls.plugin_files)
        if isinstance(plugin_files, str) or not isinstance(
            plugin_files, (list, tuple)
        ):
            raise ValueError("'plugin_files' must be a list of paths")

        config = cls(**data)
        if base_dir is not None:
            config = config.resolved_against(base_dir)
        return config

    def resolved_against(self, base_dir: Path) -> "ReportConfig":
        """Return a copy with relative artifact paths anchored at ``base_dir``."""

        def _resolve(value: str) -> str:
            path = Path(value)
            return str(path if path.is_absolute() else base_dir / path)

        return replace(
            self,
            plugin_files=tuple(_resolve(p) for p in self.plugin_files),
            cluster_file=(
                None if self.cluster_file is None else _resolve(self.cluster_file)
            ),
            artifact_root=_resolve(self.artifact_root),
        )


def load_config(path: Path) -> ReportConfig:
    """Read a ReportConfig from a YAML file."""
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The config file must map to a dictionary at top-level.")
    return ReportConfig.from_dict(data, base_dir=path.parent)


# Global default configuration
DEFAULT_CONFIG = ReportConfig()
