"""Shared fixtures: sample result dumps, cluster health dump and trees."""

from __future__ import annotations

from pathlib import Path

import pytest

from dumpreport.model.result import ResultContainer, ResultLeaf

E2E_YAML = """
name: e2e
status: failed
meta:
  type: summary
items:
- name: /tmp/results/junit_01.xml
  status: failed
  meta:
    file: results/global/junit_01.xml
  items:
  - name: Kubernetes e2e suite
    status: failed
    items:
    - name: "[sig-apps] Deployment should run"
      status: passed
    - name: "[sig-network] DNS should resolve"
      status: failed
      details:
        failure: timed out waiting for DNS
        system-out: dns probe log
    - name: "[sig-storage] PV should mount"
      status: skipped
    - name: "[sig-node] Pods should start"
      status: timeout
"""

SYSTEMD_YAML = """
name: systemd_logs
status: passed
items:
- name: node-1
  status: passed
  meta:
    file: results/node-1/systemd_logs
- name: node-2
  status: passed
  meta:
    file: results/node-2/systemd_logs
"""

CLUSTER_YAML = """
api_version: v1.27.3
node_health:
  total_nodes: 3
  healthy_nodes: 2
  details:
  - name: node-1
    healthy: true
    ready: "True"
  - name: node-3
    healthy: false
    ready: "False"
    reason: KubeletNotReady
    message: container runtime is down
pod_health:
  total_nodes: 10
  healthy_nodes: 10
error_summary:
  errors:
    podlogs/kube-system/etcd.txt: 4
  warnings:
    podlogs/kube-system/apiserver.txt: 2
"""


@pytest.fixture
def artifact_dir(tmp_path: Path) -> Path:
    """Directory holding the two plugin dumps and the cluster dump."""
    (tmp_path / "results_dump_e2e.yaml").write_text(E2E_YAML)
    (tmp_path / "results_dump_systemd_logs.yaml").write_text(SYSTEMD_YAML)
    (tmp_path / "results_dump_sonobuoy.yaml").write_text(CLUSTER_YAML)
    return tmp_path


@pytest.fixture
def plugin_files(artifact_dir: Path) -> list[str]:
    return [
        str(artifact_dir / "results_dump_e2e.yaml"),
        str(artifact_dir / "results_dump_systemd_logs.yaml"),
    ]


@pytest.fixture
def cluster_file(artifact_dir: Path) -> str:
    return str(artifact_dir / "results_dump_sonobuoy.yaml")


@pytest.fixture
def scenario_tree() -> ResultContainer:
    """root -> [A(passed), B -> [C(failed), D(skipped)]]."""
    return ResultContainer(
        name="root",
        children=(
            ResultLeaf("A", "passed"),
            ResultContainer(
                name="B",
                children=(ResultLeaf("C", "failed"), ResultLeaf("D", "skipped")),
            ),
        ),
    )
