"""Tests for HTML rendering and notebook/HTML report files."""

from pathlib import Path

import nbformat
import pytest

from dumpreport.aggregate import summarize_run
from dumpreport.io.loader import load_report
from dumpreport.model.health import ClusterHealthSummary
from dumpreport.model.result import ResultContainer, ResultLeaf
from dumpreport.report import ReportGenerator, render_summary_html, render_tests_html
from dumpreport.report_model import ReportModel, build_report_model
from dumpreport.results.summary import RunSummary


@pytest.fixture
def model(plugin_files, cluster_file) -> ReportModel:
    return load_report(plugin_files, cluster_file)


def test_summary_page_lists_plugins_and_counts(model):
    html = render_summary_html(model)
    assert "Plugin: <a href=\"/tests/e2e\">e2e</a>" in html
    assert "Plugin: <a href=\"/tests/systemd_logs\">systemd_logs</a>" in html
    assert "<h5>Total: 4</h5>" in html
    assert "<h5>Failed: 1</h5>" in html
    assert "<h5>Timeout: 1</h5>" in html
    assert "Unknown:" not in html
    assert '<li class="failed">[sig-network] DNS should resolve</li>' in html
    assert '<li class="failed">[sig-node] Pods should start</li>' in html
    assert 'href="/tests/e2e/failed"' in html


def test_summary_page_cluster_health(model):
    html = render_summary_html(model)
    assert "API Server version: v1.27.3" in html
    assert "Node health: 2/3 (66%)" in html
    assert "Pod health: 10/10 (100%)" in html
    assert "Details for unhealthy nodes:" in html
    assert "KubeletNotReady" in html
    assert "Details for unhealthy pods:" not in html
    assert "Errors detected in files:" in html
    assert "podlogs/kube-system/etcd.txt" in html


def test_summary_page_without_cluster_shows_not_applicable():
    html = render_summary_html(ReportModel())
    assert "Node health: 0/0 (n/a)" in html
    assert "Pod health: 0/0 (n/a)" in html
    assert "Errors detected in files:" not in html


def test_summary_page_shows_unavailable_runs():
    model = ReportModel(runs=(RunSummary.unavailable("bad.yaml", "ValueError: nope"),))
    html = render_summary_html(model)
    assert "Results unavailable: ValueError: nope" in html


def test_summary_page_escapes_names():
    root = ResultContainer("<script>", children=(ResultLeaf("<b>x</b>", "failed"),))
    model = build_report_model([summarize_run("x.yaml", root)], ClusterHealthSummary())
    html = render_summary_html(model)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "&lt;b&gt;x&lt;/b&gt;" in html


def test_tests_page_groups_by_suite(model):
    html = render_tests_html(model.find_run("e2e"))
    assert "Kubernetes e2e suite</caption>" in html
    assert "[sig-apps] Deployment should run" in html
    assert "timed out waiting for DNS" in html
    assert "dns probe log" in html
    assert '<td class="timeout">timeout</td>' in html


def test_failed_tests_page_only_lists_failures(model):
    html = render_tests_html(model.find_run("e2e"), failures_only=True)
    assert "[sig-network] DNS should resolve" in html
    assert "[sig-node] Pods should start" in html
    assert "[sig-apps] Deployment should run" not in html
    assert "[sig-storage] PV should mount" not in html

    clean = render_tests_html(model.find_run("systemd_logs"), failures_only=True)
    assert "No failed tests." in clean


def test_tests_page_for_unavailable_run():
    html = render_tests_html(RunSummary.unavailable("bad.yaml", "OSError: gone"))
    assert "Results unavailable: OSError: gone" in html


def test_generate_notebook(model, tmp_path: Path):
    path = ReportGenerator(model).generate_notebook(tmp_path / "out" / "report.ipynb")
    assert path.exists()

    nb = nbformat.read(str(path), as_version=4)
    nbformat.validate(nb)
    sources = [cell.source for cell in nb.cells]
    assert sources[0] == "# Results Report"
    assert sources[1].startswith("## Plugins")
    assert "| e2e | failed | 4 | 1 | 1 | 1 | 1 | 0 |" in sources[1]
    assert any(s.startswith("### Failed tests: e2e") for s in sources)
    assert not any(s.startswith("### Failed tests: systemd_logs") for s in sources)

    health = next(s for s in sources if s.startswith("## Cluster health"))
    assert "| Nodes | 2 | 3 | 66% |" in health
    assert "| Pods | 10 | 10 | 100% |" in health

    assert nb.cells[-1].cell_type == "code"
    assert "load_report(" in nb.cells[-1].source


def test_generate_html_report(model, tmp_path: Path):
    path = ReportGenerator(model).generate_html_report(tmp_path / "report.html")
    html = path.read_text(encoding="utf-8")
    assert html.lstrip().lower().startswith("<!doctype html>")
    assert "Node health: 2/3 (66%)" in html
