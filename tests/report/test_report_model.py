from __future__ import annotations

import threading

import pytest

from dumpreport.aggregate import summarize_run
from dumpreport.health import DegenerateHealthRecordError
from dumpreport.model.health import ClusterHealthSummary, HealthRecord
from dumpreport.model.result import ResultContainer, ResultLeaf
from dumpreport.report_model import ReportHolder, ReportModel, build_report_model
from dumpreport.results.summary import RunSummary


def _runs() -> list[RunSummary]:
    e2e = ResultContainer(
        "e2e",
        children=(ResultLeaf("a", "passed"), ResultLeaf("b", "failed")),
        declared_status="failed",
    )
    systemd = ResultContainer("systemd_logs", children=(ResultLeaf("n1", "passed"),))
    return [
        summarize_run("dumps/results_dump_e2e.yaml", e2e),
        summarize_run("dumps/results_dump_systemd_logs.yaml", systemd),
        RunSummary.unavailable("dumps/broken.yaml", "ValueError: bad"),
    ]


@pytest.fixture
def model() -> ReportModel:
    cluster = ClusterHealthSummary(
        node_health=HealthRecord(total=3, healthy=2),
        pod_health=HealthRecord(total=10, healthy=10),
        api_version="v1.27.3",
    )
    return build_report_model(_runs(), cluster, cluster_source="dumps/sonobuoy.yaml")


def test_runs_keep_ingestion_order(model: ReportModel) -> None:
    assert len(model) == 3
    assert model.plugin_names == ("e2e", "systemd_logs", "dumps/broken.yaml")
    assert [run.name for run in model] == list(model.plugin_names)


def test_find_run_by_source_then_name(model: ReportModel) -> None:
    assert model.find_run("systemd_logs").source.endswith("systemd_logs.yaml")
    assert model.find_run("dumps/results_dump_e2e.yaml").name == "e2e"
    assert model.find_run("missing") is None
    assert model.find_run("") is None
    assert model.find_run(None) is None


def test_get_run_falls_back_to_first(model: ReportModel) -> None:
    assert model.get_run("systemd_logs").name == "systemd_logs"
    assert model.get_run("missing").name == "e2e"
    assert model.get_run(None).name == "e2e"
    assert ReportModel().get_run("anything") is None


def test_health_rates(model: ReportModel) -> None:
    assert model.node_health_rate == 66
    assert model.pod_health_rate == 100


def test_empty_cluster_rates_not_applicable() -> None:
    model = ReportModel()
    assert model.node_health_rate is None
    assert model.pod_health_rate is None


def test_strict_model_rejects_empty_record_on_construction() -> None:
    with pytest.raises(DegenerateHealthRecordError):
        ReportModel(strict_health=True)
    with pytest.raises(DegenerateHealthRecordError):
        ReportModel(
            cluster=ClusterHealthSummary(node_health=HealthRecord(total=1, healthy=1)),
            strict_health=True,
        )


def test_strict_model_with_populated_records(model: ReportModel) -> None:
    strict = ReportModel(runs=model.runs, cluster=model.cluster, strict_health=True)
    assert strict.node_health_rate == 66
    assert strict.to_dict()["cluster"]["pod_health_rate"] == 100


def test_overall_merges_available_runs(model: ReportModel) -> None:
    overall = model.overall
    assert overall.total == 3
    assert overall.count("passed") == 2
    assert overall.failed_names == ("b",)
    assert [run.source for run in model.unavailable_runs] == ["dumps/broken.yaml"]


def test_to_dict(model: ReportModel) -> None:
    data = model.to_dict()
    assert [r["name"] for r in data["runs"]] == [
        "e2e",
        "systemd_logs",
        "dumps/broken.yaml",
    ]
    assert data["overall"]["total"] == 3
    cluster = data["cluster"]
    assert cluster["source"] == "dumps/sonobuoy.yaml"
    assert cluster["api_version"] == "v1.27.3"
    assert cluster["node_health"] == {"total_nodes": 3, "healthy_nodes": 2}
    assert cluster["node_health_rate"] == 66
    assert cluster["pod_health_rate"] == 100


def test_model_is_frozen(model: ReportModel) -> None:
    with pytest.raises(AttributeError):
        model.runs = ()  # type: ignore[misc]


def test_holder_publish_swaps_snapshot(model: ReportModel) -> None:
    holder = ReportHolder()
    assert len(holder.current) == 0
    assert holder.generation == 0

    previous = holder.publish(model)
    assert len(previous) == 0
    assert holder.current is model
    assert holder.generation == 1


def test_holder_rejects_non_models() -> None:
    with pytest.raises(TypeError):
        ReportHolder().publish({"runs": []})  # type: ignore[arg-type]


def test_readers_see_whole_snapshots(model: ReportModel) -> None:
    empty = ReportModel()
    holder = ReportHolder(empty)
    seen: list[int] = []
    stop = threading.Event()

    def reader() -> None:
        while not stop.is_set():
            seen.append(len(holder.current.runs))

    thread = threading.Thread(target=reader)
    thread.start()
    for _ in range(200):
        holder.publish(model)
        holder.publish(empty)
    stop.set()
    thread.join()

    assert holder.generation == 400
    assert set(seen) <= {0, 3}
