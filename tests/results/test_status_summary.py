from __future__ import annotations

import pytest

from dumpreport.model.result import ResultContainer, ResultLeaf
from dumpreport.results.summary import RunSummary, StatusSummary
from dumpreport.types.base import Status


def test_zero_counts_are_dropped_and_keys_folded() -> None:
    summary = StatusSummary(counts={"passed": 2, "failed": 0, "bogus": 1, "unknown": 1})
    assert dict(summary.counts) == {Status.PASSED: 2, Status.UNKNOWN: 2}
    assert summary.total == 4
    assert summary.count("failed") == 0
    assert summary.count(Status.UNKNOWN) == 2


def test_counts_are_read_only() -> None:
    summary = StatusSummary(counts={Status.PASSED: 1})
    with pytest.raises(TypeError):
        summary.counts[Status.PASSED] = 5  # type: ignore[index]


def test_for_leaf() -> None:
    assert StatusSummary.for_leaf(ResultLeaf("a", "passed")).failed_names == ()
    timed_out = StatusSummary.for_leaf(ResultLeaf("b", "timeout"))
    assert timed_out.failed_names == ("b",)
    assert timed_out.failed_count == 1


def test_merge_preserves_argument_order() -> None:
    first = StatusSummary(counts={"failed": 1}, failed_names=("x",))
    second = StatusSummary(counts={"failed": 1, "passed": 3}, failed_names=("y",))
    merged = StatusSummary.merge(first, second)
    assert merged.failed_names == ("x", "y")
    assert merged.count("failed") == 2
    assert merged.total == 5
    assert StatusSummary.merge() == StatusSummary.empty()


def test_summary_to_dict() -> None:
    summary = StatusSummary(counts={"passed": 1, "timeout": 1}, failed_names=("t",))
    assert summary.to_dict() == {
        "total": 2,
        "counts": {"passed": 1, "timeout": 1},
        "failed": ["t"],
    }


def test_run_summary_properties() -> None:
    root = ResultContainer(
        "e2e", children=(ResultLeaf("a", "failed"),), declared_status="failed"
    )
    run = RunSummary(
        source="results_dump_e2e.yaml",
        root=root,
        summary=StatusSummary(counts={"failed": 1}, failed_names=("a",)),
    )
    assert run.available
    assert run.name == "e2e"
    assert run.declared_status == "failed"

    data = run.to_dict()
    assert data["name"] == "e2e"
    assert data["source"] == "results_dump_e2e.yaml"
    assert data["summary"]["failed"] == ["a"]
    assert "tree" not in data
    assert "error" not in data

    with_tree = run.to_dict(include_tree=True)
    assert with_tree["tree"]["items"][0] == {"name": "a", "status": "failed"}


def test_unavailable_run_falls_back_to_source_name() -> None:
    run = RunSummary.unavailable("broken.yaml", "ValueError: bad")
    assert not run.available
    assert run.name == "broken.yaml"
    assert run.declared_status is None
    data = run.to_dict(include_tree=True)
    assert data["summary"] is None
    assert data["error"] == "ValueError: bad"
    assert "tree" not in data


def test_leaf_root_declared_status() -> None:
    leaf = ResultLeaf("solo", "skipped")
    run = RunSummary("solo.yaml", leaf, StatusSummary.for_leaf(leaf))
    assert run.declared_status == "skipped"
