"""Reduce result trees to flat statistics.

:func:`summarize` folds a tree into a :class:`StatusSummary`. Each subtree
produces its own summary; a container merges its children's summaries in
sibling order, which yields the failure list in pre-order. Only leaves are
counted; a container's own declared status is ignored.

:func:`summarize_run` and :func:`summarize_runs` wrap the fold for ingestion:
a malformed tree marks only its own run as unavailable.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from dumpreport.logging import get_logger
from dumpreport.model.result import (
    MalformedTreeError,
    ResultContainer,
    ResultItem,
    ResultLeaf,
)
from dumpreport.results.summary import RunSummary, StatusSummary

logger = get_logger(__name__)

__all__ = ["MalformedTreeError", "summarize", "summarize_run", "summarize_runs"]


def summarize(root: ResultItem) -> StatusSummary:
    """Return the status histogram and failure list of ``root``.

    Args:
        root: Any result tree, including a single leaf or an empty container.

    Returns:
        A new StatusSummary. ``total`` equals the number of leaves.

    Raises:
        MalformedTreeError: If the same node object is reached twice, which
            covers cycles. Trees built by :func:`item_from_dict` never trigger
            this.
    """
    visited: set[int] = set()
    # (item, expanded): a container is pushed once to schedule its children
    # and once more to merge their summaries after they are all done.
    pending: List[Tuple[ResultItem, bool]] = [(root, False)]
    done: List[StatusSummary] = []

    while pending:
        item, expanded = pending.pop()
        if expanded:
            n = len(item.children)
            if n:
                merged = StatusSummary.merge(*done[-n:])
                del done[-n:]
            else:
                merged = StatusSummary.empty()
            done.append(merged)
            continue

        if id(item) in visited:
            raise MalformedTreeError(
                f"Result item '{item.name}' is reachable more than once"
            )
        visited.add(id(item))

        if isinstance(item, ResultLeaf):
            done.append(StatusSummary.for_leaf(item))
        elif isinstance(item, ResultContainer):
            pending.append((item, True))
            pending.extend((child, False) for child in reversed(item.children))
        else:
            raise MalformedTreeError(f"Unexpected node type {type(item).__name__}")

    return done[0]


def summarize_run(source: str, root: Optional[ResultItem]) -> RunSummary:
    """Summarize one artifact's tree into a RunSummary.

    A malformed tree is logged and produces an unavailable RunSummary instead
    of raising, so callers can keep processing other runs.
    """
    if root is None:
        return RunSummary.unavailable(source, "no result tree loaded")
    try:
        summary = summarize(root)
    except MalformedTreeError as e:
        logger.error(f"Failed to summarize results from {source}: {e}")
        return RunSummary.unavailable(source, f"{type(e).__name__}: {e}", root=root)

    logger.debug(
        f"Summarized {source}: total={summary.total} failed={summary.failed_count}"
    )
    return RunSummary(source=source, root=root, summary=summary)


def summarize_runs(
    trees: Iterable[Tuple[str, Optional[ResultItem]]],
) -> Tuple[RunSummary, ...]:
    """Summarize ``(source, root)`` pairs in the given order."""
    return tuple(summarize_run(source, root) for source, root in trees)
