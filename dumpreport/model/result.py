"""Result tree model.

A plugin result dump is a tree of named items. Leaves are individual test or
check outcomes; containers group them (plugin -> suite -> test case). The two
kinds are separate types so a container can never contribute a status to the
statistics by accident.

Documents use the conventional field names ``name``, ``status``, ``meta``,
``details`` and ``items``. :func:`item_from_dict` decides leaf versus
container exactly once, at construction: a node with a non-empty ``items``
list is a container, every other node is a leaf.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Tuple, Union

from dumpreport.types.base import Status


class MalformedTreeError(ValueError):
    """A result tree violates its structural invariants (e.g. contains a cycle)."""


def _frozen_mapping(data: Optional[Mapping[Any, Any]]) -> Mapping[Any, Any]:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class ResultLeaf:
    """One concrete test or check outcome.

    Attributes:
        name: Identifier, unique among siblings only.
        status: Outcome; unrecognized input values are stored as UNKNOWN.
        metadata: Opaque string metadata (``meta`` in documents).
        details: Opaque presentation data, conventionally ``failure`` and
            ``system-out``.
    """

    name: str
    status: Status = Status.UNKNOWN
    metadata: Mapping[str, str] = field(default_factory=dict)
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", Status.from_string(self.status))
        object.__setattr__(self, "metadata", _frozen_mapping(self.metadata))
        object.__setattr__(self, "details", _frozen_mapping(self.details))

    @property
    def failure(self) -> Any:
        return self.details.get("failure")

    @property
    def system_out(self) -> Any:
        return self.details.get("system-out")


@dataclass(frozen=True)
class ResultContainer:
    """A grouping of results (plugin, suite).

    Attributes:
        name: Identifier, unique among siblings only.
        children: Ordered child items.
        metadata: Opaque string metadata.
        declared_status: Raw status string from the source document. Shown to
            readers but never used for statistics.
    """

    name: str
    children: Tuple["ResultItem", ...] = ()
    metadata: Mapping[str, str] = field(default_factory=dict)
    declared_status: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "metadata", _frozen_mapping(self.metadata))

    def child(self, name: str) -> Optional["ResultItem"]:
        """Return the first direct child with the given name, if any."""
        for item in self.children:
            if item.name == name:
                return item
        return None


ResultItem = Union[ResultLeaf, ResultContainer]


def is_leaf(item: ResultItem) -> bool:
    return isinstance(item, ResultLeaf)


def iter_leaves_with_path(
    root: ResultItem,
) -> Iterator[Tuple[Tuple[str, ...], ResultLeaf]]:
    """Yield ``(container_path, leaf)`` pairs in pre-order.

    ``container_path`` holds the names of the containers from the root down to
    the leaf's parent. A single-leaf tree yields ``((), root)``.
    """
    stack: list[Tuple[Tuple[str, ...], ResultItem]] = [((), root)]
    seen: set[int] = set()
    while stack:
        path, item = stack.pop()
        if id(item) in seen:
            raise MalformedTreeError(
                f"Result item '{item.name}' is reachable more than once"
            )
        seen.add(id(item))
        if isinstance(item, ResultLeaf):
            yield path, item
            continue
        child_path = path + (item.name,)
        # Reverse so the leftmost child is popped first
        for child in reversed(item.children):
            stack.append((child_path, child))


def iter_leaves(root: ResultItem) -> Iterator[ResultLeaf]:
    """Yield the leaves of ``root`` in pre-order."""
    for _path, leaf in iter_leaves_with_path(root):
        yield leaf


def count_leaves(root: ResultItem) -> int:
    return sum(1 for _ in iter_leaves(root))


def group_leaves_by_suite(
    root: ResultItem, failures_only: bool = False
) -> list[Tuple[Tuple[str, ...], list[ResultLeaf]]]:
    """Group leaves under their parent container path.

    Groups appear in order of their first leaf (pre-order). With
    ``failures_only`` only failed and timed-out leaves are kept and empty
    groups are dropped.
    """
    groups: dict[Tuple[str, ...], list[ResultLeaf]] = {}
    for path, leaf in iter_leaves_with_path(root):
        if failures_only and not leaf.status.is_failure:
            continue
        groups.setdefault(path, []).append(leaf)
    return list(groups.items())


def item_from_dict(
    data: Mapping[str, Any], _active: Optional[set[int]] = None
) -> ResultItem:
    """Build a result tree from a plain mapping.

    Args:
        data: Mapping with ``name`` and optional ``status``, ``meta``,
            ``details`` and ``items``.

    Returns:
        A ResultContainer when ``items`` is non-empty, a ResultLeaf otherwise.
        The top-level call returns an empty ResultContainer for a root with
        neither ``items`` nor ``status``.

    Raises:
        MalformedTreeError: If the mapping contains itself (recursive anchors).
        ValueError: If a node is not a mapping or ``items`` is not a list.
    """
    top_level = _active is None
    active = set() if _active is None else _active
    if not isinstance(data, Mapping):
        raise ValueError(f"Result item must be a mapping, got {type(data).__name__}")
    if id(data) in active:
        raise MalformedTreeError(
            f"Result item '{data.get('name', '')}' contains itself"
        )

    name = str(data.get("name") or "")
    items = data.get("items") or []
    if not isinstance(items, list):
        raise ValueError(f"'items' of result item '{name}' must be a list")
    raw_meta = data.get("meta") or {}
    if not isinstance(raw_meta, Mapping):
        raise ValueError(f"'meta' of result item '{name}' must be a mapping")
    metadata = {str(k): "" if v is None else str(v) for k, v in raw_meta.items()}
    raw_status = data.get("status")

    if not items:
        if top_level and raw_status is None:
            return ResultContainer(name=name, metadata=metadata)
        return ResultLeaf(
            name=name,
            status=Status.from_string(raw_status),
            metadata=metadata,
            details=data.get("details") or {},
        )

    active.add(id(data))
    try:
        children = tuple(item_from_dict(child, active) for child in items)
    finally:
        active.discard(id(data))
    return ResultContainer(
        name=name,
        children=children,
        metadata=metadata,
        declared_status=None if raw_status is None else str(raw_status),
    )


def item_to_dict(item: ResultItem) -> dict[str, Any]:
    """Convert a result tree back to the conventional document shape."""
    out: dict[str, Any] = {"name": item.name}
    if isinstance(item, ResultLeaf):
        out["status"] = item.status.value
        if item.metadata:
            out["meta"] = dict(item.metadata)
        if item.details:
            out["details"] = dict(item.details)
        return out

    if item.declared_status is not None:
        out["status"] = item.declared_status
    if item.metadata:
        out["meta"] = dict(item.metadata)
    if item.children:
        out["items"] = [item_to_dict(child) for child in item.children]
    return out
