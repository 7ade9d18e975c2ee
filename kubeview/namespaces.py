"""Namespace table rows: ordering, label summaries and per-namespace counts."""

from __future__ import annotations

import functools
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Callable, Optional, Union

from kubeview.ansi import truncate


@dataclass
class NsRow:
    """The UI projection of a Namespace or an OpenShift Project."""

    uid: str = ""
    name: str = ""
    phase: str = ""
    created_at: datetime | None = None
    labels: dict[str, str] = field(default_factory=dict)
    resource_kind: str = ""
    display_name: str = ""


class NsSortKey(IntEnum):
    """Namespace table sort columns, in on-screen column order."""

    NAME = 0
    STATUS = 1
    AGE = 2
    PODS = 3
    DEPS = 4
    WARN = 5

    def next(self) -> NsSortKey:
        """Return the following sort key, wrapping after the last column."""
        return NsSortKey((self + 1) % len(NsSortKey))


@dataclass
class NsCount:
    """Pods, deployments and warning events counted for one namespace."""

    pods: int = 0
    deploys: int = 0
    warnings: int = 0


_ZERO = NsCount()


def _values(items: Union[Mapping[Any, Any], Iterable[Any], None]) -> Iterable[Any]:
    if items is None:
        return ()
    return items.values() if isinstance(items, Mapping) else items


def _created(row: NsRow) -> tuple:
    # A missing creation time sorts before every real one.
    return (row.created_at is not None, row.created_at)


def _primary(key: NsSortKey, counts: Mapping[str, NsCount]) -> Callable[[NsRow], object]:
    if key is NsSortKey.NAME:
        return lambda r: r.name
    if key is NsSortKey.STATUS:
        return lambda r: r.phase
    if key is NsSortKey.AGE:
        return _created
    if key is NsSortKey.PODS:
        return lambda r: counts.get(r.name, _ZERO).pods
    if key is NsSortKey.DEPS:
        return lambda r: counts.get(r.name, _ZERO).deploys
    return lambda r: counts.get(r.name, _ZERO).warnings


def ns_less_by(
    a: NsRow, b: NsRow, key: NsSortKey, counts: Optional[Mapping[str, NsCount]]
) -> bool:
    """Order two namespaces by ``key``, then by name and UID."""
    primary = _primary(NsSortKey(key), counts or {})
    pa, pb = primary(a), primary(b)
    if pa != pb:
        return pa < pb
    return (a.name, a.uid) < (b.name, b.uid)


def sorted_ns_rows(
    rows: Union[Mapping[str, NsRow], Iterable[NsRow]],
    key: NsSortKey,
    desc: bool,
    counts: Optional[Mapping[str, NsCount]],
) -> list[NsRow]:
    """Return the namespaces ordered by ``key``, reversed when ``desc`` is true.

    ``counts`` is only consulted for the PODS, DEPS and WARN keys and may be
    ``None`` otherwise.
    """

    def compare(a: NsRow, b: NsRow) -> int:
        if desc:
            a, b = b, a
        if ns_less_by(a, b, key, counts):
            return -1
        if ns_less_by(b, a, key, counts):
            return 1
        return 0

    return sorted(_values(rows), key=functools.cmp_to_key(compare))


def label_summary(labels: Optional[Mapping[str, str]], width: int) -> str:
    """Render labels as ``k=v · k=v`` within ``width``, with a ``…+N`` suffix when cut."""
    if not labels or width <= 0:
        return ""
    parts = [f"{k}={labels[k]}" for k in sorted(labels)]
    joined = " · ".join(parts)
    if len(joined) <= width:
        return joined
    for shown in range(len(parts) - 1, 0, -1):
        candidate = " · ".join(parts[:shown])
        suffix = f" …+{len(parts) - shown}"
        if len(candidate) + len(suffix) <= width:
            return candidate + suffix
    return truncate(joined, width)


def ns_name_cell(row: NsRow) -> str:
    """Return the NAME cell: the name, plus the display name when it differs."""
    if not row.display_name or row.display_name == row.name:
        return row.name
    return f"{row.name} · {row.display_name}"


def namespaces_noun(rows: Union[Mapping[str, NsRow], Iterable[NsRow]]) -> str:
    """Return ``projects`` if any row is an OpenShift Project, else ``namespaces``."""
    if any(r.resource_kind == "Project" for r in _values(rows)):
        return "projects"
    return "namespaces"


def collect_ns_counts(pods: Any, deployments: Any, events: Any) -> dict[str, NsCount]:
    """Count pods, deployments and Warning events per namespace in one pass each.

    Each argument is a mapping or iterable of objects with a ``namespace``
    attribute; events also need a ``type`` attribute.
    """
    out: dict[str, NsCount] = {}
    for pod in _values(pods):
        out.setdefault(pod.namespace, NsCount()).pods += 1
    for deploy in _values(deployments):
        out.setdefault(deploy.namespace, NsCount()).deploys += 1
    for event in _values(events):
        if event.type != "Warning":
            continue
        out.setdefault(event.namespace, NsCount()).warnings += 1
    return out