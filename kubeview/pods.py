"""Pod table rows: formatting, ordering and container-state dots."""

from __future__ import annotations

import functools
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Callable, Union

from kubeview.theme import Theme

_DOT = "■"
_OVERFLOW_RESERVED = 4


class ContainerState(Enum):
    """Coarse container state used to colour the container dots."""

    UNKNOWN = "unknown"
    READY = "ready"
    WAITING = "waiting"
    ERROR = "error"
    TERMINATED = "terminated"


@dataclass
class PodRow:
    """The UI projection of one pod."""

    uid: str = ""
    namespace: str = ""
    name: str = ""
    phase: str = ""
    restarts: int = 0
    node: str = ""
    containers: list[str] = field(default_factory=list)
    container_ready: list[bool] = field(default_factory=list)
    container_states: list[ContainerState] = field(default_factory=list)
    created_at: datetime | None = None
    updated: datetime | None = None
    cpu_milli: int = 0
    mem_bytes: int = 0
    has_metrics: bool = False
    net_rx_bps: int = 0
    net_tx_bps: int = 0
    has_network: bool = False


class SortKey(IntEnum):
    """Pod table sort columns, in on-screen column order."""

    NAMESPACE = 0
    NAME = 1
    STATUS = 2
    RESTARTS = 3
    AGE = 4
    CPU = 5
    MEM = 6
    NET_RX = 7
    NET_TX = 8
    NODE = 9

    def next(self) -> SortKey:
        """Return the following sort key, wrapping after the last column."""
        return SortKey((self + 1) % len(SortKey))

    def label(self) -> str:
        """Return the short header label for this key."""
        return _LABELS[self]


_LABELS = {
    SortKey.NAMESPACE: "ns",
    SortKey.NAME: "name",
    SortKey.STATUS: "status",
    SortKey.RESTARTS: "restarts",
    SortKey.AGE: "age",
    SortKey.CPU: "cpu",
    SortKey.MEM: "mem",
    SortKey.NET_RX: "net-rx",
    SortKey.NET_TX: "net-tx",
    SortKey.NODE: "node",
}


def _created(row: PodRow) -> tuple:
    # A missing creation time sorts before every real one.
    return (row.created_at is not None, row.created_at)


_PRIMARY: dict[SortKey, Callable[[PodRow], object]] = {
    SortKey.NAMESPACE: lambda r: r.namespace,
    SortKey.NAME: lambda r: r.name,
    SortKey.STATUS: lambda r: r.phase,
    SortKey.RESTARTS: lambda r: r.restarts,
    SortKey.AGE: _created,
    SortKey.CPU: lambda r: r.cpu_milli,
    SortKey.MEM: lambda r: r.mem_bytes,
    SortKey.NET_RX: lambda r: r.net_rx_bps,
    SortKey.NET_TX: lambda r: r.net_tx_bps,
    SortKey.NODE: lambda r: r.node,
}


def format_cpu(m: int) -> str:
    """Render millicores as ``142m``, or as cores (``1.4``) from 1000m up."""
    if m == 0:
        return "—"
    if m < 1000:
        return f"{m}m"
    return f"{m / 1000:.1f}"


def format_mem(b: int) -> str:
    """Render a byte count with binary Ki/Mi/Gi units."""
    if b == 0:
        return "—"
    ki = 1024
    mi = 1024 * ki
    gi = 1024 * mi
    if b >= gi:
        return f"{b / gi:.1f}Gi"
    if b >= mi:
        return f"{int(b / mi)}Mi"
    if b >= ki:
        return f"{int(b / ki)}Ki"
    return f"{b}B"


def format_rate(bps: int) -> str:
    """Render bytes per second with decimal units; negatives count as zero."""
    bps = max(bps, 0)
    k = 1000
    mega = 1000 * k
    giga = 1000 * mega
    if bps >= giga:
        return f"{bps / giga:.1f}GB/s"
    if bps >= mega:
        return f"{bps / mega:.1f}MB/s"
    if bps >= k:
        return f"{bps / k:.1f}kB/s"
    return f"{bps}B/s"


def format_age(t: datetime | None, now: datetime | None = None) -> str:
    """Render the time since ``t`` compactly: ``12s``, ``4m``, ``3h``, ``2d``, ``9w``."""
    if t is None:
        return "—"
    if now is None:
        now = datetime.now(t.tzinfo)
    seconds = (now - t).total_seconds()
    hours = seconds / 3600
    if seconds < 60:
        return f"{int(seconds)}s"
    if seconds < 3600:
        return f"{int(seconds / 60)}m"
    if seconds < 24 * 3600:
        return f"{int(hours)}h"
    if seconds < 7 * 24 * 3600:
        return f"{int(hours / 24)}d"
    return f"{int(hours / (24 * 7))}w"


def less_by(a: PodRow, b: PodRow, key: SortKey) -> bool:
    """Order two pods by ``key``, then namespace, name and UID."""
    primary = _PRIMARY[key]
    pa, pb = primary(a), primary(b)
    if pa != pb:
        return pa < pb
    return (a.namespace, a.name, a.uid) < (b.namespace, b.name, b.uid)


def _rows_of(rows: Union[Mapping[str, PodRow], Iterable[PodRow]]) -> Iterable[PodRow]:
    return rows.values() if isinstance(rows, Mapping) else rows


def sorted_rows(
    rows: Union[Mapping[str, PodRow], Iterable[PodRow]], key: SortKey, desc: bool
) -> list[PodRow]:
    """Return the pods ordered by ``key``, reversed when ``desc`` is true."""

    def compare(a: PodRow, b: PodRow) -> int:
        if desc:
            a, b = b, a
        if less_by(a, b, key):
            return -1
        if less_by(b, a, key):
            return 1
        return 0

    return sorted(_rows_of(rows), key=functools.cmp_to_key(compare))


def row_index(rows: Iterable[PodRow], uid: str) -> int:
    """Return the position of the pod with ``uid`` in ``rows``, or -1."""
    return next((i for i, r in enumerate(rows) if r.uid == uid), -1)


def pod_container_dots(row: PodRow, width: int, theme: Theme) -> str:
    """Draw one coloured dot per container, with a ``+N`` overflow suffix."""
    states = row.container_states
    if not states:
        return theme.dim.render("—")
    budget = width
    if 2 * len(states) - 1 > budget:
        budget = max(width - _OVERFLOW_RESERVED, 1)
    max_dots = max((budget + 1) // 2, 1)
    overflow = max(len(states) - max_dots, 0)

    styles = {
        ContainerState.READY: theme.status_ok,
        ContainerState.WAITING: theme.status_wrn,
        ContainerState.ERROR: theme.status_bad,
        ContainerState.TERMINATED: theme.status_dim,
    }
    out = " ".join(styles.get(st, theme.base).render(_DOT) for st in states[:max_dots])
    if overflow:
        out += " " + theme.dim.render(f"+{overflow}")
    return out