"""Node table rows: status labels, ordering and per-node container dots."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from kubeview.pods import PodRow
from kubeview.theme import Theme

_DOT = "■"
_OVERFLOW_RESERVED = 4


@dataclass
class NodeRow:
    """The UI projection of one node."""

    uid: str = ""
    name: str = ""
    ready: bool = False
    roles: list[str] = field(default_factory=list)
    kubelet_ver: str = ""
    internal_ip: str = ""
    os: str = ""
    arch: str = ""
    os_image: str = ""
    kernel_ver: str = ""
    runtime: str = ""
    schedulable: bool = False
    created_at: datetime | None = None
    updated: datetime | None = None
    cpu_milli: int = 0
    mem_bytes: int = 0
    has_metrics: bool = False


@dataclass
class NodeContainerCounts:
    """Ready and not-ready container tallies for one node."""

    ready: int = 0
    not_ready: int = 0


def node_status(row: NodeRow) -> str:
    """Combine readiness and schedulability into one status word."""
    if not row.ready:
        return "NotReady"
    if not row.schedulable:
        return "Cordoned"
    return "Ready"


def node_roles_label(row: NodeRow) -> str:
    """Join the node's roles with commas, or ``<none>``."""
    return ",".join(row.roles) if row.roles else "<none>"


def sorted_node_rows(rows: Union[Mapping[str, NodeRow], Iterable[NodeRow]]) -> list[NodeRow]:
    """Return the nodes ordered by name."""
    values = rows.values() if isinstance(rows, Mapping) else rows
    return sorted(values, key=lambda r: r.name)


def node_container_states(
    pods: Union[Mapping[str, PodRow], Iterable[PodRow]],
) -> dict[str, NodeContainerCounts]:
    """Tally container readiness per node; unscheduled pods are skipped."""
    values = pods.values() if isinstance(pods, Mapping) else pods
    out: dict[str, NodeContainerCounts] = {}
    for pod in values:
        if not pod.node:
            continue
        counts = out.setdefault(pod.node, NodeContainerCounts())
        for ready in pod.container_ready:
            if ready:
                counts.ready += 1
            else:
                counts.not_ready += 1
    return out


def container_dots(counts: NodeContainerCounts, width: int, theme: Theme) -> str:
    """Draw red dots for not-ready containers, then green for ready ones."""
    total = counts.ready + counts.not_ready
    if total == 0:
        return theme.dim.render("—")
    budget = width
    if 2 * total - 1 > budget:
        budget = max(width - _OVERFLOW_RESERVED, 1)
    max_dots = max((budget + 1) // 2, 1)
    overflow = max(total - max_dots, 0)

    red = counts.not_ready
    green = counts.ready
    if red > max_dots:
        red, green = max_dots, 0
    elif red + green > max_dots:
        green = max_dots - red

    dots = [theme.status_bad.render(_DOT)] * red + [theme.status_ok.render(_DOT)] * green
    out = " ".join(dots)
    if overflow:
        out += " " + theme.dim.render(f"+{overflow}")
    return out