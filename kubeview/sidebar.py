"""Helpers for the cluster rail: version labels and resource bars."""

from __future__ import annotations

from kubeview.theme import Style, Theme

SIDEBAR_WIDTH = 30
_BAR_CELLS = 5
_EMPTY_STYLE = Style(foreground="236")


def short_version(v: str) -> str:
    """Strip build suffixes such as ``+rke2r1`` from a version string."""
    cut = min((i for i in (v.find("+"), v.find("-")) if i >= 0), default=-1)
    return v[:cut] if cut >= 0 else v


def pct(used: int, alloc: int) -> int:
    """Return ``used`` as a whole percentage of ``alloc``, clamped to 0..100."""
    if alloc <= 0:
        return 0
    return max(0, min(100, int(used * 100 / alloc)))


def bar_with_pct(p: int, theme: Theme) -> str:
    """Render ``NN% `` followed by a five-cell load bar."""
    filled_cells = max(0, min(_BAR_CELLS, int(p * _BAR_CELLS / 100)))
    if p >= 80:
        load = theme.status_bad
    elif p >= 60:
        load = theme.status_wrn
    else:
        load = theme.status_ok
    filled = load.render("▬" * filled_cells)
    empty = _EMPTY_STYLE.render("▬" * (_BAR_CELLS - filled_cells))
    return f"{p:2d}% " + filled + empty