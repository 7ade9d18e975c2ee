"""The centred namespace picker modal."""

from __future__ import annotations

from collections.abc import Sequence

from kubeview.ansi import render_selected, truncate
from kubeview.theme import Theme, place, render_box

_WIDTH = 36
_MAX_ROWS = 14


def render_ns_picker(
    options: Sequence[str],
    cursor: int,
    theme: Theme,
    canvas_width: int,
    canvas_height: int,
) -> str:
    """Draw the namespace list centred on the canvas, windowed around ``cursor``."""
    options = list(options)
    start = 0
    if len(options) > _MAX_ROWS:
        start = max(cursor - _MAX_ROWS // 2, 0)
        end = start + _MAX_ROWS
        if end > len(options):
            end = len(options)
            start = max(end - _MAX_ROWS, 0)
    visible = options[start : start + _MAX_ROWS]

    separator = theme.dim.render("─" * (_WIDTH - 2))
    parts = [theme.title.render(" namespace "), separator]
    for index, option in enumerate(visible, start=start):
        selected = index == cursor
        marker = theme.title.render(" ›") if selected else "  "
        line = f"{marker} {truncate(option, _WIDTH - 6)}"
        parts.append(render_selected(line) if selected else line)
    parts.append(separator)
    parts.append(theme.footer.render(" j/k  enter  esc"))

    box = render_box("\n".join(parts), _WIDTH, 1)
    return place(canvas_width, canvas_height, box)