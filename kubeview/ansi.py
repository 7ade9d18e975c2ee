"""ANSI-aware cell layout helpers for terminal rendering.

Every function here measures text in visible terminal cells, not
characters or bytes. SGR escape sequences (``ESC [ ... m``) have zero
width and are carried through verbatim wherever possible.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from wcwidth import wcwidth

RESET = "\x1b[0m"
_SELECTED_BG = "\x1b[48;2;58;58;58m"
_CSI = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")


def _char_width(ch: str) -> int:
    width = wcwidth(ch)
    return width if width > 0 else 0


def _tokens(s: str) -> Iterator[tuple[int, bool, str]]:
    """Yield ``(index, is_sgr, text)`` for each SGR sequence or character."""
    i = 0
    while i < len(s):
        if s[i] == "\x1b" and i + 1 < len(s) and s[i + 1] == "[":
            end = s.find("m", i + 2)
            if end >= 0:
                yield i, True, s[i : end + 1]
                i = end + 1
                continue
        yield i, False, s[i]
        i += 1


def visible_width(s: str) -> int:
    """Return the widest line of ``s`` in terminal cells, ignoring escapes."""
    return max(
        sum(_char_width(ch) for ch in _CSI.sub("", line)) for line in s.split("\n")
    )


def _cut(s: str, width: int) -> str:
    """Truncate ``s`` to at most ``width`` cells, closing any open style."""
    prefix, _ = visible_prefix(s, width)
    if "\x1b[" in prefix and not prefix.endswith(RESET):
        prefix += RESET
    return prefix


def truncate(text: str, width: int) -> str:
    """Shorten ``text`` to ``width`` cells, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if visible_width(text) <= width:
        return text
    if width == 1:
        return "…"
    return _cut(text, width - 1) + "…"


def pad_col(text: str, width: int, style) -> str:
    """Render ``text`` with ``style`` as a left-aligned cell of ``width`` cells."""
    if width <= 0:
        return ""
    rendered = style.render(truncate(text, width))
    visible = visible_width(rendered)
    if visible >= width:
        return rendered
    return rendered + " " * (width - visible)


def pad_col_right(text: str, width: int, style) -> str:
    """Render ``text`` with ``style`` as a right-aligned cell of ``width`` cells."""
    if width <= 0:
        return ""
    rendered = style.render(truncate(text, width))
    visible = visible_width(rendered)
    if visible >= width:
        return rendered
    return " " * (width - visible) + rendered


def pad_cell_ansi(content: str, width: int) -> str:
    """Left-align already-styled ``content`` in ``width`` cells."""
    if width <= 0:
        return ""
    visible = visible_width(content)
    if visible > width:
        return _cut(content, width)
    return content + " " * (width - visible)


def pad_cell_ansi_right(content: str, width: int) -> str:
    """Right-align already-styled ``content`` in ``width`` cells."""
    if width <= 0:
        return ""
    visible = visible_width(content)
    if visible > width:
        return _cut(content, width)
    return " " * (width - visible) + content


def render_selected(line: str) -> str:
    """Paint a selection background under a row, surviving inner resets."""
    if RESET not in line:
        return _SELECTED_BG + line + RESET
    return _SELECTED_BG + line.replace(RESET, RESET + _SELECTED_BG) + RESET


def short_host(s: str) -> str:
    """Drop the domain part of a host name."""
    return s.split(".", 1)[0]


def overlay_at(base: str, panel: str, col: int, row: int) -> str:
    """Composite ``panel`` onto ``base`` with its corner at (``col``, ``row``)."""
    if not panel or not base:
        return base
    col = max(col, 0)
    base_lines = base.split("\n")
    for offset, panel_line in enumerate(panel.split("\n")):
        r = row + offset
        if 0 <= r < len(base_lines):
            base_lines[r] = splice_line(base_lines[r], panel_line, col)
    return "\n".join(base_lines)


def splice_line(base: str, panel: str, col: int) -> str:
    """Replace the cells of ``base`` under ``panel`` starting at ``col``."""
    panel_width = visible_width(panel)
    left, left_cells = visible_prefix(base, col)
    if left_cells < col:
        left += " " * (col - left_cells)
    rest = visible_suffix(base, col + panel_width)
    return left + panel + RESET + rest


def visible_prefix(s: str, n: int) -> tuple[str, int]:
    """Return the prefix of ``s`` spanning at most ``n`` cells and its width."""
    if n <= 0:
        return "", 0
    out: list[str] = []
    cells = 0
    for _, is_sgr, tok in _tokens(s):
        if is_sgr:
            out.append(tok)
            continue
        width = _char_width(tok)
        if cells + width > n:
            break
        out.append(tok)
        cells += width
    return "".join(out), cells


def visible_suffix(s: str, n: int) -> str:
    """Return ``s`` from cell offset ``n``, prefixed with the SGR state before it."""
    sgr: list[str] = []
    cells = 0
    for index, is_sgr, tok in _tokens(s):
        if is_sgr:
            sgr.append(tok)
            continue
        width = _char_width(tok)
        if cells + width > n:
            return "".join(sgr) + s[index:]
        cells += width
    return ""


def clamp_canvas(s: str, w: int, h: int) -> str:
    """Force ``s`` to exactly ``w`` cells wide and ``h`` rows tall."""
    w = max(w, 1)
    h = max(h, 1)
    lines = s.split("\n")[:h]
    lines += [""] * (h - len(lines))
    fitted = []
    for line in lines:
        if visible_width(line) > w:
            line = _cut(line, w)
        fitted.append(line + " " * (w - visible_width(line)))
    return "\n".join(fitted)