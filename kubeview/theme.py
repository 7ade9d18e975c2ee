"""Terminal styles, the default theme and box/placement helpers."""

from __future__ import annotations

from dataclasses import dataclass

from kubeview.ansi import RESET, clamp_canvas, visible_width


def _colour_code(colour: str) -> str:
    if colour.startswith("#") and len(colour) == 7:
        r, g, b = (int(colour[i : i + 2], 16) for i in (1, 3, 5))
        return f"2;{r};{g};{b}"
    if colour.isdigit() and 0 <= int(colour) <= 255:
        return f"5;{int(colour)}"
    raise ValueError(f"unsupported colour: {colour!r}")


@dataclass(frozen=True)
class Style:
    """A set of SGR attributes applied to text."""

    foreground: str | None = None
    background: str | None = None
    bold: bool = False

    def __post_init__(self) -> None:
        for colour in (self.foreground, self.background):
            if colour is not None:
                _colour_code(colour)

    def _sgr(self) -> str:
        codes = []
        if self.bold:
            codes.append("1")
        if self.foreground is not None:
            codes.append("38;" + _colour_code(self.foreground))
        if self.background is not None:
            codes.append("48;" + _colour_code(self.background))
        return ";".join(codes)

    def render(self, text: str) -> str:
        """Wrap each non-empty line of ``text`` in this style's SGR codes."""
        sgr = self._sgr()
        if not sgr or not text:
            return text
        return "\n".join(
            f"\x1b[{sgr}m{line}{RESET}" if line else line for line in text.split("\n")
        )


@dataclass(frozen=True)
class Theme:
    """The styles used across the UI."""

    base: Style
    dim: Style
    header: Style
    footer: Style
    selected: Style
    title: Style
    status_ok: Style
    status_bad: Style
    status_wrn: Style
    status_dim: Style

    def style_for_phase(self, phase: str) -> Style:
        """Return the colour style for a pod phase."""
        return {
            "Running": self.status_ok,
            "Pending": self.status_wrn,
            "Failed": self.status_bad,
            "Succeeded": self.status_dim,
        }.get(phase, self.base)


def default_theme() -> Theme:
    """Return the truecolour theme."""
    return Theme(
        base=Style(),
        dim=Style(foreground="244"),
        header=Style(foreground="#dddddd", bold=True),
        footer=Style(foreground="244"),
        selected=Style(background="#3a3a3a"),
        title=Style(foreground="#7dd3fc", bold=True),
        status_ok=Style(foreground="#4ade80"),
        status_bad=Style(foreground="#f87171"),
        status_wrn=Style(foreground="#fbbf24"),
        status_dim=Style(foreground="244"),
    )


_BORDER = Style(foreground="244")


def render_box(content: str, width: int, padding: int) -> str:
    """Draw ``content`` in a bordered box ``width`` cells wide inside the border.

    ``width`` includes the horizontal ``padding`` on each side; lines that
    do not fit are cut.
    """
    padding = max(padding, 0)
    inner = max(width - 2 * padding, 1)
    rows = content.split("\n")
    body = clamp_canvas(content, inner, len(rows)).split("\n")
    span = inner + 2 * padding
    side = _BORDER.render("│")
    gap = " " * padding
    lines = [_BORDER.render("┌" + "─" * span + "┐")]
    lines.extend(side + gap + row + gap + side for row in body)
    lines.append(_BORDER.render("└" + "─" * span + "┘"))
    return "\n".join(lines)


def place(width: int, height: int, block: str) -> str:
    """Centre ``block`` in a ``width`` by ``height`` canvas.

    A block larger than the canvas in either direction is left as is in
    that direction.
    """
    lines = block.split("\n")
    block_width = visible_width(block)
    lines = [line + " " * (block_width - visible_width(line)) for line in lines]
    if width > block_width:
        left = (width - block_width) // 2
        right = width - block_width - left
        lines = [" " * left + line + " " * right for line in lines]
    if height > len(lines):
        gap = height - len(lines)
        top = gap // 2
        blank = " " * max(width, block_width)
        lines = [blank] * top + lines + [blank] * (gap - top)
    return "\n".join(lines)