"""The live log viewer: streaming buffer, scrolling, search and rendering."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from kubeview.ansi import render_selected, truncate
from kubeview.confirm import ObjectRef
from kubeview.pods import PodRow
from kubeview.theme import Theme, place, render_box

DEFAULT_LOG_CAP = 5000
LOG_SCROLL_PAGE = 10
LOG_VIEW_MIN_WIDTH = 50
_OVERHEAD = 8
_PICKER_WIDTH = 42

_NAMED_KEYS = frozenset(
    {
        "esc", "enter", "backspace", "ctrl+c", "ctrl+d", "ctrl+u", "up", "down",
        "left", "right", "home", "end", "tab", "pgup", "pgdown", "delete",
    }
)

_STREAM_ERRORS = (
    ("connection reset by peer", "connection reset (stream ended)"),
    ("i/o timeout", "stream timed out"),
    ("EOF", "stream closed (EOF)"),
    ("context canceled", "stream cancelled"),
    ("no such host", "DNS lookup failed"),
)


def clamp_logs_scroll(want: int, line_count: int, terminal_height: int) -> int:
    """Cap a tail-relative scroll offset so the viewport never renders empty."""
    if want < 0:
        return 0
    approx_body = max(terminal_height - _OVERHEAD, 1)
    upper = max(line_count - approx_body, 0)
    return min(want, upper)


def summarise_stream_err(err: str) -> str:
    """Collapse a stream error into a short label, or cut it to 58 characters."""
    for needle, label in _STREAM_ERRORS:
        if needle in err:
            return label
    if len(err) > 60:
        return err[:57] + "…"
    return err


def _fold(ch: str) -> str:
    lowered = ch.lower()
    return lowered if len(lowered) == 1 else ch


def _fold_text(s: str) -> str:
    return "".join(_fold(ch) for ch in s)


def highlight_matches(s: str, needle: str, bold: bool) -> str:
    """Wrap each case-insensitive visible match of ``needle`` in reverse video.

    Escape sequences inside ``s`` are skipped while matching and kept intact,
    so the line's own colours survive the highlight.
    """
    if not needle or not s:
        return s
    on, off = ("\x1b[1;7m", "\x1b[27;22m") if bold else ("\x1b[7m", "\x1b[27m")

    vis_to_raw: list[int] = []
    visible: list[str] = []
    i = 0
    while i < len(s):
        if s[i] == "\x1b" and i + 1 < len(s) and s[i + 1] == "[":
            j = i + 2
            while j < len(s) and not ("\x40" <= s[j] <= "\x7e"):
                j += 1
            i = min(j + 1, len(s))
            continue
        vis_to_raw.append(i)
        visible.append(s[i])
        i += 1

    haystack = _fold_text("".join(visible))
    folded_needle = _fold_text(needle)
    spans: list[tuple[int, int]] = []
    offset = 0
    while offset < len(haystack):
        idx = haystack.find(folded_needle, offset)
        if idx < 0:
            break
        vis_end = idx + len(folded_needle)
        raw_end = vis_to_raw[vis_end] if vis_end < len(vis_to_raw) else len(s)
        spans.append((vis_to_raw[idx], raw_end))
        offset = vis_end
    if not spans:
        return s

    out: list[str] = []
    cursor = 0
    for raw_start, raw_end in spans:
        out.extend((s[cursor:raw_start], on, s[raw_start:raw_end], off))
        cursor = raw_end
    out.append(s[cursor:])
    return "".join(out)


def pick_deployment_pod(
    pods: Union[Mapping[str, PodRow], Iterable[PodRow]], namespace: str, name: str
) -> Optional[PodRow]:
    """Return the newest Running pod named ``<name>-…`` in ``namespace``, or None."""
    values = pods.values() if isinstance(pods, Mapping) else pods
    prefix = name + "-"
    picked: Optional[PodRow] = None
    for pod in values:
        if pod.namespace != namespace or not pod.name.startswith(prefix):
            continue
        if pod.phase != "Running":
            continue
        if picked is None or _newer(pod, picked):
            picked = pod
    return picked


def _newer(a: PodRow, b: PodRow) -> bool:
    if a.created_at is None:
        return False
    return b.created_at is None or a.created_at > b.created_at


@dataclass
class LogsView:
    """State of the live log view.

    ``on_start(session, ref, container)`` is called whenever a stream should
    begin; ``on_stop()`` when it should be cancelled. ``session`` increases on
    every start so callers can drop lines belonging to an older stream.
    """

    on_start: Optional[Callable[[int, ObjectRef, str], Any]] = None
    on_stop: Optional[Callable[[], Any]] = None
    height: int = 24
    is_open: bool = False
    ref: ObjectRef = field(default_factory=ObjectRef)
    container: str = ""
    containers: list[str] = field(default_factory=list)
    picker_open: bool = False
    picker_cur: int = 0
    lines: list[str] = field(default_factory=list)
    cap: int = DEFAULT_LOG_CAP
    scroll: int = 0
    follow: bool = False
    err: str = ""
    finished: bool = False
    search_term: str = ""
    search_focused: bool = False
    search_matches: list[int] = field(default_factory=list)
    search_idx: int = 0
    reconnecting: bool = False
    session: int = 0

    def start(self, ref: ObjectRef, container: str) -> None:
        """Reset the buffer and begin streaming ``container`` of ``ref``."""
        if self.on_start is None:
            return
        self.session += 1
        self.is_open = True
        self.ref = ref
        self.container = container
        self.lines = []
        self.cap = DEFAULT_LOG_CAP
        self.scroll = 0
        self.follow = True
        self.err = ""
        self.finished = False
        self.reconnecting = False
        self.search_term = ""
        self.search_matches = []
        self.search_idx = 0
        self.search_focused = False
        self.on_start(self.session, ref, container)

    def open_for_pod(self, ref: ObjectRef, containers: Sequence[str]) -> None:
        """Start streaming, or open the container picker for multi-container pods."""
        if len(containers) == 0:
            self.start(ref, "")
            return
        if len(containers) == 1:
            self.start(ref, containers[0])
            return
        self.is_open = True
        self.ref = ref
        self.containers = list(containers)
        self.picker_open = True
        self.picker_cur = 0

    def close(self) -> None:
        """Hide the view and cancel the stream."""
        self.is_open = False
        self.picker_open = False
        if self.on_stop is not None:
            self.on_stop()

    def _clear_search(self) -> None:
        self.search_term = ""
        self.search_matches = []
        self.search_idx = 0

    def handle_key(self, key: str) -> bool:
        """Handle one key; return True when it asks the application to quit."""
        if self.picker_open:
            return self._handle_picker_key(key)
        if self.search_focused:
            return self._handle_search_key(key)
        count = len(self.lines)
        if key in ("esc", "q"):
            if self.search_term:
                self._clear_search()
            else:
                self.close()
        elif key == "ctrl+c":
            self.close()
            return True
        elif key == "/":
            self.search_focused = True
            self.follow = False
        elif key == "n":
            self.step_match(1)
        elif key == "N":
            self.step_match(-1)
        elif key in ("j", "down"):
            if self.scroll > 0:
                self.scroll -= 1
            if self.scroll == 0:
                self.follow = True
        elif key in ("k", "up"):
            self.scroll = clamp_logs_scroll(self.scroll + 1, count, self.height)
            self.follow = False
        elif key == "ctrl+d":
            self.scroll = max(self.scroll - LOG_SCROLL_PAGE, 0)
            if self.scroll == 0:
                self.follow = True
        elif key == "ctrl+u":
            self.scroll = clamp_logs_scroll(self.scroll + LOG_SCROLL_PAGE, count, self.height)
            self.follow = False
        elif key in ("g", "home"):
            self.scroll = clamp_logs_scroll(count, count, self.height)
            self.follow = False
        elif key in ("G", "end"):
            self.scroll = 0
            self.follow = True
        elif key == "f":
            self.follow = not self.follow
            if self.follow:
                self.scroll = 0
        return False

    def _handle_search_key(self, key: str) -> bool:
        if key == "esc":
            self._clear_search()
            self.search_focused = False
            return False
        if key == "enter":
            self.search_focused = False
            self.recompute_matches()
            if self.search_matches:
                self.search_idx = 0
                self.scroll_to_match(self.search_matches[0])
            return False
        if key == "ctrl+c":
            return True
        if key == "backspace":
            self.search_term = self.search_term[:-1]
        elif key in (" ", "space"):
            self.search_term += " "
        elif key not in _NAMED_KEYS:
            self.search_term += key
        self.recompute_matches()
        return False

    def _handle_picker_key(self, key: str) -> bool:
        if key in ("esc", "q"):
            self.close()
        elif key == "ctrl+c":
            return True
        elif key in ("j", "down"):
            if self.picker_cur < len(self.containers) - 1:
                self.picker_cur += 1
        elif key in ("k", "up"):
            if self.picker_cur > 0:
                self.picker_cur -= 1
        elif key == "enter":
            chosen = self.containers[self.picker_cur]
            self.picker_open = False
            self.start(self.ref, chosen)
        return False

    def recompute_matches(self) -> None:
        """Rebuild the list of line indices matching the search term."""
        if not self.search_term:
            self.search_matches = []
            self.search_idx = 0
            return
        needle = self.search_term.lower()
        self.search_matches = [i for i, line in enumerate(self.lines) if needle in line.lower()]
        if self.search_idx >= len(self.search_matches):
            self.search_idx = 0

    def step_match(self, delta: int) -> None:
        """Move to the next or previous match, wrapping, and scroll to it."""
        if not self.search_matches:
            return
        self.search_idx = (self.search_idx + delta) % len(self.search_matches)
        self.scroll_to_match(self.search_matches[self.search_idx])

    def scroll_to_match(self, line_idx: int) -> None:
        """Scroll so that ``line_idx`` sits near the middle of the viewport."""
        approx_body = max(self.height - _OVERHEAD, 1)
        want = len(self.lines) - (line_idx + approx_body // 2)
        self.scroll = clamp_logs_scroll(want, len(self.lines), self.height)
        self.follow = False

    def apply_line(self, line: str) -> None:
        """Append one line to the buffer."""
        self.apply_lines([line])

    def apply_lines(self, lines: Sequence[str]) -> None:
        """Append lines, trimming the oldest beyond ``cap``.

        While paused the scroll offset moves with the new lines so the
        viewport stays on the same content.
        """
        if not lines:
            return
        self.lines.extend(lines)
        added = len(lines)
        dropped = 0
        if len(self.lines) > self.cap:
            dropped = len(self.lines) - self.cap
            del self.lines[:dropped]
        if not self.follow:
            self.scroll = max(0, min(self.scroll + added - dropped, len(self.lines)))
        if self.search_term:
            self.recompute_matches()

    def _status(self, theme: Theme) -> str:
        if self.err and not self.finished:
            return theme.status_bad.render("✕ " + summarise_stream_err(self.err))
        if self.finished:
            return theme.status_dim.render("◼ ended")
        if self.reconnecting:
            return theme.status_wrn.render("↻ reconnecting")
        if not self.follow:
            return theme.status_wrn.render("❚❚ paused")
        return theme.status_ok.render("● live")

    def _search_info(self, theme: Theme) -> str:
        if self.search_focused:
            caret = theme.title.render("█")
            return "  " + theme.title.render("/") + self.search_term + caret
        if self.search_term:
            if self.search_matches:
                count = f"{self.search_idx + 1}/{len(self.search_matches)}"
            else:
                count = "no match"
            return "  " + theme.title.render("/") + self.search_term + theme.dim.render("  " + count)
        return ""

    def render(self, theme: Theme, context: str, canvas_width: int, canvas_height: int) -> str:
        """Draw the log viewport (or the container picker) centred on the canvas."""
        if self.picker_open:
            return self._render_picker(theme, canvas_width, canvas_height)

        w = max(canvas_width, LOG_VIEW_MIN_WIDTH)
        h = max(canvas_height, 6)
        inner_w = max(w - 4, 1)

        out: list[str] = []
        title = theme.title.render(" logs ")
        subject = theme.dim.render(
            f" {context} · {self.ref.namespace}/{self.ref.name} · {self.container}"
        )
        out.append(title + subject + "\n")
        out.append(theme.dim.render("─" * inner_w) + "\n")

        body_height = max(h - 4, 1)
        end = max(len(self.lines) - self.scroll, 0)
        start = max(end - body_height, 0)

        match_set = set(self.search_matches)
        current = -1
        if self.search_matches and self.search_idx < len(self.search_matches):
            current = self.search_matches[self.search_idx]

        for abs_idx, line in enumerate(self.lines[start:end], start=start):
            rendered = truncate(line, inner_w)
            if abs_idx in match_set:
                rendered = highlight_matches(rendered, self.search_term, abs_idx == current)
            out.append(rendered + "\n")
        out.append("\n" * max(body_height - (end - start), 0))

        hint = " · n/N:next/prev  /:edit" if self.search_term else " · /:search"
        rest = theme.footer.render(
            f" · {len(self.lines)} lines{hint}  ·  j/k scroll  G follow  f toggle  Esc close"
        )
        out.append(" " + self._status(theme) + self._search_info(theme) + rest)

        box = render_box("".join(out), w - 2, 0)
        return place(canvas_width, canvas_height, box)

    def _render_picker(self, theme: Theme, canvas_width: int, canvas_height: int) -> str:
        separator = theme.dim.render("─" * (_PICKER_WIDTH - 2))
        parts = [
            theme.title.render(" container ")
            + theme.dim.render(" " + self.ref.kind + "/" + self.ref.name),
            separator,
        ]
        for index, name in enumerate(self.containers):
            selected = index == self.picker_cur
            marker = theme.title.render(" ›") if selected else "  "
            line = f"{marker} {name}"
            parts.append(render_selected(line) if selected else line)
        parts.append(separator)
        parts.append(theme.footer.render(" j/k  enter  esc"))
        box = render_box("\n".join(parts), _PICKER_WIDTH, 1)
        return place(canvas_width, canvas_height, box)