"""Confirmation modals for rollout restarts and scaling deployments."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from kubeview.theme import Theme, place, render_box

_WIDTH = 56
_NAMED_KEYS = frozenset({"esc", "ctrl+c", "enter", "backspace"})
_ATOI = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass
class ObjectRef:
    """Identifies one Kubernetes object."""

    version: str = ""
    resource: str = ""
    kind: str = ""
    namespace: str = ""
    name: str = ""


def is_digits(s: str) -> bool:
    """Return True for a non-empty string of ASCII digits only."""
    return bool(s) and all("0" <= ch <= "9" for ch in s)


def _atoi(s: str) -> int:
    if not _ATOI.fullmatch(s):
        raise ValueError(f"not an integer: {s!r}")
    n = int(s)
    if not _INT64_MIN <= n <= _INT64_MAX:
        raise ValueError(f"integer out of range: {s!r}")
    return n


def _int32(n: int) -> int:
    return (n + 2**31) % 2**32 - 2**31


def _box(theme: Theme, parts: str, canvas_width: int, canvas_height: int) -> str:
    return place(canvas_width, canvas_height, render_box(parts, _WIDTH, 2))


@dataclass
class RestartConfirm:
    """The rollout-restart modal: a single Y/Enter confirmation.

    ``on_submit(context, ref)`` is called when the user confirms; without
    it confirming does nothing.
    """

    context: str = ""
    on_submit: Optional[Callable[[str, ObjectRef], Any]] = None
    is_open: bool = False
    ref: ObjectRef = field(default_factory=ObjectRef)
    pending: bool = False

    def open(self, ref: ObjectRef) -> None:
        """Show the modal for ``ref``."""
        self.is_open = True
        self.ref = ref
        self.pending = False

    def handle_key(self, key: str) -> bool:
        """Handle one key; return True when it asks the application to quit."""
        if self.pending:
            if key == "esc":
                self.is_open = False
                self.pending = False
            return key == "ctrl+c"
        if key in ("esc", "n", "N"):
            self.is_open = False
        elif key == "ctrl+c":
            return True
        elif key in ("y", "Y", "enter") and self.on_submit is not None:
            self.pending = True
            self.on_submit(self.context, self.ref)
        return False

    def render(self, theme: Theme, canvas_width: int, canvas_height: int) -> str:
        """Draw the modal centred on the canvas, or nothing when closed."""
        if not self.is_open:
            return ""
        text = (
            theme.title.render(" restart rollout ") + "\n"
            + theme.dim.render("─" * (_WIDTH - 2)) + "\n\n"
            + theme.base.render(
                f" Trigger rolling restart of Deployment/{self.ref.name} in {self.ref.namespace}"
            )
            + "\n\n"
            + theme.dim.render(
                " This patches `spec.template.metadata.annotations` to start a new\n"
                " ReplicaSet — same effect as `kubectl rollout restart`. Pods will\n"
                " be replaced under the deployment's update strategy."
            )
            + "\n\n"
        )
        if self.pending:
            text += theme.dim.render(" rolling…") + "\n"
        else:
            text += theme.status_ok.render(" ✓ Press Y or Enter to confirm") + "\n"
        text += "\n" + theme.footer.render(" Y/Enter confirm · N/Esc cancel")
        return _box(theme, text, canvas_width, canvas_height)


@dataclass
class ScaleConfirm:
    """The scale modal: numeric input pre-filled with the current replicas.

    ``on_submit(context, ref, replicas)`` is called when a valid new size is
    entered; without it Enter does nothing.
    """

    context: str = ""
    on_submit: Optional[Callable[[str, ObjectRef, int], Any]] = None
    is_open: bool = False
    ref: ObjectRef = field(default_factory=ObjectRef)
    current: int = 0
    typed: str = ""
    pending: bool = False
    error: str = ""

    def open(self, ref: ObjectRef, current: int) -> None:
        """Show the modal for ``ref`` with ``current`` replicas."""
        self.is_open = True
        self.ref = ref
        self.current = current
        self.typed = str(current)
        self.pending = False
        self.error = ""

    def handle_key(self, key: str) -> bool:
        """Handle one key; return True when it asks the application to quit."""
        if self.pending:
            if key == "esc":
                self.is_open = False
                self.pending = False
            return key == "ctrl+c"
        if key == "esc":
            self.is_open = False
        elif key == "ctrl+c":
            return True
        elif key == "backspace":
            if self.typed:
                self.typed = self.typed[:-1]
                self.error = ""
        elif key == "enter":
            self._submit()
        elif key not in _NAMED_KEYS and is_digits(key):
            self.typed += key
            self.error = ""
        return False

    def _submit(self) -> None:
        try:
            n = _atoi(self.typed.strip())
        except ValueError:
            self.error = "not a number"
            return
        if n < 0:
            self.error = "replicas must be ≥ 0"
            return
        replicas = _int32(n)
        if replicas == self.current:
            self.error = "already at this size"
            return
        if self.on_submit is None:
            return
        self.pending = True
        self.on_submit(self.context, self.ref, replicas)

    def render(self, theme: Theme, canvas_width: int, canvas_height: int) -> str:
        """Draw the modal centred on the canvas, or nothing when closed."""
        if not self.is_open:
            return ""
        caret = theme.dim.render(" scaling…") if self.pending else theme.title.render("█")
        text = (
            theme.title.render(" scale ") + "\n"
            + theme.dim.render("─" * (_WIDTH - 2)) + "\n\n"
            + theme.base.render(
                f" Scale Deployment/{self.ref.name} in {self.ref.namespace}"
            )
            + "\n"
            + theme.dim.render(f" current: {self.current} replicas") + "\n\n"
            + theme.dim.render(" Target replica count:") + "\n\n"
            + "   " + theme.title.render(self.typed) + caret + "\n\n"
        )
        if not self.pending:
            if self.error:
                text += theme.status_bad.render(" ✕ " + self.error) + "\n"
            else:
                text += theme.status_ok.render(" ✓ Press Enter to apply") + "\n"
        text += "\n" + theme.footer.render(" digits + Backspace · Enter apply · Esc cancel")
        return _box(theme, text, canvas_width, canvas_height)