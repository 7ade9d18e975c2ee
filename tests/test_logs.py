from datetime import datetime, timezone

import pytest

from kubeview.ansi import visible_width
from kubeview.confirm import ObjectRef
from kubeview.logs import (
    LogsView,
    clamp_logs_scroll,
    highlight_matches,
    pick_deployment_pod,
    summarise_stream_err,
)
from kubeview.pods import PodRow
from kubeview.theme import default_theme


def _view(**kwargs):
    calls = []
    stops = []
    view = LogsView(
        on_start=lambda session, ref, container: calls.append((session, ref, container)),
        on_stop=lambda: stops.append(True),
        **kwargs,
    )
    return view, calls, stops


def test_highlight_preserves_embedded_ansi():
    line = "hello \x1b[31mworld\x1b[0m of clusters"
    out = highlight_matches(line, "world", False)
    assert "\x1b[31m" in out
    on = out.index("\x1b[7m")
    off = out.index("\x1b[27m")
    assert on < off
    assert "world" in out[on:off]


def test_highlight_case_insensitive():
    out = highlight_matches("Error: connection lost. error count = 3", "ERROR", False)
    assert out.count("\x1b[7m") == 2


@pytest.mark.parametrize(
    "line,needle",
    [("hello world", ""), ("hello world", "xyzzy"), ("", "anything")],
)
def test_highlight_no_match_unchanged(line, needle):
    assert highlight_matches(line, needle, False) == line


def test_highlight_bold_variant():
    out = highlight_matches("foo bar baz", "bar", True)
    assert out == "foo \x1b[1;7mbar\x1b[27;22m baz"


def test_highlight_match_across_ansi():
    out = highlight_matches("ma\x1b[1mtch ends", "match", False)
    assert out == "\x1b[7mma\x1b[1mtch\x1b[27m ends"


@pytest.mark.parametrize(
    "err,want",
    [
        (
            "read tcp 192.168.1.52:58707->192.168.1.40:16443: read: connection reset by peer",
            "connection reset (stream ended)",
        ),
        ("read tcp ...: i/o timeout", "stream timed out"),
        ("stream error EOF here", "stream closed (EOF)"),
        ("context canceled", "stream cancelled"),
        ("dial tcp: lookup foo: no such host", "DNS lookup failed"),
        ("boom", "boom"),
        ("a" * 100, "a" * 57 + "…"),
    ],
)
def test_summarise_stream_err(err, want):
    assert summarise_stream_err(err) == want


def test_clamp_logs_scroll():
    assert clamp_logs_scroll(-3, 100, 24) == 0
    assert clamp_logs_scroll(50, 100, 24) == 50
    assert clamp_logs_scroll(500, 100, 24) == 84
    assert clamp_logs_scroll(5, 3, 24) == 0
    assert clamp_logs_scroll(5, 10, 4) == 5


def test_start_resets_and_bumps_session():
    view, calls, _ = _view()
    ref = ObjectRef(kind="Pod", namespace="default", name="web")
    view.lines = ["old"]
    view.start(ref, "main")
    view.start(ref, "main")
    assert view.session == 2
    assert view.lines == []
    assert view.follow is True
    assert view.is_open is True
    assert [c[0] for c in calls] == [1, 2]
    assert calls[-1][2] == "main"


def test_start_without_callback_does_nothing():
    view = LogsView()
    view.start(ObjectRef(name="web"), "main")
    assert view.session == 0
    assert view.is_open is False


def test_open_for_pod_single_and_picker():
    view, calls, _ = _view()
    ref = ObjectRef(kind="Pod", namespace="default", name="web")
    view.open_for_pod(ref, ["app"])
    assert calls[-1][2] == "app"

    view.open_for_pod(ref, [])
    assert calls[-1][2] == ""

    view.open_for_pod(ref, ["app", "sidecar", "proxy"])
    assert view.picker_open is True
    assert len(calls) == 2
    view.handle_key("j")
    view.handle_key("j")
    view.handle_key("j")
    assert view.picker_cur == 2
    view.handle_key("k")
    view.handle_key("enter")
    assert view.picker_open is False
    assert calls[-1][2] == "sidecar"


def test_picker_render_lists_containers():
    view, _, _ = _view()
    view.open_for_pod(ObjectRef(kind="Pod", name="web"), ["app", "sidecar"])
    out = view.render(default_theme(), "alpha", 120, 40)
    assert "Pod/web" in out
    assert "sidecar" in out
    assert all(visible_width(line) <= 120 for line in out.split("\n"))


def test_apply_lines_trims_and_anchors_when_paused():
    view = LogsView(cap=12, follow=False, scroll=2)
    view.lines = [f"l{i}" for i in range(10)]
    view.apply_lines([f"n{i}" for i in range(5)])
    assert len(view.lines) == 12
    assert view.lines[0] == "l3"
    assert view.scroll == 4


def test_apply_line_following_keeps_scroll_zero():
    view = LogsView(follow=True)
    view.apply_line("a")
    view.apply_line("b")
    assert view.lines == ["a", "b"]
    assert view.scroll == 0


def test_apply_lines_updates_search_matches():
    view = LogsView(cap=3, search_term="err")
    view.apply_lines(["ok", "ERR one", "fine"])
    assert view.search_matches == [1]
    view.apply_lines(["err two"])
    assert view.search_matches == [0, 2]


def test_search_enter_scrolls_to_match():
    view = LogsView(height=24, follow=True)
    view.lines = [f"line {i}" for i in range(100)]
    view.handle_key("/")
    assert view.search_focused is True
    assert view.follow is False
    for key in "line":
        view.handle_key(key)
    view.handle_key(" ")
    view.handle_key("1")
    view.handle_key("0")
    assert view.search_term == "line 10"
    view.handle_key("enter")
    assert view.search_focused is False
    assert view.search_matches == [10]
    assert view.scroll == 82


def test_search_backspace_and_esc():
    view = LogsView()
    view.lines = ["abc", "abd"]
    view.handle_key("/")
    view.handle_key("ab")
    view.handle_key("c")
    assert view.search_matches == [0]
    view.handle_key("backspace")
    assert view.search_matches == [0, 1]
    view.handle_key("esc")
    assert view.search_term == ""
    assert view.search_focused is False


def test_step_match_wraps():
    view = LogsView(height=24)
    view.lines = ["x", "y", "x", "y", "x"]
    view.search_term = "x"
    view.recompute_matches()
    assert view.search_matches == [0, 2, 4]
    view.step_match(-1)
    assert view.search_idx == 2
    view.step_match(1)
    assert view.search_idx == 0


def test_esc_clears_search_before_closing():
    view, _, stops = _view()
    view.is_open = True
    view.search_term = "foo"
    view.search_matches = [1]
    assert view.handle_key("esc") is False
    assert view.search_term == ""
    assert view.is_open is True
    view.handle_key("q")
    assert view.is_open is False
    assert stops == [True]


def test_ctrl_c_closes_and_quits():
    view, _, stops = _view()
    view.is_open = True
    assert view.handle_key("ctrl+c") is True
    assert view.is_open is False
    assert stops == [True]


def test_scroll_keys():
    view = LogsView(height=24, follow=True)
    view.lines = [str(i) for i in range(100)]
    view.handle_key("g")
    assert view.scroll == 84
    assert view.follow is False
    view.handle_key("ctrl+d")
    assert view.scroll == 74
    view.handle_key("G")
    assert view.scroll == 0
    assert view.follow is True
    view.handle_key("k")
    assert view.scroll == 1
    view.handle_key("j")
    assert view.scroll == 0
    assert view.follow is True
    view.handle_key("f")
    assert view.follow is False


def test_render_live_view():
    view = LogsView(is_open=True, follow=True, container="main")
    view.ref = ObjectRef(namespace="default", name="web")
    view.lines = ["L1", "L2", "L3"]
    out = view.render(default_theme(), "alpha", 120, 40)
    assert "● live" in out
    assert "3 lines" in out
    assert "L2" in out
    assert "default/web" in out
    assert all(visible_width(line) <= 120 for line in out.split("\n"))


@pytest.mark.parametrize(
    "setup,expected",
    [
        ({"err": "context canceled"}, "✕ stream cancelled"),
        ({"finished": True, "err": "x"}, "◼ ended"),
        ({"reconnecting": True}, "↻ reconnecting"),
        ({"follow": False}, "❚❚ paused"),
    ],
)
def test_render_status_precedence(setup, expected):
    view = LogsView(is_open=True, follow=True, **setup)
    out = view.render(default_theme(), "alpha", 120, 40)
    assert expected in out


def test_render_search_no_match():
    view = LogsView(is_open=True, search_term="zzz")
    view.lines = ["a"]
    out = view.render(default_theme(), "alpha", 120, 40)
    assert "no match" in out


def test_pick_deployment_pod_newest_running():
    t0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
    t1 = datetime(2026, 1, 2, tzinfo=timezone.utc)
    pods = {
        "a": PodRow(uid="a", namespace="default", name="web-1-a", phase="Running", created_at=t0),
        "b": PodRow(uid="b", namespace="default", name="web-1-b", phase="Running", created_at=t1),
        "c": PodRow(uid="c", namespace="default", name="web-1-c", phase="Pending", created_at=t1),
        "d": PodRow(uid="d", namespace="other", name="web-1-d", phase="Running", created_at=t1),
        "e": PodRow(uid="e", namespace="default", name="webapp-e", phase="Running", created_at=t1),
    }
    picked = pick_deployment_pod(pods, "default", "web")
    assert picked is not None
    assert picked.uid == "b"
    assert pick_deployment_pod(pods, "default", "api") is None