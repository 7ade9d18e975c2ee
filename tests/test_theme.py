import pytest

from kubeview.ansi import visible_width
from kubeview.theme import Style, default_theme, place, render_box


def test_plain_style_renders_unchanged():
    assert Style().render("hello") == "hello"


def test_styled_render_wraps_with_reset_and_keeps_width():
    out = Style(foreground="9").render("hello")
    assert out.startswith("\x1b[")
    assert out.endswith("\x1b[0m")
    assert "hello" in out
    assert visible_width(out) == visible_width("hello")


def test_selected_background_matches_selection_sgr():
    out = default_theme().selected.render("row")
    assert out.startswith("\x1b[48;2;58;58;58m")


def test_multiline_render_styles_each_line():
    out = Style(foreground="244").render("a\nb")
    lines = out.split("\n")
    assert len(lines) == 2
    assert all(line.endswith("\x1b[0m") for line in lines)


def test_bold_flag_emits_bold():
    assert Style(bold=True).render("x").startswith("\x1b[1m")


def test_invalid_colour_rejected():
    with pytest.raises(ValueError):
        Style(foreground="not-a-colour")


@pytest.mark.parametrize(
    "phase,attr",
    [
        ("Running", "status_ok"),
        ("Pending", "status_wrn"),
        ("Failed", "status_bad"),
        ("Succeeded", "status_dim"),
        ("Unknown", "base"),
    ],
)
def test_style_for_phase(phase, attr):
    theme = default_theme()
    assert theme.style_for_phase(phase) == getattr(theme, attr)


def test_render_box_geometry():
    box = render_box("hello\nworld", 20, 1)
    lines = box.split("\n")
    assert len(lines) == len(["top", "hello", "world", "bottom"])
    widths = {visible_width(line) for line in lines}
    assert widths == {20 + 2}
    assert "hello" in lines[1]
    assert "┌" in lines[0]


def test_render_box_cuts_long_lines():
    box = render_box("x" * 100, 10, 0)
    widths = {visible_width(line) for line in box.split("\n")}
    assert len(widths) == 1
    assert widths.pop() < 100


def test_place_centres_block():
    out = place(20, 9, "abc\nde")
    lines = out.split("\n")
    assert len(lines) == 9
    assert all(visible_width(line) == 20 for line in lines)
    assert any("abc" in line for line in lines)
    top_blank = next(i for i, line in enumerate(lines) if line.strip())
    bottom_blank = len(lines) - 1 - max(i for i, line in enumerate(lines) if line.strip())
    assert abs(top_blank - bottom_blank) <= 1


def test_place_oversized_block_left_alone():
    block = "abcdef\nghijkl"
    assert place(3, 1, block) == block