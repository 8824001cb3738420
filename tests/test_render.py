from __future__ import annotations

import io

from lrc_transcriber.i18n import set_lang
from lrc_transcriber.lrc.parse import parse_lrc
from lrc_transcriber.render.ansi import AnsiRenderer, Theme


def test_render_plain():
    doc = parse_lrc("[00:01.00]a\n[00:02.5]\n[00:03.000]c")
    buf = io.StringIO()
    AnsiRenderer(color=False).render("song.lrc", doc, current_idx=-1, stream=buf)
    lines = buf.getvalue().splitlines()
    assert lines[0] == "♫ song.lrc ♫"
    assert lines[1] == "[00:01.00]   a"
    assert lines[2] == "[00:02.5]    ♪"
    assert lines[3] == "[00:03.000]  c"


def test_render_highlights_current_line():
    theme = Theme()
    doc = parse_lrc("[00:01.00]a\n[00:02.00]b")
    lines = AnsiRenderer(theme=theme).format_lines(doc, current_idx=1)
    assert f"{theme.current}b{theme.reset}" in lines[1]
    assert f"{theme.dim}a{theme.reset}" in lines[0]


def test_render_empty_document():
    set_lang("EN")
    buf = io.StringIO()
    AnsiRenderer(color=False).render("t", parse_lrc("nothing"), stream=buf)
    assert "No timestamped lines found" in buf.getvalue()
