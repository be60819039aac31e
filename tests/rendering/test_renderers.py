"""Tests for the per-channel renderers."""

import pytest

from formatting.models import Channel, Segment, SegmentKind, Token, TokenKind
from formatting.renderers import (
    PassthroughRenderer,
    PlainTextRenderer,
    WhatsAppRenderer,
    get_renderer,
)
from formatting.telegram_markdown import (
    MDV2_SPECIAL_CHARS,
    TelegramRenderer,
    escape_md_v2,
    escape_md_v2_link_url,
    mdv2_bold,
    mdv2_link,
)

RESERVED = "_*[]()~`>#+-=|{}.!\\"


class TestTelegramEscaping:
    """MarkdownV2 escape helpers."""

    def test_reserved_set(self):
        assert MDV2_SPECIAL_CHARS == set(RESERVED)

    def test_escape_md_v2(self):
        assert escape_md_v2("Hello. (world)!") == "Hello\\. \\(world\\)\\!"

    def test_escape_link_url_is_narrow(self):
        assert escape_md_v2_link_url("https://x.io/a_b)c\\d") == (
            "https://x.io/a_b\\)c\\\\d"
        )

    def test_mdv2_bold(self):
        assert mdv2_bold("a.b") == "*a\\.b*"

    def test_mdv2_link(self):
        assert mdv2_link("v1.0", "https://x.io/(a)") == "[v1\\.0](https://x.io/(a\\))"


class TestTelegramRenderer:
    """Strict channel rendering."""

    @pytest.fixture
    def renderer(self):
        return TelegramRenderer()

    def test_bold(self, renderer):
        assert renderer.render("**Bold** text") == "*Bold* text"

    def test_italic_and_strike(self, renderer):
        assert renderer.render("an *it* and ~~old~~") == "an _it_ and ~old~"

    def test_link(self, renderer):
        assert (
            renderer.render("[Docs v1.0](https://example.com/path)")
            == "[Docs v1\\.0](https://example.com/path)"
        )

    def test_bare_url(self, renderer):
        assert (
            renderer.render("Visit https://example.com now!")
            == "Visit [https://example\\.com](https://example.com) now\\!"
        )

    def test_heading_is_bold(self, renderer):
        assert renderer.render("# Step 1. Install") == "*Step 1\\. Install*"

    def test_bullets_and_rules(self, renderer):
        text = "- item one\n---\n- item.two"
        assert renderer.render(text) == "• item one\n\n• item\\.two"

    def test_every_reserved_char_escaped_once(self, renderer):
        text = "a_b*c[d]e(f)g~h`i>j#k+l-m=n|o{p}q.r!s\\t"
        expected = "".join(f"\\{ch}" if ch in RESERVED else ch for ch in text)

        assert renderer.render(text) == expected

    def test_markers_are_not_escaped(self, renderer):
        assert renderer.render("**x.y** and _z_") == "*x\\.y* and _z_"

    def test_fenced_code_is_not_escaped(self, renderer):
        text = "Before\n```python\nprint(a.b)\n```\nAfter."

        assert renderer.render(text) == "Before\n```python\nprint(a.b)\n```\nAfter\\."

    def test_inline_code_is_not_escaped(self, renderer):
        assert renderer.render("Run `a_b.c` now.") == "Run `a_b.c` now\\."

    def test_unterminated_fence_is_escaped_literally(self, renderer):
        assert renderer.render("```python\nprint(1)") == (
            "\\`\\`\\`python\nprint\\(1\\)"
        )

    def test_table_is_fenced_box(self, renderer, table_md):
        assert renderer.render(table_md) == "\n".join(
            [
                "```",
                "┌───────┬─────┐",
                "│ Name  │ Age │",
                "├───────┼─────┤",
                "│ Alice │  30 │",
                "└───────┴─────┘",
                "```",
            ]
        )

    def test_table_inside_code_fence_is_left_alone(self, renderer):
        text = "```\n|a|b|\n|-|-|\n|1|2|\n```"
        assert renderer.render(text) == text

    def test_table_respects_width_argument(self, renderer):
        text = "|A|B|\n|-|-|\n|" + "x" * 50 + "|" + "y" * 50 + "|"

        out = renderer.render(text, table_max_width=30)

        box_lines = [line for line in out.split("\n") if not line.startswith("```")]
        assert all(len(line) <= 30 for line in box_lines)

    def test_collapses_blank_lines_and_trims(self, renderer):
        assert renderer.render("\n\na\n\n\n\nb\n\n") == "a\n\nb"


class TestWhatsAppRenderer:
    """Relaxed channel rendering."""

    @pytest.fixture
    def renderer(self):
        return WhatsAppRenderer()

    def test_inline_styles(self, renderer):
        text = "**Bold** and ~~old~~ [site](https://e.com) *it* _it2_"
        expected = "*Bold* and ~old~ site (https://e.com) *it* _it2_"
        assert renderer.render(text) == expected

    def test_no_escaping(self, renderer):
        assert renderer.render("a.b (c)!") == "a.b (c)!"

    def test_heading(self, renderer):
        assert renderer.render("# Title\nBody") == "*Title*\nBody"

    def test_code(self, renderer):
        text = "```python\nprint(1)\n```\nuse `x`"
        assert renderer.render(text) == "```print(1)\n```\nuse `x`"

    def test_table_cards(self, renderer):
        text = "|Name|Age|\n|--|--:|\n|Alice|30|\n|Bob|4|"
        assert renderer.render(text) == "Name: Alice\nAge: 30\n\nName: Bob\nAge: 4"


class TestPlainTextRenderer:
    """Fallback rendering."""

    @pytest.fixture
    def renderer(self):
        return PlainTextRenderer()

    def test_strips_everything(self, renderer):
        text = "# Title\n**b** *i* ~~s~~ [l](http://u) `c`"
        assert renderer.render(text) == "Title\nb i s l c"

    def test_fenced_code_unwrapped(self, renderer):
        assert renderer.render("```sh\necho hi\n```") == "echo hi"

    def test_one_line_fence_keeps_first_word(self, renderer):
        assert renderer.render("Intro ```code here``` outro") == "Intro code here outro"

    def test_nested_emphasis_fully_stripped(self, renderer):
        assert renderer.render("***x***") == "x"
        assert renderer.render("**a *b* c**") == "a b c"

    def test_text_after_inline_code_is_not_a_line_start(self, renderer):
        assert renderer.render("Run `cmd` - then stop") == "Run cmd - then stop"


@pytest.mark.parametrize(
    "text",
    [
        "**x** | `y`",
        "a ```code here``` b",
        "```py\nprint(1)\n```\n# not a heading",
        "```unterminated `inline`",
    ],
)
def test_passthrough_renderer_is_identity(text):
    assert PassthroughRenderer().render(text, table_max_width=None) == text


def test_passthrough_token_and_code_are_source():
    renderer = PassthroughRenderer()
    assert renderer.render_token(Token(TokenKind.RAW, "a")) == "a"
    assert renderer.render_inline_code(Segment(SegmentKind.INLINE_CODE, "x")) == "`x`"
    assert renderer.render_code(Segment(SegmentKind.CODE, "x\n", lang="py")) == (
        "```py\nx\n```"
    )


@pytest.mark.parametrize(
    "channel,expected",
    [
        ("telegram", TelegramRenderer),
        ("strict", TelegramRenderer),
        (Channel.WHATSAPP, WhatsAppRenderer),
        ("relaxed", WhatsAppRenderer),
        ("discord", PassthroughRenderer),
        ("sms", PlainTextRenderer),
        (None, PlainTextRenderer),
    ],
)
def test_get_renderer(channel, expected):
    assert isinstance(get_renderer(channel), expected)
