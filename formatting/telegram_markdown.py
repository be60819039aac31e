"""Telegram MarkdownV2 utilities.

Renders common Markdown into Telegram MarkdownV2 format.
Every reserved character outside code and renderer-inserted markers is
backslash-escaped; tables become box-drawn blocks inside a code fence.
"""

from .base import ChannelRenderer
from .models import Channel, Segment, Token, TokenKind

MDV2_SPECIAL_CHARS = set("\\_*[]()~`>#+-=|{}.!")
MDV2_LINK_ESCAPE = set("\\)")

PARSE_MODE = "MarkdownV2"


def escape_md_v2(text: str) -> str:
    """Escape text for Telegram MarkdownV2."""
    return "".join(f"\\{ch}" if ch in MDV2_SPECIAL_CHARS else ch for ch in text)


def escape_md_v2_link_url(text: str) -> str:
    """Escape URL for Telegram MarkdownV2 link destination."""
    return "".join(f"\\{ch}" if ch in MDV2_LINK_ESCAPE else ch for ch in text)


def mdv2_bold(text: str) -> str:
    """Format text as bold in MarkdownV2."""
    return f"*{escape_md_v2(text)}*"


def mdv2_italic(text: str) -> str:
    """Format text as italic in MarkdownV2."""
    return f"_{escape_md_v2(text)}_"


def mdv2_strike(text: str) -> str:
    """Format text as strikethrough in MarkdownV2."""
    return f"~{escape_md_v2(text)}~"


def mdv2_link(label: str, url: str) -> str:
    """Format a link; the label is display text, the URL a link target."""
    return f"[{escape_md_v2(label)}]({escape_md_v2_link_url(url)})"


class TelegramRenderer(ChannelRenderer):
    """Strict dialect: MarkdownV2 with exhaustive escaping."""

    channel = Channel.TELEGRAM
    render_mode = PARSE_MODE

    def render_token(self, token: Token) -> str:
        kind = token.kind
        if kind is TokenKind.BOLD:
            return mdv2_bold(token.text)
        if kind is TokenKind.ITALIC:
            return mdv2_italic(token.text)
        if kind is TokenKind.STRIKE:
            return mdv2_strike(token.text)
        if kind is TokenKind.LINK:
            return mdv2_link(token.text, token.url or "")
        if kind is TokenKind.BARE_URL:
            return mdv2_link(token.text, token.text)
        return escape_md_v2(token.text)

    def render_code(self, segment: Segment) -> str:
        return f"```{segment.lang}\n{segment.content}```"

    def render_inline_code(self, segment: Segment) -> str:
        return f"`{segment.content}`"


__all__ = [
    "MDV2_SPECIAL_CHARS",
    "PARSE_MODE",
    "escape_md_v2",
    "escape_md_v2_link_url",
    "mdv2_bold",
    "mdv2_italic",
    "mdv2_strike",
    "mdv2_link",
    "TelegramRenderer",
]
