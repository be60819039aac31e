"""Renderer registry.

Creates the appropriate renderer for a channel. To add a channel:
1. Add a member to models.Channel (and any aliases)
2. Implement ChannelRenderer for it and register it in _RENDERERS below
"""

from typing import Dict, List, Optional

from .base import ChannelRenderer
from .code_spans import extract_code_segments
from .inline import apply_block_rules, tokenize_inline
from .models import Channel, Segment, SegmentKind, Token, TokenKind
from .telegram_markdown import TelegramRenderer


class WhatsAppRenderer(ChannelRenderer):
    """Relaxed dialect: single-character emphasis, no escaping, card tables."""

    channel = Channel.WHATSAPP

    def render_token(self, token: Token) -> str:
        kind = token.kind
        if kind is TokenKind.BOLD:
            return f"*{token.text}*"
        if kind is TokenKind.STRIKE:
            return f"~{token.text}~"
        if kind is TokenKind.ITALIC:
            return f"{token.marker}{token.text}{token.marker}"
        if kind is TokenKind.LINK:
            return f"{token.text} ({token.url})"
        return token.text

    def render_code(self, segment: Segment) -> str:
        return f"```{segment.content}```"

    def render_inline_code(self, segment: Segment) -> str:
        return f"`{segment.content}`"


class PlainTextRenderer(ChannelRenderer):
    """Fallback: all markup stripped, links reduced to their label."""

    channel = Channel.PLAINTEXT

    def render_text(self, text: str, continuation: bool = False) -> str:
        # Stripping a span can expose markers that pair up with their
        # neighbours (***x*** -> *x*), so repeat until nothing is left.
        text = apply_block_rules(text, continuation)
        while True:
            stripped = "".join(self.render_token(t) for t in tokenize_inline(text))
            if stripped == text:
                return stripped
            text = stripped

    def render_token(self, token: Token) -> str:
        return token.text

    def render_code(self, segment: Segment) -> str:
        return segment.content

    def render_inline_code(self, segment: Segment) -> str:
        return segment.content


class PassthroughRenderer(ChannelRenderer):
    """Native markdown channels (Discord): text is delivered unchanged."""

    channel = Channel.DISCORD

    def render(self, text: str, table_max_width: Optional[int] = None) -> str:
        parts: List[str] = []
        for seg in extract_code_segments(text):
            if seg.kind is SegmentKind.CODE:
                parts.append(self.render_code(seg))
            elif seg.kind is SegmentKind.INLINE_CODE:
                parts.append(self.render_inline_code(seg))
            else:
                parts.append(self.render_token(Token(TokenKind.RAW, seg.content)))
        return "".join(parts)

    def render_token(self, token: Token) -> str:
        return token.text

    def render_code(self, segment: Segment) -> str:
        return segment.source()

    def render_inline_code(self, segment: Segment) -> str:
        return segment.source()


_RENDERERS: Dict[Channel, ChannelRenderer] = {
    Channel.TELEGRAM: TelegramRenderer(),
    Channel.DISCORD: PassthroughRenderer(),
    Channel.WHATSAPP: WhatsAppRenderer(),
    Channel.PLAINTEXT: PlainTextRenderer(),
}


def get_renderer(channel) -> ChannelRenderer:
    """Return the renderer for a channel identifier (unknown ⇒ plain text)."""
    return _RENDERERS[Channel.resolve(channel)]
