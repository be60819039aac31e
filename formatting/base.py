"""Abstract base class for channel renderers."""

import re
from abc import ABC, abstractmethod
from typing import List, Optional

from .code_spans import expand_inline_code, split_fenced_code
from .inline import apply_block_rules, tokenize_inline
from .models import Channel, Segment, SegmentKind, Token
from .tables import TELEGRAM_TABLE_MAX_WIDTH, convert_tables

_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


def _line_start_after(segment: Segment, at_line_start: bool) -> bool:
    source = segment.source()
    if not source:
        return at_line_start
    return segment.is_text and source.endswith("\n")


class ChannelRenderer(ABC):
    """
    Base class for per-channel rendering strategies.

    The pipeline is shared: fenced code is split out first, tables are
    converted in the remaining text, inline code is split out, and each
    text run goes through block rules and the inline tokenizer. Subclasses
    decide how tokens and code are written for their dialect.
    """

    channel: Channel = Channel.PLAINTEXT
    render_mode: Optional[str] = None

    def render(
        self, text: str, table_max_width: Optional[int] = TELEGRAM_TABLE_MAX_WIDTH
    ) -> str:
        """Render a markdown document for this channel."""
        segments = self.segment(text, table_max_width)

        parts: List[str] = []
        at_line_start = True
        for seg in segments:
            if seg.kind is SegmentKind.CODE:
                parts.append(self.render_code(seg))
            elif seg.kind is SegmentKind.INLINE_CODE:
                parts.append(self.render_inline_code(seg))
            else:
                parts.append(self.render_text(seg.content, not at_line_start))
            at_line_start = _line_start_after(seg, at_line_start)

        result = _EXCESS_NEWLINES_RE.sub("\n\n", "".join(parts))
        return result.strip()

    def segment(
        self, text: str, table_max_width: Optional[int] = TELEGRAM_TABLE_MAX_WIDTH
    ) -> List[Segment]:
        """Split text into code, inline code and (table-converted) text."""
        segments: List[Segment] = []
        at_line_start = True
        for seg in split_fenced_code(text):
            if seg.is_text:
                segments.extend(
                    convert_tables(
                        seg.content,
                        self.channel,
                        continuation=not at_line_start,
                        max_width=table_max_width,
                    )
                )
            else:
                segments.append(seg)
            at_line_start = _line_start_after(seg, at_line_start)
        return expand_inline_code(segments)

    def render_text(self, text: str, continuation: bool = False) -> str:
        """Apply block rules, tokenize and render one text run."""
        tokens = tokenize_inline(apply_block_rules(text, continuation))
        return "".join(self.render_token(token) for token in tokens)

    @abstractmethod
    def render_token(self, token: Token) -> str:
        """Write one inline token in the channel's syntax."""
        pass

    @abstractmethod
    def render_code(self, segment: Segment) -> str:
        """Write a fenced code block (or converted table)."""
        pass

    @abstractmethod
    def render_inline_code(self, segment: Segment) -> str:
        """Write an inline code span."""
        pass
