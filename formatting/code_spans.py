"""Code-span extraction.

Splits a document into an ordered list of segments so that fenced blocks
and inline code are never touched by the table, block and inline passes.
Joining the raw source of every segment gives back the original text.
"""

import re
from typing import Iterable, List

from loguru import logger

from .models import Segment, SegmentKind

# A language tag only counts when a newline follows it.
_FENCE_RE = re.compile(r"```(?:(\w*)\n)?(.*?)```", re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`([^`\n]+)`")


def split_fenced_code(text: str) -> List[Segment]:
    """Split text into TEXT and fenced CODE segments.

    An opening fence without a closing one stays in the surrounding text.
    """
    segments: List[Segment] = []
    last = 0
    for match in _FENCE_RE.finditer(text):
        if match.start() > last:
            segments.append(Segment(SegmentKind.TEXT, text[last : match.start()]))
        segments.append(
            Segment(
                SegmentKind.CODE,
                match.group(2),
                lang=match.group(1) or "",
                raw=match.group(0),
            )
        )
        last = match.end()

    tail = text[last:]
    if tail:
        if "```" in tail:
            logger.debug("Unterminated code fence left as literal text")
        segments.append(Segment(SegmentKind.TEXT, tail))
    return segments


def split_inline_code(text: str) -> List[Segment]:
    """Split a text run into TEXT and INLINE_CODE segments."""
    segments: List[Segment] = []
    last = 0
    for match in _INLINE_CODE_RE.finditer(text):
        if match.start() > last:
            segments.append(Segment(SegmentKind.TEXT, text[last : match.start()]))
        segments.append(Segment(SegmentKind.INLINE_CODE, match.group(1)))
        last = match.end()
    if last < len(text):
        segments.append(Segment(SegmentKind.TEXT, text[last:]))
    return segments


def expand_inline_code(segments: Iterable[Segment]) -> List[Segment]:
    """Run split_inline_code over every TEXT segment, keeping others."""
    out: List[Segment] = []
    for seg in segments:
        if seg.is_text:
            out.extend(split_inline_code(seg.content))
        else:
            out.append(seg)
    return out


def extract_code_segments(text: str) -> List[Segment]:
    """Extract fenced blocks first, then inline code from what remains."""
    return expand_inline_code(split_fenced_code(text))


def join_segments(segments: Iterable[Segment]) -> str:
    """Reassemble the markdown source of a segment list."""
    return "".join(seg.source() for seg in segments)

