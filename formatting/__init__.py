"""Channel-specific markdown rendering."""

from loguru import logger

from .dispatcher import render, render_telegram, render_whatsapp, strip_markdown
from .models import (
    Alignment,
    Channel,
    RenderedMessage,
    Segment,
    SegmentKind,
    TableModel,
    Token,
    TokenKind,
)
from .renderers import get_renderer

__all__ = [
    "render",
    "render_telegram",
    "render_whatsapp",
    "strip_markdown",
    "get_renderer",
    "Alignment",
    "Channel",
    "RenderedMessage",
    "Segment",
    "SegmentKind",
    "TableModel",
    "Token",
    "TokenKind",
]

# Silent as a library until an application enables it.
logger.disable("formatting")
