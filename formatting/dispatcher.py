"""Top-level entry point: render a message for a destination channel."""

from typing import Any, Optional, Union

from loguru import logger

from .models import Channel, RenderedMessage
from .renderers import get_renderer


def render(
    message: Optional[str], channel: Any
) -> Union[None, str, RenderedMessage]:
    """Render markdown for a channel.

    Args:
        message: Generic markdown text. Empty or None is returned as-is.
        channel: A Channel, a platform name ("telegram", "discord",
            "whatsapp") or a dialect alias ("strict", "relaxed",
            "passthrough"). Anything else renders as plain text.

    Returns:
        A RenderedMessage carrying the parse mode for Telegram, otherwise
        the rendered string.
    """
    if message is None:
        return None
    if not isinstance(message, str):
        raise TypeError(f"message must be str, got {type(message).__name__}")
    if not message:
        return message

    resolved = Channel.resolve(channel)
    if resolved is Channel.DISCORD:
        return message

    renderer = get_renderer(resolved)
    with logger.contextualize(channel=resolved.value):
        logger.debug("Rendering {} chars for {}", len(message), resolved.value)
        text = renderer.render(message)

    if renderer.render_mode:
        return RenderedMessage(text=text, render_mode=renderer.render_mode)
    return text


def render_telegram(message: str) -> str:
    """Render Telegram MarkdownV2 text (without the parse-mode wrapper)."""
    if not message:
        return message
    return get_renderer(Channel.TELEGRAM).render(message)


def render_whatsapp(message: str) -> str:
    """Render WhatsApp-flavoured markdown."""
    if not message:
        return message
    return get_renderer(Channel.WHATSAPP).render(message)


def strip_markdown(message: str) -> str:
    """Strip all markdown formatting to produce clean plain text."""
    if not message:
        return message
    return get_renderer(Channel.PLAINTEXT).render(message)
