"""Data models for channel-specific markdown rendering."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Channel(str, Enum):
    """Destination channel; selects the rendering pipeline."""

    TELEGRAM = "telegram"
    DISCORD = "discord"
    WHATSAPP = "whatsapp"
    PLAINTEXT = "plaintext"

    @classmethod
    def resolve(cls, value: Any) -> "Channel":
        """Map a channel identifier or dialect alias to a Channel.

        Unknown identifiers (including None) fall back to PLAINTEXT.
        """
        if isinstance(value, Channel):
            return value
        if not isinstance(value, str):
            return cls.PLAINTEXT
        return _CHANNEL_ALIASES.get(value.strip().lower(), cls.PLAINTEXT)


_CHANNEL_ALIASES: Dict[str, Channel] = {
    "telegram": Channel.TELEGRAM,
    "strict": Channel.TELEGRAM,
    "discord": Channel.DISCORD,
    "passthrough": Channel.DISCORD,
    "whatsapp": Channel.WHATSAPP,
    "relaxed": Channel.WHATSAPP,
    "plaintext": Channel.PLAINTEXT,
    "other": Channel.PLAINTEXT,
}


class SegmentKind(Enum):
    """Block-level classification used to protect code from rewriting."""

    TEXT = "text"
    CODE = "code"
    INLINE_CODE = "inline_code"


@dataclass(frozen=True)
class Segment:
    """A contiguous span of the document."""

    kind: SegmentKind
    content: str
    lang: str = ""
    raw: Optional[str] = None

    @property
    def is_text(self) -> bool:
        return self.kind is SegmentKind.TEXT

    def source(self) -> str:
        """Markdown source this segment was extracted from."""
        if self.raw is not None:
            return self.raw
        if self.kind is SegmentKind.CODE:
            return f"```{self.lang}\n{self.content}```"
        if self.kind is SegmentKind.INLINE_CODE:
            return f"`{self.content}`"
        return self.content


class TokenKind(Enum):
    """Type of inline span."""

    RAW = "raw"
    BOLD = "bold"
    ITALIC = "italic"
    STRIKE = "strike"
    LINK = "link"
    BARE_URL = "bare_url"


@dataclass(frozen=True)
class Token:
    """An inline span produced by the tokenizer.

    ``marker`` is the delimiter the italic span was written with (``*`` or
    ``_``) so channels that leave italics alone can re-emit it as-is.
    """

    kind: TokenKind
    text: str
    url: Optional[str] = None
    marker: str = ""


class Alignment(Enum):
    """Column alignment parsed from a table separator row."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass
class TableModel:
    """A parsed pipe table."""

    headers: List[str]
    rows: List[List[str]] = field(default_factory=list)
    alignments: List[Alignment] = field(default_factory=list)

    def __post_init__(self) -> None:
        width = len(self.headers)
        self.rows = [(list(r) + [""] * width)[:width] for r in self.rows]
        aligns = list(self.alignments)[:width]
        self.alignments = aligns + [Alignment.LEFT] * (width - len(aligns))

    @property
    def column_count(self) -> int:
        return len(self.headers)


@dataclass(frozen=True)
class RenderedMessage:
    """Rendered text plus the wire dialect the delivery layer must use."""

    text: str
    render_mode: Optional[str] = None

    def __str__(self) -> str:
        return self.text

    def to_payload(self) -> Dict[str, Any]:
        """Build the delivery-layer payload."""
        payload: Dict[str, Any] = {"text": self.text}
        if self.render_mode is not None:
            payload["metadata"] = {"parseMode": self.render_mode}
        return payload
