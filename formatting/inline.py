"""Block-level line rules and the inline span tokenizer.

The tokenizer is a cursor scan: at each position it tries the span
matchers in priority order (bold, strike, link, bare URL, italic) and
consumes the first that matches. Spans never nest.
"""

import re
from typing import Callable, List, Optional, Tuple

from .models import Token, TokenKind

BULLET = "•"

_HEADING_RE = re.compile(r"^#{1,6}[ \t]+(.+)$")
_RULE_RE = re.compile(r"^---+$")
_BULLET_RE = re.compile(r"^[\t ]*[-*][ \t]+")

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_STRIKE_RE = re.compile(r"~~(.+?)~~")
_LINK_RE = re.compile(r"\[([^\]\n]+)\]\(([^)\n]+)\)")
_BARE_URL_RE = re.compile(r"https?://[^\s<>\[\]()]+")

# Characters that can open a span; anything else is skipped without matching.
_SPAN_OPENERS = frozenset("*~[h_")

Match = Optional[Tuple[Token, int]]


def apply_block_rules(text: str, continuation: bool = False) -> str:
    """Rewrite headings to bold, drop horizontal rules, normalize bullets.

    With ``continuation`` the first line continues a line that started in an
    earlier segment and is left untouched.
    """
    lines = text.split("\n")
    for i, line in enumerate(lines):
        if i == 0 and continuation:
            continue
        heading = _HEADING_RE.match(line)
        if heading:
            lines[i] = f"**{heading.group(1)}**"
        elif _RULE_RE.match(line):
            lines[i] = ""
        else:
            lines[i] = _BULLET_RE.sub(BULLET + " ", line, count=1)
    return "\n".join(lines)


def is_word_char(ch: str) -> bool:
    """Letters, digits and underscore count as word characters."""
    return ch.isalnum() or ch == "_"


def _match_bold(text: str, pos: int) -> Match:
    m = _BOLD_RE.match(text, pos)
    if m:
        return Token(TokenKind.BOLD, m.group(1)), m.end()
    return None


def _match_strike(text: str, pos: int) -> Match:
    m = _STRIKE_RE.match(text, pos)
    if m:
        return Token(TokenKind.STRIKE, m.group(1)), m.end()
    return None


def _match_link(text: str, pos: int) -> Match:
    m = _LINK_RE.match(text, pos)
    if m:
        return Token(TokenKind.LINK, m.group(1), url=m.group(2)), m.end()
    return None


def _match_bare_url(text: str, pos: int) -> Match:
    m = _BARE_URL_RE.match(text, pos)
    if m:
        return Token(TokenKind.BARE_URL, m.group(0), url=m.group(0)), m.end()
    return None


def _match_italic(text: str, pos: int, marker: str) -> Match:
    if text[pos] != marker:
        return None
    if pos > 0 and is_word_char(text[pos - 1]):
        return None

    line_end = text.find("\n", pos)
    if line_end == -1:
        line_end = len(text)

    close = pos + 2
    while close < line_end:
        close = text.find(marker, close, line_end)
        if close == -1:
            return None
        after = close + 1
        if after < len(text) and is_word_char(text[after]):
            close += 1
            continue
        return Token(TokenKind.ITALIC, text[pos + 1 : close], marker=marker), after
    return None


_MATCHERS: List[Callable[[str, int], Match]] = [
    _match_bold,
    _match_strike,
    _match_link,
    _match_bare_url,
    lambda text, pos: _match_italic(text, pos, "*"),
    lambda text, pos: _match_italic(text, pos, "_"),
]


def _match_at(text: str, pos: int) -> Match:
    if text[pos] not in _SPAN_OPENERS:
        return None
    for matcher in _MATCHERS:
        found = matcher(text, pos)
        if found is not None:
            return found
    return None


def tokenize_inline(text: str) -> List[Token]:
    """Split text into raw runs and typed inline spans, left to right."""
    tokens: List[Token] = []
    last = 0
    pos = 0
    while pos < len(text):
        found = _match_at(text, pos)
        if found is None:
            pos += 1
            continue
        token, end = found
        if pos > last:
            tokens.append(Token(TokenKind.RAW, text[last:pos]))
        tokens.append(token)
        pos = last = end
    if last < len(text):
        tokens.append(Token(TokenKind.RAW, text[last:]))
    return tokens
