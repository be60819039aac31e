"""Pipe-table detection and layout.

Tables become either a fixed-width box (Telegram, wrapped in a code fence
so nothing inside is escaped) or a list of ``header: value`` cards.
"""

import re
from typing import List, Optional, Tuple

from loguru import logger

from .models import Alignment, Channel, Segment, SegmentKind, TableModel

TELEGRAM_TABLE_MAX_WIDTH = 60
MIN_COLUMN_WIDTH = 2
ELLIPSIS = "…"

BOX_H = "─"
BOX_V = "│"
BOX_TL, BOX_TR, BOX_BL, BOX_BR = "┌", "┐", "└", "┘"
BOX_LJ, BOX_RJ = "├", "┤"
BOX_TJ, BOX_BJ, BOX_CROSS = "┬", "┴", "┼"

_ROW_RE = re.compile(r"^\|.+\|$")
_SEPARATOR_RE = re.compile(r"^\|[ \t:|-]+\|$")

_CELL_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_CELL_ITALIC_STAR_RE = re.compile(r"(?<!\w)\*(.+?)\*(?!\w)")
_CELL_ITALIC_UNDERSCORE_RE = re.compile(r"(?<!\w)_(.+?)_(?!\w)")
_CELL_STRIKE_RE = re.compile(r"~~(.+?)~~")
_CELL_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")


def strip_cell_markdown(cell: str) -> str:
    """Unwrap emphasis and links to their plain labels.

    Backticks are left alone; code spans in cells are not supported.
    """
    cell = _CELL_BOLD_RE.sub(r"\1", cell)
    cell = _CELL_ITALIC_STAR_RE.sub(r"\1", cell)
    cell = _CELL_ITALIC_UNDERSCORE_RE.sub(r"\1", cell)
    cell = _CELL_STRIKE_RE.sub(r"\1", cell)
    return _CELL_LINK_RE.sub(r"\1", cell)


def _split_row(line: str) -> List[str]:
    return [strip_cell_markdown(cell.strip()) for cell in line.split("|")[1:-1]]


def parse_alignments(separator: str) -> List[Alignment]:
    """Read one alignment per column from a separator row."""
    aligns: List[Alignment] = []
    for cell in separator.strip().split("|")[1:-1]:
        cell = cell.strip()
        left = cell.startswith(":")
        right = cell.endswith(":")
        if left and right:
            aligns.append(Alignment.CENTER)
        elif right:
            aligns.append(Alignment.RIGHT)
        else:
            aligns.append(Alignment.LEFT)
    return aligns


def parse_table(lines: List[str]) -> TableModel:
    """Parse header, separator and body lines into a TableModel."""
    header, separator, *body = [line.rstrip() for line in lines]
    return TableModel(
        headers=_split_row(header),
        rows=[_split_row(row) for row in body],
        alignments=parse_alignments(separator),
    )


def find_table_blocks(
    lines: List[str], skip_first: bool = False
) -> List[Tuple[int, int]]:
    """Locate table blocks as (first_line, last_line) index pairs.

    With ``skip_first`` the first line is a continuation of an earlier line
    and cannot open a table.
    """
    blocks: List[Tuple[int, int]] = []
    i = 1 if skip_first else 0
    while i + 2 < len(lines):
        if not (
            _ROW_RE.match(lines[i].rstrip())
            and _SEPARATOR_RE.match(lines[i + 1].rstrip())
            and _ROW_RE.match(lines[i + 2].rstrip())
        ):
            i += 1
            continue
        end = i + 2
        while end + 1 < len(lines) and _ROW_RE.match(lines[end + 1].rstrip()):
            end += 1
        blocks.append((i, end))
        i = end + 1
    return blocks


def compute_column_widths(
    table: TableModel, max_width: Optional[int] = None
) -> List[int]:
    """Natural column widths, scaled down once if the box exceeds max_width."""
    widths = [
        max(
            [MIN_COLUMN_WIDTH, len(header)]
            + [len(row[i]) for row in table.rows]
        )
        for i, header in enumerate(table.headers)
    ]
    if max_width is None or not widths:
        return widths

    overhead = 3 * (len(widths) - 1) + 4
    total_content = sum(widths)
    if total_content + overhead <= max_width:
        return widths

    available = max_width - overhead
    scaled = [
        max(MIN_COLUMN_WIDTH, (w * available) // total_content) for w in widths
    ]
    logger.debug(
        "Scaled table columns from {} to {} (budget {})",
        total_content + overhead,
        sum(scaled) + overhead,
        max_width,
    )
    return scaled


def truncate_cell(value: str, width: int) -> str:
    if len(value) > width:
        return value[: width - 1] + ELLIPSIS
    return value


def pad_cell(value: str, width: int, align: Alignment) -> str:
    gap = width - len(value)
    if gap <= 0:
        return value
    if align is Alignment.RIGHT:
        return " " * gap + value
    if align is Alignment.CENTER:
        left = gap // 2
        return " " * left + value + " " * (gap - left)
    return value + " " * gap


def render_box_table(
    table: TableModel, max_width: Optional[int] = TELEGRAM_TABLE_MAX_WIDTH
) -> str:
    """Render a box-drawn fixed-width table (without the code fence)."""
    widths = compute_column_widths(table, max_width)

    def fmt_row(cells: List[str]) -> str:
        padded = [
            " " + pad_cell(truncate_cell(cell, w), w, align) + " "
            for cell, w, align in zip(cells, widths, table.alignments)
        ]
        return BOX_V + BOX_V.join(padded) + BOX_V

    def border(left: str, join: str, right: str) -> str:
        return left + join.join(BOX_H * (w + 2) for w in widths) + right

    lines = [
        border(BOX_TL, BOX_TJ, BOX_TR),
        fmt_row(table.headers),
        border(BOX_LJ, BOX_CROSS, BOX_RJ),
    ]
    lines.extend(fmt_row(row) for row in table.rows)
    lines.append(border(BOX_BL, BOX_BJ, BOX_BR))
    return "\n".join(lines)


def render_table_cards(table: TableModel) -> str:
    """Render one ``header: value`` card per body row."""
    cards = [
        "\n".join(f"{header}: {value}" for header, value in zip(table.headers, row))
        for row in table.rows
    ]
    return "\n\n".join(cards)


def convert_tables(
    text: str,
    channel: Channel,
    continuation: bool = False,
    max_width: Optional[int] = TELEGRAM_TABLE_MAX_WIDTH,
) -> List[Segment]:
    """Rewrite table blocks in a text run.

    Returns TEXT segments, plus a CODE segment per table for Telegram.
    """
    lines = text.split("\n")
    blocks = find_table_blocks(lines, skip_first=continuation)
    if not blocks:
        return [Segment(SegmentKind.TEXT, text)]

    segments: List[Segment] = []
    pending: List[str] = []
    cursor = 0
    for start, end in blocks:
        table = parse_table(lines[start : end + 1])
        logger.debug(
            "Converting table: {} columns, {} rows",
            table.column_count,
            len(table.rows),
        )
        pending.extend(lines[cursor:start])
        if channel is Channel.TELEGRAM:
            box = render_box_table(table, max_width)
            before = "\n".join(pending + ["", ""])
            segments.append(Segment(SegmentKind.TEXT, before))
            segments.append(
                Segment(
                    SegmentKind.CODE,
                    box + "\n",
                    raw="\n".join(lines[start : end + 1]),
                )
            )
            pending = [""]
        else:
            pending.extend(["", render_table_cards(table)])
        cursor = end + 1

    pending.extend(lines[cursor:])
    tail = "\n".join(pending)
    if tail:
        segments.append(Segment(SegmentKind.TEXT, tail))
    return segments
