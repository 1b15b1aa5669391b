"""
comptage/printer.py

Aligned table rendering for report results.

The layout is psql's "aligned" format at border level 2 with the Unicode
single line style:

            Jours
    ┌────────────┬───────┐
    │    jour    │ total │
    ├────────────┼───────┤
    │ 2024-01-01 │ 4     │
    └────────────┴───────┘

Rules:
- Title centered over the whole table width (printed as-is if wider).
- Headers centered and never translated.
- Numeric columns right-aligned, everything else left-aligned.
- Values printed raw (no locale grouping), NULL printed as empty.
- No pager, no footer unless PrintOptions.default_footer is set.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Iterable

from .results import QueryResult

# Type OIDs psql right-aligns: int8, int2, int4, oid, xid, cid, float4,
# float8, money, numeric, xid8
NUMERIC_TYPE_OIDS = frozenset({20, 21, 23, 26, 28, 29, 700, 701, 790, 1700, 5069})


@dataclass(frozen=True)
class LineStyle:
    """
    Box-drawing glyphs for one line style.

    Attributes:
        hrule: Horizontal segment (outer border and header separator).
        vrule: Vertical segment (outer border and column separator).
        top: Left corner, column junction and right corner of the top border.
        middle: Same for the line under the header.
        bottom: Same for the bottom border.
    """
    hrule: str
    vrule: str
    top: tuple[str, str, str]
    middle: tuple[str, str, str]
    bottom: tuple[str, str, str]


UNICODE_SINGLE = LineStyle(
    hrule="─",
    vrule="│",
    top=("┌", "┬", "┐"),
    middle=("├", "┼", "┤"),
    bottom=("└", "┴", "┘"),
)


@dataclass(frozen=True)
class PrintOptions:
    """
    Rendering preset for one report table.

    Attributes:
        title: Line printed above the table.
        encoding: Client encoding, decides how display widths are measured.
        start_table: Emit title, top border and header.
        stop_table: Emit the bottom border (and footer if enabled).
        default_footer: Append a "(N rows)" line.
        line_style: Glyph set.
    """
    title: str | None = None
    encoding: str = "UTF8"
    start_table: bool = True
    stop_table: bool = True
    default_footer: bool = False
    line_style: LineStyle = UNICODE_SINGLE


def display_width(text: str, encoding: str = "UTF8") -> int:
    """
    Number of terminal columns `text` occupies.

    For UTF8, wide East-Asian characters count as two and combining marks as
    zero. Single-byte encodings count one column per character.

    Args:
        text: Cell text (single line).
        encoding: PostgreSQL encoding name.

    Returns:
        Width in columns.
    """
    if encoding.upper().replace("-", "") not in ("UTF8", "UNICODE"):
        return len(text)
    width = 0
    for ch in text:
        if unicodedata.combining(ch):
            continue
        width += 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1
    return width


def is_numeric_type(type_code: int) -> bool:
    """True for the column types psql aligns to the right."""
    return type_code in NUMERIC_TYPE_OIDS


def format_table(result: QueryResult, opts: PrintOptions) -> str:
    """
    Render a QueryResult as an aligned, bordered table.

    Args:
        result: Columns, text rows and type OIDs.
        opts: Rendering preset.

    Returns:
        The table, one line per row, newline-terminated. A closed table
        (stop_table) is followed by an empty line, as psql does.
    """
    style = opts.line_style
    cols = [str(c) for c in result.columns]
    str_rows = [[("" if v is None else str(v)) for v in r] for r in result.rows]
    right = [is_numeric_type(t) for t in result.type_codes]

    def width(s: str) -> int:
        return display_width(s, opts.encoding)

    widths = [width(c) for c in cols]
    for r in str_rows:
        for i, cell in enumerate(r):
            widths[i] = max(widths[i], width(cell))

    def rule(corners: tuple[str, str, str]) -> str:
        left, junction, end = corners
        return left + junction.join(style.hrule * (w + 2) for w in widths) + end

    def pad(cell: str, i: int, align: str) -> str:
        gap = widths[i] - width(cell)
        if align == "c":
            return " " * (gap // 2) + cell + " " * ((gap + 1) // 2)
        if align == "r":
            return " " * gap + cell
        return cell + " " * gap

    def fmt_row(cells: Iterable[str]) -> str:
        v = style.vrule
        return f"{v} " + f" {v} ".join(cells) + f" {v}"

    out: list[str] = []
    if opts.start_table:
        if opts.title:
            total = sum(widths) + 3 * len(widths) + 1
            title_width = width(opts.title)
            if total >= title_width:
                out.append(" " * ((total - title_width) // 2) + opts.title)
            else:
                out.append(opts.title)
        out.append(rule(style.top))
        if cols:
            out.append(fmt_row(pad(c, i, "c") for i, c in enumerate(cols)))
        out.append(rule(style.middle))

    for r in str_rows:
        out.append(fmt_row(pad(cell, i, "r" if right[i] else "l") for i, cell in enumerate(r)))

    if opts.stop_table:
        out.append(rule(style.bottom))
        if opts.default_footer:
            n = len(str_rows)
            out.append(f"({n} {'row' if n == 1 else 'rows'})")
        # psql ends every table with an empty line
        out.append("")

    return "\n".join(out) + "\n"
