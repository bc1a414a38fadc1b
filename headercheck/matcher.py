"""
Decides whether the leading lines of a file already hold the rendered header,
and rewrites the line list when they do not.

Layout of a file as seen here::

    #!/usr/bin/env python3      <- prologue (shebang, <?xml ...?> or <?php), preserved
                                <- one blank line when Spacing.after_prologue
    # Copyright (c) 2019 Org.   <- content_start: header is expected here
    # Author: elbaro
                                <- one blank line when Spacing.after_header
    import os                   <- original content
"""
from __future__ import annotations
from typing import List, Sequence, Tuple
from dataclasses import dataclass
import enum

from headercheck.syntax import CommentSyntax

SHEBANG = "#!"
XML_DECLARATION = "<?xml"
PHP_OPEN_TAG = "<?php"


class MatchKind(enum.Enum):
    ALREADY_COMPLIANT = "compliant"
    NEEDS_INSERTION = "insertion"
    NEEDS_REPLACEMENT = "replacement"


@dataclass(frozen=True)
class Spacing:
    after_prologue: bool = True   # blank line between prologue and header
    after_header: bool = True     # blank line between header and content


DEFAULT_SPACING = Spacing()


@dataclass(frozen=True)
class Layout:
    prologue: bool
    prologue_end: int    # first line after the prologue and its separator
    content_start: int   # first non-blank line at or after prologue_end
    prologue_ok: bool    # prologue separator is as configured


@dataclass(frozen=True)
class Match:
    kind: MatchKind
    layout: Layout
    block_end: int               # exclusive end of the existing header block
    mismatch_line: int | None    # 0-based file line where the header first differs
    tail: str = ""               # code sharing the last line of the old block

    @property
    def is_compliant(self) -> bool:
        return self.kind is MatchKind.ALREADY_COMPLIANT


def is_prologue(line: str) -> bool:
    """
    Lines that must stay first: a shebang, an XML declaration, or a bare
    ``<?php`` open tag.
    """
    if line.startswith(SHEBANG):
        return True
    if line.startswith(XML_DECLARATION):
        return line.rstrip().endswith("?>")
    return line.strip() == PHP_OPEN_TAG


def locate(lines: Sequence[str], newline_after_prologue: bool = True) -> Layout:
    prologue = bool(lines) and is_prologue(lines[0])
    prologue_end = 1 if prologue else 0
    prologue_ok = True
    if prologue and newline_after_prologue:
        if len(lines) > 1 and not lines[1].strip():
            prologue_end = 2
        else:
            prologue_ok = False

    content_start = prologue_end
    while content_start < len(lines) and not lines[content_start].strip():
        content_start += 1

    return Layout(prologue, prologue_end, content_start, prologue_ok)


def block_close(lines: Sequence[str], start: int, syntax: CommentSyntax) -> Tuple[int, int] | None:
    """
    Line and column just past the comment block starting at ``start``, or None
    when the line there does not open a comment (or opens a block that never
    closes).
    """
    if start >= len(lines):
        return None
    first = lines[start]

    if syntax.line_prefix is not None and first.startswith(syntax.line_prefix):
        end = start
        while end + 1 < len(lines) and lines[end + 1].startswith(syntax.line_prefix):
            end += 1
        return end, len(lines[end])

    if syntax.has_block and first.startswith(syntax.block_start):
        offset = len(syntax.block_start)
        for i in range(start, len(lines)):
            column = lines[i].find(syntax.block_end, offset)
            if column >= 0:
                return i, column + len(syntax.block_end)
            offset = 0
    return None


def header_block_end(lines: Sequence[str], start: int, syntax: CommentSyntax) -> int | None:
    """
    Exclusive end line of the comment block starting at ``start``.
    """
    close = block_close(lines, start, syntax)
    return None if close is None else close[0] + 1


def evaluate(
    lines: Sequence[str],
    header: Sequence[str],
    syntax: CommentSyntax,
    spacing: Spacing = DEFAULT_SPACING,
) -> Match:
    layout = locate(lines, spacing.after_prologue)
    start = layout.content_start
    end = start + len(header)
    head = list(lines[start:end])

    mismatch = None
    for i, expected in enumerate(header):
        if i >= len(head) or head[i] != expected:
            mismatch = start + i
            break

    if mismatch is None:
        separated = not spacing.after_header or end >= len(lines) or not lines[end].strip()
        if layout.prologue_ok and start == layout.prologue_end and separated:
            return Match(MatchKind.ALREADY_COMPLIANT, layout, end, None)
        # Header text is right; only the blank lines around it are wrong.
        if layout.prologue_ok and start == layout.prologue_end:
            mismatch = end
        else:
            mismatch = layout.prologue_end
        return Match(MatchKind.NEEDS_REPLACEMENT, layout, end, mismatch)

    close = block_close(lines, start, syntax)
    if close is None:
        return Match(MatchKind.NEEDS_INSERTION, layout, start, mismatch)
    line, column = close
    return Match(MatchKind.NEEDS_REPLACEMENT, layout, line + 1, mismatch, lines[line][column:].lstrip())


def apply(
    lines: Sequence[str],
    match: Match,
    header: Sequence[str],
    spacing: Spacing = DEFAULT_SPACING,
) -> List[str]:
    """
    Returns the new file lines for a non-compliant match.
    """
    if match.kind is MatchKind.ALREADY_COMPLIANT:
        return list(lines)

    layout = match.layout
    out: List[str] = []
    if layout.prologue:
        out.append(lines[0])
        if spacing.after_prologue:
            out.append("")
    out.extend(header)

    if match.kind is MatchKind.NEEDS_INSERTION:
        rest = list(lines[layout.content_start:])
    else:
        rest = list(lines[match.block_end:])
        if match.tail:
            rest.insert(0, match.tail)

    if rest and rest[0].strip() and spacing.after_header:
        out.append("")
    out.extend(rest)
    return out
