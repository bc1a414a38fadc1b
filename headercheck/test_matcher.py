import pytest

from headercheck.matcher import MatchKind, Spacing, apply, evaluate, header_block_end, is_prologue, locate
from headercheck.syntax import CommentSyntax

SLASH = CommentSyntax(line_prefix="//")
HASH = CommentSyntax(line_prefix="#")
C_BLOCK = CommentSyntax(block_start="/*", block_end="*/")
XML = CommentSyntax(block_start="<!--", block_end="-->")

HEADER = ["// Copyright (c) 2019 Org.", "// Author: elbaro"]
PY_HEADER = ["# Copyright (c) 2019 Org.", "# Author: elbaro"]
BLOCK_HEADER = ["/*", "Copyright (c) 2019 Org.", "Author: elbaro", "*/"]
XML_HEADER = ["<!--", "Copyright (c) 2019 Org.", "Author: elbaro", "-->"]

TIGHT = Spacing(after_prologue=True, after_header=False)


def fix(lines, header=HEADER, syntax=SLASH, spacing=Spacing()):
    match = evaluate(lines, header, syntax, spacing)
    return apply(lines, match, header, spacing)


def test_exact_match_is_compliant():
    lines = HEADER + ["", "int main() { return 0; }"]
    match = evaluate(lines, HEADER, SLASH)
    assert match.kind is MatchKind.ALREADY_COMPLIANT
    assert match.is_compliant
    assert match.mismatch_line is None
    assert apply(lines, match, HEADER) == lines


def test_header_only_file_is_compliant():
    assert evaluate(HEADER, HEADER, SLASH).is_compliant


def test_missing_header_is_inserted_with_one_separator():
    lines = ["int main() { return 0; }"]
    match = evaluate(lines, HEADER, SLASH)
    assert match.kind is MatchKind.NEEDS_INSERTION
    assert match.mismatch_line == 0
    assert apply(lines, match, HEADER) == HEADER + ["", "int main() { return 0; }"]


def test_empty_file_gets_only_the_header():
    match = evaluate([], HEADER, SLASH)
    assert match.kind is MatchKind.NEEDS_INSERTION
    assert apply([], match, HEADER) == HEADER


def test_blank_only_file_gets_only_the_header():
    assert fix(["", "  ", ""]) == HEADER


def test_stale_year_is_replaced():
    lines = ["// Copyright (c) 2018 Org.", "// Author: elbaro", "", "int x;"]
    match = evaluate(lines, HEADER, SLASH)
    assert match.kind is MatchKind.NEEDS_REPLACEMENT
    assert match.mismatch_line == 0
    assert match.block_end == 2
    assert apply(lines, match, HEADER) == HEADER + ["", "int x;"]


def test_stale_author_is_replaced():
    lines = ["// Copyright (c) 2019 Org.", "// Author: someone", "int x;"]
    match = evaluate(lines, HEADER, SLASH)
    assert match.kind is MatchKind.NEEDS_REPLACEMENT
    assert match.mismatch_line == 1
    assert apply(lines, match, HEADER) == HEADER + ["", "int x;"]


def test_whole_old_comment_block_is_replaced():
    lines = ["// Old license", "// spanning", "// three lines", "", "int x;"]
    assert fix(lines) == HEADER + ["", "int x;"]


def test_strict_prefix_is_never_compliant():
    lines = [HEADER[0]]
    match = evaluate(lines, HEADER, SLASH)
    assert match.kind is MatchKind.NEEDS_REPLACEMENT
    assert match.mismatch_line == 1
    assert apply(lines, match, HEADER) == HEADER


def test_header_needs_blank_line_after_it():
    lines = HEADER + ["int x;"]
    match = evaluate(lines, HEADER, SLASH)
    assert match.kind is MatchKind.NEEDS_REPLACEMENT
    assert match.mismatch_line == 2
    assert apply(lines, match, HEADER) == HEADER + ["", "int x;"]


def test_following_comments_are_kept_when_separating():
    lines = HEADER + ["// Implementation notes.", "int x;"]
    assert not evaluate(lines, HEADER, SLASH).is_compliant
    assert fix(lines) == HEADER + ["", "// Implementation notes.", "int x;"]


def test_blank_line_after_header_can_be_turned_off():
    lines = HEADER + ["int x;"]
    assert evaluate(lines, HEADER, SLASH, TIGHT).is_compliant
    assert fix(["int x;"], spacing=TIGHT) == HEADER + ["int x;"]
    assert fix(["// old", "int x;"], spacing=TIGHT) == HEADER + ["int x;"]


def test_shebang_is_kept_first():
    lines = ["#!/usr/bin/env python3", "import os"]
    match = evaluate(lines, PY_HEADER, HASH)
    assert match.kind is MatchKind.NEEDS_INSERTION
    assert match.layout.prologue
    fixed = apply(lines, match, PY_HEADER)
    assert fixed == ["#!/usr/bin/env python3", "", *PY_HEADER, "", "import os"]
    assert evaluate(fixed, PY_HEADER, HASH).is_compliant


def test_shebang_only_file():
    fixed = fix(["#!/bin/sh"], PY_HEADER, HASH)
    assert fixed == ["#!/bin/sh", "", *PY_HEADER]


def test_shebang_needs_separator_when_configured():
    lines = ["#!/bin/sh", *PY_HEADER, "", "echo hi"]
    match = evaluate(lines, PY_HEADER, HASH)
    assert match.kind is MatchKind.NEEDS_REPLACEMENT
    assert apply(lines, match, PY_HEADER) == ["#!/bin/sh", "", *PY_HEADER, "", "echo hi"]

    assert evaluate(lines, PY_HEADER, HASH, Spacing(after_prologue=False)).is_compliant


def test_shebang_without_configured_separator():
    spacing = Spacing(after_prologue=False)
    fixed = fix(["#!/bin/sh", "echo hi"], PY_HEADER, HASH, spacing)
    assert fixed == ["#!/bin/sh", *PY_HEADER, "", "echo hi"]
    assert evaluate(fixed, PY_HEADER, HASH, spacing).is_compliant


def test_xml_declaration_stays_first():
    lines = ['<?xml version="1.0"?>', "<svg/>"]
    fixed = fix(lines, XML_HEADER, XML)
    assert fixed == ['<?xml version="1.0"?>', "", *XML_HEADER, "", "<svg/>"]
    assert evaluate(fixed, XML_HEADER, XML).is_compliant


def test_php_open_tag_stays_first():
    lines = ["<?php", "echo 1;"]
    fixed = fix(lines)
    assert fixed == ["<?php", "", *HEADER, "", "echo 1;"]
    assert evaluate(fixed, HEADER, SLASH).is_compliant


def test_is_prologue():
    assert is_prologue("#!/bin/sh")
    assert is_prologue('<?xml version="1.0" encoding="UTF-8"?>')
    assert is_prologue("<?php")
    assert not is_prologue("<?php echo 1; ?>")
    assert not is_prologue("<?xml version=")
    assert not is_prologue("<html>")


def test_header_behind_blank_lines_is_moved_up():
    lines = ["", "", *HEADER, "", "int x;"]
    match = evaluate(lines, HEADER, SLASH)
    assert match.kind is MatchKind.NEEDS_REPLACEMENT
    assert apply(lines, match, HEADER) == HEADER + ["", "int x;"]


def test_leading_blank_lines_before_code_are_dropped():
    assert fix(["", "", "int x;"]) == HEADER + ["", "int x;"]


def test_block_comment_header_is_replaced():
    lines = ["/* Copyright 2001", " * Someone Else", " */", "body {}"]
    match = evaluate(lines, BLOCK_HEADER, C_BLOCK)
    assert match.kind is MatchKind.NEEDS_REPLACEMENT
    assert match.block_end == 3
    assert apply(lines, match, BLOCK_HEADER) == BLOCK_HEADER + ["", "body {}"]


def test_single_line_block_comment():
    lines = ["/* old */", "body {}"]
    assert fix(lines, BLOCK_HEADER, C_BLOCK) == BLOCK_HEADER + ["", "body {}"]


def test_code_after_block_end_is_kept():
    lines = ["/* banner */ body { color: red; }"]
    match = evaluate(lines, BLOCK_HEADER, C_BLOCK)
    assert match.kind is MatchKind.NEEDS_REPLACEMENT
    assert match.tail == "body { color: red; }"
    fixed = apply(lines, match, BLOCK_HEADER)
    assert fixed == BLOCK_HEADER + ["", "body { color: red; }"]
    assert fix(fixed, BLOCK_HEADER, C_BLOCK) == fixed

    lines = ["/* Copyright 2001", "   Someone */ a { }", "b { }"]
    assert fix(lines, BLOCK_HEADER, C_BLOCK) == BLOCK_HEADER + ["", "a { }", "b { }"]


def test_unterminated_block_comment_is_left_alone():
    lines = ["/* not closed", "body {}"]
    match = evaluate(lines, BLOCK_HEADER, C_BLOCK)
    assert match.kind is MatchKind.NEEDS_INSERTION
    assert apply(lines, match, BLOCK_HEADER) == BLOCK_HEADER + ["", "/* not closed", "body {}"]


def test_header_block_end():
    assert header_block_end(["// a", "// b", "x"], 0, SLASH) == 2
    assert header_block_end(["x", "// a"], 0, SLASH) is None
    assert header_block_end([], 0, SLASH) is None
    assert header_block_end(["/*", "a", "*/", "b"], 0, C_BLOCK) == 3
    assert header_block_end(["/**/", "b"], 0, C_BLOCK) == 1
    assert header_block_end(["/*", "a"], 0, C_BLOCK) is None


def test_locate():
    layout = locate(["#!/bin/sh", "", "", "# x"], newline_after_prologue=True)
    assert layout.prologue
    assert layout.prologue_end == 2
    assert layout.content_start == 3
    assert layout.prologue_ok

    layout = locate(["#!/bin/sh", "# x"], newline_after_prologue=True)
    assert layout.prologue_end == 1
    assert not layout.prologue_ok

    layout = locate(["int x;"])
    assert not layout.prologue
    assert layout.prologue_end == layout.content_start == 0


@pytest.mark.parametrize("spacing", [Spacing(), TIGHT])
@pytest.mark.parametrize("lines", [
    [],
    ["int main() { return 0; }"],
    ["", "int x;"],
    ["// Copyright (c) 1999 Org.", "int x;"],
    ["// random comment", "", "int x;"],
    [HEADER[0]],
    HEADER + ["int x;"],
    ["#!/usr/bin/env cc", "int x;"],
    ["#!/usr/bin/env cc", "", "", "// old", "int x;"],
    ["/* c-style */", "int x;"],
])
def test_fix_is_idempotent(lines, spacing):
    once = fix(lines, spacing=spacing)
    assert evaluate(once, HEADER, SLASH, spacing).is_compliant
    assert fix(once, spacing=spacing) == once
