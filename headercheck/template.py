from __future__ import annotations
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Sequence, Tuple
from dataclasses import dataclass
import re
import string

from headercheck.errors import ConfigurationError
from headercheck.syntax import CommentSyntax

AUTHOR = "author"
YEAR = "year"
BUILTIN_PLACEHOLDERS: FrozenSet[str] = frozenset({AUTHOR, YEAR})

# Private-use code points; never produced by a real template or config value.
_AUTHOR_SENTINEL = "\ue000author\ue000"


@dataclass(frozen=True)
class LicenseTemplate:
    lines: Tuple[str, ...]

    @classmethod
    def parse(cls, raw: str | Sequence[str], variables: Iterable[str] = ()) -> LicenseTemplate:
        """
        Builds a template from a multi-line string or a list of lines.

        Leading and trailing blank lines are dropped. Every placeholder must be
        ``year``, ``author`` or one of ``variables``.
        """
        if isinstance(raw, str):
            lines = raw.replace("\r\n", "\n").split("\n")
        elif isinstance(raw, (list, tuple)) and all(isinstance(line, str) for line in raw):
            lines = list(raw)
        else:
            raise ConfigurationError("Expected a string or a list of strings", key="template")

        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines:
            raise ConfigurationError("Template is empty", key="template")

        allowed = BUILTIN_PLACEHOLDERS | frozenset(variables)
        for line in lines:
            for name in _placeholders(line):
                if name not in allowed:
                    raise ConfigurationError(
                        f"Unknown placeholder {{{name}}} in {line!r}; "
                        f"known placeholders: {', '.join(sorted(allowed))}",
                        key="template")

        return cls(tuple(lines))

    @property
    def placeholders(self) -> FrozenSet[str]:
        return frozenset(name for line in self.lines for name in _placeholders(line))

    @property
    def uses_author(self) -> bool:
        return AUTHOR in self.placeholders

    def substitute(self, author: str, year: int, variables: Mapping[str, str] | None = None) -> List[str]:
        values: Dict[str, Any] = dict(variables or {})
        values[AUTHOR] = author
        values[YEAR] = year
        return [line.format_map(values) for line in self.lines]


def _placeholders(line: str) -> List[str]:
    try:
        fields = [name for _, name, _, _ in string.Formatter().parse(line) if name is not None]
    except ValueError as e:
        raise ConfigurationError(f"Malformed template line {line!r}: {e}", key="template")
    for name in fields:
        if not name.isidentifier():
            raise ConfigurationError(
                f"Placeholders must be plain names, got {{{name}}} in {line!r}", key="template")
    return fields


@dataclass(frozen=True)
class ResolvedHeader:
    rendered_lines: Tuple[str, ...]
    syntax: CommentSyntax

    def __len__(self) -> int:
        return len(self.rendered_lines)


def wrap(lines: Sequence[str], syntax: CommentSyntax) -> List[str]:
    """
    Puts text lines inside comments: every line prefixed when the syntax has a
    line prefix, otherwise one block around the whole text.
    """
    if syntax.line_prefix is not None:
        prefix = syntax.line_prefix
        return [f"{prefix} {line}" if line else prefix for line in lines]
    return [syntax.block_start, *lines, syntax.block_end]


def render(
    template: LicenseTemplate,
    syntax: CommentSyntax,
    author: str,
    year: int,
    variables: Mapping[str, str] | None = None,
) -> ResolvedHeader:
    text = template.substitute(author, year, variables)
    return ResolvedHeader(tuple(wrap(text, syntax)), syntax)


def detect_author(
    template: LicenseTemplate,
    syntax: CommentSyntax,
    year: int,
    variables: Mapping[str, str] | None,
    body: Sequence[str],
) -> str | None:
    """
    Reads the author out of an existing header, assuming every other part of
    the header is already right. ``body`` starts where the header should be.

    Returns None when the template has no author or the line does not fit.
    """
    if not template.uses_author:
        return None

    marked = render(template, syntax, _AUTHOR_SENTINEL, year, variables)
    for index, line in enumerate(marked.rendered_lines):
        if _AUTHOR_SENTINEL not in line:
            continue
        if index >= len(body):
            return None
        match = author_pattern(line).fullmatch(body[index])
        return match.group(AUTHOR) if match else None
    return None


def author_pattern(line: str) -> re.Pattern[str]:
    """
    Regex for a line rendered with the author sentinel: the first sentinel
    captures the author, later ones must repeat it.
    """
    first, *rest = re.escape(line).split(re.escape(_AUTHOR_SENTINEL))
    pattern = first
    for i, part in enumerate(rest):
        pattern += (f"(?P<{AUTHOR}>.+?)" if i == 0 else f"(?P={AUTHOR})") + part
    return re.compile(pattern)
