from __future__ import annotations
from typing import Tuple
from dataclasses import dataclass
from pathlib import Path
import enum
import logging

from headercheck.authors import AuthorResolver
from headercheck.config import Config
from headercheck.errors import IOFailure, NoHistory, UnsupportedFileType
from headercheck.io import SourceText, read_source, write_text_file
from headercheck.issues import (
    E_HEADER_MISMATCH, E_IO_FAILURE, E_MISSING_HEADER, E_UNSUPPORTED_FILE_TYPE, Issue,
)
from headercheck.matcher import Match, MatchKind, apply, evaluate, locate
from headercheck.syntax import CommentSyntax, CommentSyntaxRegistry
from headercheck.template import ResolvedHeader, detect_author, render

logger = logging.getLogger(__name__)


class Operation(enum.Enum):
    LINT = "lint"
    FORMAT = "format"


class Status(enum.Enum):
    COMPLIANT = "compliant"
    INSERTED = "inserted"
    REPLACED = "replaced"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class FileOutcome:
    path: Path
    status: Status
    detail: str = ""
    issue: Issue | None = None

    @property
    def compliant(self) -> bool:
        return self.status is Status.COMPLIANT

    @property
    def failed(self) -> bool:
        return self.status is Status.FAILED


class FileRewriter:
    """
    Lints or formats one file at a time.

    The check runs in two phases. ``check`` is cheap: it takes the author
    already written in the header (if any) and compares text only.
    ``resolve_header`` asks version control for the real author and is only
    reached when a header has to be written.
    """
    def __init__(self, config: Config, registry: CommentSyntaxRegistry, resolver: AuthorResolver, year: int) -> None:
        self.config = config
        self.registry = registry
        self.resolver = resolver
        self.year = year

    def process(self, path: Path, operation: Operation) -> FileOutcome:
        try:
            return self._process(path, operation)
        except UnsupportedFileType as e:
            issue = E_UNSUPPORTED_FILE_TYPE.make(extension=e.extension).at(path)
            return FileOutcome(path, Status.FAILED, issue.describe(), issue)
        except IOFailure as e:
            issue = E_IO_FAILURE.make(reason=e.reason).at(path)
            return FileOutcome(path, Status.FAILED, issue.describe(), issue)

    def _process(self, path: Path, operation: Operation) -> FileOutcome:
        syntax = self.registry.lookup(path)
        source = read_source(path)

        match, header = self.check(source, syntax)
        if match.is_compliant:
            return FileOutcome(path, Status.COMPLIANT)

        if operation is Operation.LINT:
            issue = self._diagnose(path, source, match, header)
            return FileOutcome(path, Status.SKIPPED, issue.describe(), issue)

        header = self.resolve_header(path, syntax)
        match = evaluate(source.lines, header.rendered_lines, syntax, self.config.spacing)
        if match.is_compliant:
            return FileOutcome(path, Status.COMPLIANT)

        new_lines = apply(source.lines, match, header.rendered_lines, self.config.spacing)
        write_text_file(path, source.render(new_lines))

        if match.kind is MatchKind.NEEDS_INSERTION:
            return FileOutcome(path, Status.INSERTED, "header inserted")
        return FileOutcome(path, Status.REPLACED, "header replaced")

    def check(self, source: SourceText, syntax: CommentSyntax) -> Tuple[Match, ResolvedHeader]:
        """
        Text-only comparison; never queries authorship.
        """
        layout = locate(source.lines, self.config.newline_after_shebang)
        author = detect_author(
            self.config.template, syntax, self.year, self.config.variables,
            source.lines[layout.content_start:])
        header = self.render(syntax, author or self.config.fallback_author)
        return evaluate(source.lines, header.rendered_lines, syntax, self.config.spacing), header

    def resolve_header(self, path: Path, syntax: CommentSyntax) -> ResolvedHeader:
        return self.render(syntax, self.resolve_author(path))

    def resolve_author(self, path: Path) -> str:
        if not self.config.template.uses_author:
            return self.config.fallback_author
        try:
            return self.resolver.resolve(path)
        except NoHistory as e:
            logger.warning(f"{e}; using fallback author {self.config.fallback_author!r}")
            return self.config.fallback_author

    def render(self, syntax: CommentSyntax, author: str) -> ResolvedHeader:
        return render(self.config.template, syntax, author, self.year, self.config.variables)

    def _diagnose(self, path: Path, source: SourceText, match: Match, header: ResolvedHeader) -> Issue:
        line = match.mismatch_line
        if match.kind is MatchKind.NEEDS_INSERTION:
            return E_MISSING_HEADER.make(action=match.kind.value).at(path, line=(line or 0) + 1)

        offset = (line or 0) - match.layout.content_start
        if 0 <= offset < len(header):
            expected = header.rendered_lines[offset]
        elif offset == len(header):
            expected = ""    # blank line after the header
        else:
            expected = None
        found = source.lines[line] if line is not None and line < len(source.lines) else None
        return E_HEADER_MISMATCH.make(action=match.kind.value, expected=expected, found=found).at(
            path, line=None if line is None else line + 1)
