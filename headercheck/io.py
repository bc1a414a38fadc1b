from __future__ import annotations
from typing import Callable, Iterable, List, Sequence, Tuple
from dataclasses import dataclass
from difflib import unified_diff
from pathlib import Path
import logging
import os
import stat
import tempfile

import pathspec

from headercheck.errors import IOFailure

logger = logging.getLogger(__name__)

BOM = "\ufeff"

##################################################################################################
# Source text
##################################################################################################

@dataclass(frozen=True)
class SourceText:
    """
    A file split into lines, remembering what is needed to write it back the
    same way: dominant newline, final newline, UTF-8 BOM.
    """
    lines: Tuple[str, ...]
    newline: str = "\n"
    trailing_newline: bool = True
    bom: bool = False

    @classmethod
    def parse(cls, text: str) -> SourceText:
        bom = text.startswith(BOM)
        if bom:
            text = text[len(BOM):]

        crlf = text.count("\r\n")
        lf = text.count("\n") - crlf
        newline = "\r\n" if crlf > lf else "\n"

        if not text:
            return cls((), newline, True, bom)

        lines = text.replace("\r\n", "\n").split("\n")
        trailing_newline = lines[-1] == ""
        if trailing_newline:
            lines.pop()
        return cls(tuple(lines), newline, trailing_newline, bom)

    def render(self, lines: Sequence[str] | None = None) -> str:
        lines = self.lines if lines is None else lines
        text = self.newline.join(lines)
        if lines and self.trailing_newline:
            text += self.newline
        return (BOM if self.bom else "") + text


##################################################################################################
# File Reading/Writing
##################################################################################################

def read_source(path: Path) -> SourceText:
    assert isinstance(path, Path), f"Expected Path, got {type(path)}"
    try:
        content = path.read_bytes()
    except OSError as e:
        raise IOFailure(path, e.strerror or str(e)) from e
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise IOFailure(path, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
    return SourceText.parse(text)


def write_text_file(path: Path, content: str) -> bool:
    """
    Replaces the file content through a temporary file in the same directory,
    so readers see either the old or the new file and never a truncated one.

    Returns False when the file already holds ``content``.
    """
    assert isinstance(path, Path), f"Expected Path, got {type(path)}"
    content_bytes = content.encode("utf-8")

    try:
        old_bytes = path.read_bytes() if path.exists() else None
        mode = stat.S_IMODE(path.stat().st_mode) if old_bytes is not None else None
    except OSError as e:
        raise IOFailure(path, e.strerror or str(e)) from e

    if old_bytes == content_bytes:
        return False

    if old_bytes is not None:
        old_content = old_bytes.decode("utf-8", errors="replace")
        diff = unified_diff(old_content.splitlines(), content.splitlines(), lineterm='')
        total_added = 0
        total_removed = 0
        for line in diff:
            if line.startswith('+') and not line.startswith('+++'):
                total_added += 1
            elif line.startswith('-') and not line.startswith('---'):
                total_removed += 1
        logger.info(f'Modifying {path}: {total_removed} lines removed, {total_added} lines added')
    else:
        logger.info(f'Writing to {path}')

    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
                "wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False) as f:
            tmp_path = Path(f.name)
            f.write(content_bytes)
            f.flush()
            os.fsync(f.fileno())
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise IOFailure(path, e.strerror or str(e)) from e
    return True


##################################################################################################
# Target files
##################################################################################################

class FileSet:
    """
    Gitignore-style patterns anchored at ``base_path``.
    """
    def __init__(self, base_path: Path, patterns: Iterable[str]):
        self.base_path = base_path.absolute()
        self.patterns = list(patterns)
        self.path_spec = pathspec.GitIgnoreSpec.from_lines(self.patterns)

    def __call__(self, path: Path) -> bool:
        try:
            rel_path = path.absolute().relative_to(self.base_path).as_posix()
        except ValueError:
            return False
        if rel_path == ".":
            return False
        if path.is_dir():
            rel_path += '/'
        return self.path_spec.match_file(rel_path)


def read_ignore_file(path: Path) -> FileSet:
    assert isinstance(path, Path), f"Expected Path, got {type(path)}"

    if not path.exists():
        return FileSet(path.parent, [])

    with open(path, 'rt', encoding='utf-8') as f:
        ignore = [i.strip() for i in f.readlines()]
        ignore = [i for i in ignore if i and not i.startswith("#")]
        return FileSet(path.parent, ignore)


def walk_files(path: Path, ignored: List[FileSet]) -> Iterable[Path]:
    assert isinstance(path, Path), f"Expected Path, got {type(path)}"

    if any(fs(path) for fs in ignored):
        logger.debug(f"Skipping {path}: ignored")
        return

    if path.is_symlink():
        return

    if path.is_file():
        yield path

    elif path.is_dir():
        if path.name == ".git":
            return
        gitignore = path / ".gitignore"
        if gitignore.is_file():
            ignored = ignored + [read_ignore_file(gitignore)]
        for child in sorted(path.iterdir()):
            yield from walk_files(child, ignored)


def collect_targets(
    paths: Iterable[Path],
    supported: Callable[[Path], bool],
    exclude: Sequence[str] = (),
    exclude_base: Path | None = None,
) -> List[Path]:
    """
    Expands the command line paths into the files to process.

    Files named directly are always kept. Files found under a directory are
    kept when ``supported(path)`` is true and neither ``exclude`` nor a
    ``.gitignore`` met on the way ignores them. ``exclude`` patterns are
    anchored at ``exclude_base``, or at each directory given when it is None.
    Order is kept, duplicates dropped.
    """
    targets: List[Path] = []
    seen = set()

    def add(path: Path) -> None:
        key = path.resolve()
        if key not in seen:
            seen.add(key)
            targets.append(path)

    for root in paths:
        if not root.is_dir():
            add(root)
            continue
        ignored = [FileSet(exclude_base or root, exclude)] if exclude else []
        for path in walk_files(root, ignored):
            if supported(path):
                add(path)
    return targets
