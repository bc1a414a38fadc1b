from __future__ import annotations
from typing import List, Tuple, TypeAlias
from pathlib import Path
import abc
import logging

import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from headercheck.errors import NoHistory

logger = logging.getLogger(__name__)

BlameLine: TypeAlias = Tuple[int, str]


class BlameProvider(abc.ABC):
    @abc.abstractmethod
    def blame(self, path: Path) -> List[BlameLine]:
        """
        One ``(line_index, author_identity)`` pair for every line of the file
        as of the current checkout. Raises NoHistory when there is none.
        """
        raise NotImplementedError()


class GitBlameProvider(BlameProvider):
    """
    Line authorship from ``git blame`` at ``rev``. The author identity is the
    commit author's name.
    """
    def __init__(self, rev: str = "HEAD") -> None:
        self.rev = rev

    def blame(self, path: Path) -> List[BlameLine]:
        path = path.resolve()
        try:
            repo = git.Repo(path.parent, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NoHistory(path, "not inside a git repository") from e

        try:
            if repo.working_tree_dir is None:
                raise NoHistory(path, "bare repository")
            rel_path = path.relative_to(Path(repo.working_tree_dir).resolve()).as_posix()
            logger.debug(f"git blame {self.rev} -- {rel_path}")
            entries = repo.blame(self.rev, rel_path)
        except GitCommandError as e:
            stderr = (e.stderr or "").strip().removeprefix("stderr: ").strip("'\n ")
            raise NoHistory(path, stderr or f"git blame failed with status {e.status}") from e
        finally:
            repo.close()

        result: List[BlameLine] = []
        for commit, lines in entries or []:
            name = commit.author.name or commit.author.email or ""
            for _ in lines:
                result.append((len(result), name))

        if not result:
            raise NoHistory(path, f"no committed lines at {self.rev}")
        return result
