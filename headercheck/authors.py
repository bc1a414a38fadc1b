from __future__ import annotations
from typing import Dict, List
from dataclasses import dataclass
from pathlib import Path
import logging

from headercheck.errors import NoHistory
from headercheck.git_blame import BlameProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class BlameStat:
    author_identity: str
    owned_line_count: int

    def __str__(self) -> str:
        return f"{self.author_identity}: {self.owned_line_count} lines"


class AuthorResolver:
    """
    Picks the author owning the most lines of a file.

    Ties go to the author seen first when walking the file top to bottom, so
    unchanged history always gives the same answer.
    """
    def __init__(self, provider: BlameProvider) -> None:
        self.provider = provider

    def stats(self, path: Path) -> List[BlameStat]:
        counts: Dict[str, int] = {}
        for _, author in sorted(self.provider.blame(path), key=lambda entry: entry[0]):
            if not author:
                continue
            counts[author] = counts.get(author, 0) + 1

        if not counts:
            raise NoHistory(path, "no attributable lines")

        first_seen = {author: i for i, author in enumerate(counts)}
        return sorted(
            (BlameStat(author, count) for author, count in counts.items()),
            key=lambda s: (-s.owned_line_count, first_seen[s.author_identity]))

    def resolve(self, path: Path) -> str:
        stats = self.stats(path)
        logger.debug(f"{path}: " + ", ".join(str(s) for s in stats))
        return stats[0].author_identity
