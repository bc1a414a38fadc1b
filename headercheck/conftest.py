from typing import List, Tuple
from pathlib import Path
import threading

import pytest

from headercheck.errors import NoHistory
from headercheck.git_blame import BlameProvider


class FakeBlameProvider(BlameProvider):
    """
    Blame provider returning canned entries; ``None`` means no history.
    """
    def __init__(self, entries: List[Tuple[int, str]] | None = None) -> None:
        self.entries = entries
        self.calls = 0
        self._lock = threading.Lock()

    @classmethod
    def owning(cls, *owners: Tuple[str, int]) -> 'FakeBlameProvider':
        entries: List[Tuple[int, str]] = []
        for name, count in owners:
            for _ in range(count):
                entries.append((len(entries), name))
        return cls(entries)

    def blame(self, path: Path) -> List[Tuple[int, str]]:
        with self._lock:
            self.calls += 1
        if self.entries is None:
            raise NoHistory(path)
        return list(self.entries)


@pytest.fixture
def fake_blame():
    return FakeBlameProvider
