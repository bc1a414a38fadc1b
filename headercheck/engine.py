from __future__ import annotations
from typing import Callable, Dict, Iterable, List
from dataclasses import dataclass, field
from pathlib import Path
import asyncio
import datetime
import logging

from headercheck.authors import AuthorResolver
from headercheck.config import Config
from headercheck.git_blame import BlameProvider, GitBlameProvider
from headercheck.rewriter import FileOutcome, FileRewriter, Operation, Status

logger = logging.getLogger(__name__)


@dataclass
class Report:
    operation: Operation
    outcomes: List[FileOutcome] = field(default_factory=list)

    def counts(self) -> Dict[Status, int]:
        counts = {status: 0 for status in Status}
        for outcome in self.outcomes:
            counts[outcome.status] += 1
        return counts

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.failed]

    @property
    def non_compliant(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if not o.compliant]

    @property
    def exit_code(self) -> int:
        if self.failed:
            return 1
        if self.operation is Operation.LINT and self.non_compliant:
            return 1
        return 0

    def summary(self) -> str:
        counts = self.counts()
        parts = [f"{count} {status.value}" for status, count in counts.items() if count]
        return f"{len(self.outcomes)} files: " + (", ".join(parts) if parts else "nothing to do")


class Engine:
    """
    Runs one operation over a set of files.

    Files are independent, so up to ``workers`` of them are processed at once.
    An interrupted format run keeps the files already written: format is not
    all-or-nothing across the file set.
    """
    def __init__(
        self,
        config: Config,
        provider: BlameProvider | None = None,
        year: int | None = None,
        workers: int | None = None,
    ) -> None:
        self.config = config
        self.year = year or config.year or datetime.date.today().year
        self.workers = config.workers if workers is None else workers
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        self.rewriter = FileRewriter(
            config,
            config.registry(),
            AuthorResolver(provider or GitBlameProvider()),
            self.year,
        )

    async def run_async(
        self,
        paths: Iterable[Path],
        operation: Operation,
        on_outcome: Callable[[FileOutcome], None] | None = None,
    ) -> Report:
        semaphore = asyncio.Semaphore(self.workers)

        async def run_one(path: Path) -> FileOutcome:
            async with semaphore:
                outcome = await asyncio.to_thread(self.rewriter.process, path, operation)
            logger.debug(f"{path}: {outcome.status.value}")
            if on_outcome is not None:
                on_outcome(outcome)
            return outcome

        outcomes = await asyncio.gather(*[run_one(path) for path in paths])
        return Report(operation, list(outcomes))

    def run(self, paths: Iterable[Path], operation: Operation) -> Report:
        return asyncio.run(self.run_async(paths, operation))
