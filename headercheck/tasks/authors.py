from typing import List
from pathlib import Path

from headercheck.authors import AuthorResolver
from headercheck.errors import NoHistory
from headercheck.git_blame import BlameProvider, GitBlameProvider
from headercheck.messages import error, info


def authors_main(paths: List[str], provider: BlameProvider | None = None) -> int:
    """
    Prints line ownership per author and the author a header would get.
    """
    resolver = AuthorResolver(provider or GitBlameProvider())
    exit_code = 0
    for p in paths:
        path = Path(p)
        try:
            stats = resolver.stats(path)
        except NoHistory as e:
            error(str(e))
            exit_code = 1
            continue

        total = sum(s.owned_line_count for s in stats)
        lines = [f"{path} > {stats[0].author_identity}"]
        for stat in stats:
            share = 100.0 * stat.owned_line_count / total
            lines.append(f"  {stat.author_identity}: {stat.owned_line_count} lines ({share:.1f}%)")
        info(*lines)
    return exit_code
