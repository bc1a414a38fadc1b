from __future__ import annotations
from typing import List
from pathlib import Path
import logging

from headercheck.config import load_config
from headercheck.engine import Engine, Report
from headercheck.errors import ConfigurationError
from headercheck.git_blame import BlameProvider
from headercheck.io import collect_targets
from headercheck.messages import error, info, success, warning
from headercheck.rewriter import FileOutcome, Operation, Status

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_CONFIG_ERROR = 2


def report(outcome: FileOutcome) -> None:
    if outcome.issue is not None:
        msg = str(outcome.issue)
    else:
        msg = f"{outcome.path} > {outcome.detail or outcome.status.value}"

    match outcome.status:
        case Status.COMPLIANT:
            success(f"{outcome.path} > compliant")
        case Status.INSERTED | Status.REPLACED:
            info(msg)
        case Status.SKIPPED:
            warning(msg)
        case Status.FAILED:
            error(msg)


def report_summary(report_: Report) -> None:
    summary = report_.summary()
    if report_.exit_code == EXIT_OK:
        success(summary)
    else:
        error(summary)


async def headers_main(
    operation: Operation,
    paths: List[str],
    config_path: str,
    workers: int | None = None,
    quiet: bool = False,
    provider: BlameProvider | None = None,
) -> int:
    """
    Lints or formats ``paths``; returns the process exit code.
    """
    try:
        config = load_config(Path(config_path))
    except ConfigurationError as e:
        if not quiet:
            error(f"Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR

    registry = config.registry()
    targets = collect_targets(
        [Path(p) for p in paths], registry.supports, config.exclude, exclude_base=Path(config_path).parent)
    if not targets:
        if not quiet:
            warning("No files to process.")
        return EXIT_OK

    logger.debug(f"{len(targets)} files; known extensions: {', '.join(registry.extensions)}")

    engine = Engine(config, provider=provider, workers=workers)
    result = await engine.run_async(targets, operation)

    if not quiet:
        for outcome in result.outcomes:
            report(outcome)
        report_summary(result)
    return result.exit_code
