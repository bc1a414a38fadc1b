#!python3 -X utf8

from typing import List
import sys
import os
import argparse
import logging

##################################################################################################
# Main
##################################################################################################

DEFAULT_CONFIG = "headercheck.toml"


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check and fix license headers.")
    parser.add_argument('--quiet', '-q', action='store_true', help='No output, only the exit status.')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging.')
    parser.add_argument('--config', '-c', type=str, default=DEFAULT_CONFIG,
                        help=f'Path to the config TOML (default: {DEFAULT_CONFIG}).')
    parser.add_argument('--workers', '-j', type=positive_int, default=None,
                        help='Number of files processed at once (default: from config).')

    subparsers = parser.add_subparsers(dest='command')

    cmd = subparsers.add_parser('lint', help='Report files whose header is missing or stale.')
    cmd.add_argument('paths', type=str, nargs='+', help='Files or directories to check.')

    cmd = subparsers.add_parser('format', help='Insert or replace headers in place.')
    cmd.add_argument('paths', type=str, nargs='+', help='Files or directories to fix.')

    cmd = subparsers.add_parser('authors', help='Show line ownership used to pick the author.')
    cmd.add_argument('paths', type=str, nargs='+', help='Files to attribute.')

    return parser


async def main(argv: List[str] | None = None) -> int:
    if sys.platform.lower() == "win32":
        os.system('color')
        os.system('chcp 65001 > nul')
        sys.stdout.reconfigure(encoding='utf-8') # type: ignore
        sys.stderr.reconfigure(encoding='utf-8') # type: ignore

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 2

    if args.quiet:      level = logging.ERROR
    elif args.verbose:  level = logging.DEBUG
    else:               level = logging.INFO
    logging.basicConfig(level=level, format='%(message)s')
    # GitPython logs every command it runs at DEBUG
    logging.getLogger("git").setLevel(logging.INFO)

    match args.command:
        case 'lint' | 'format':
            from headercheck.rewriter import Operation
            from headercheck.tasks.headers import headers_main
            return await headers_main(
                Operation(args.command),
                args.paths,
                args.config,
                workers=args.workers,
                quiet=args.quiet)

        case 'authors':
            from headercheck.tasks.authors import authors_main
            return authors_main(args.paths)

        case _:
            raise ValueError(f"Unknown command: {args.command}")

if __name__ == '__main__':
    import asyncio
    sys.exit(asyncio.run(main()))
