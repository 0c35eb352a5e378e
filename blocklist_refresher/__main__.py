"""
Entry point for the blocklist refresher.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .application.domain import ChildInvocation
from .application.exceptions import RefresherError
from .infrastructure.containers import Container

logger = logging.getLogger(__name__)


def setup_logging(level: str, fmt: str):
    """Applies basic logging configuration."""
    logging.basicConfig(level=level, format=fmt)


def resolve_install_dir(
    cli_directory: Optional[str], configured: str
) -> Path:
    """The -d option wins over the configured directory, then the cwd."""
    if cli_directory:
        return Path(cli_directory)
    if configured:
        return Path(configured)
    return Path(os.getcwd())


def command_argv(remainder: List[str]) -> List[str]:
    """Strips the separator between our options and the wrapped command."""
    if remainder and remainder[0] == "--":
        return remainder[1:]
    return remainder


async def run_application(
    args: argparse.Namespace, container: Optional[Container] = None
):
    """Wires and runs the application using the DI container."""

    container = container or Container()

    try:
        logging_settings = container.logging_settings()
        setup_logging(logging_settings.level, logging_settings.format)

        install_dir = resolve_install_dir(
            args.directory, container.path_settings().install_dir
        )
        container.cli_args.from_dict({"install_dir": str(install_dir)})
        refresher_service = container.refresher_service()

        invocation = ChildInvocation.from_argv(command_argv(args.command))
        await refresher_service.run(invocation)
    except RefresherError as e:
        logger.error(f"An application error occurred: {e}")
        sys.exit(e.exit_code)
    finally:
        await container.http_client().aclose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blocklist-refresher",
        description=(
            "Refresh the domains and hostnames blocklists, "
            "then optionally run a command."
        ),
    )

    parser.add_argument(
        "-d",
        "--directory",
        default=None,
        help="Directory the blocklists are installed in (default: cwd).",
    )

    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command (and its arguments) to run after a successful refresh.",
    )

    return parser


def main(argv: Optional[List[str]] = None):
    cli_args = build_parser().parse_args(argv)
    asyncio.run(run_application(cli_args))


if __name__ == "__main__":
    main()
