# get_it_going/cli.py
"""
Console entry point.

The launcher has no flags of its own: every argument after the program
name is forwarded to the wrapped tool.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Sequence

from .dispatcher import Dispatcher
from .exceptions import GetItGoingError, IdentityError
from .identity import DEFAULT_IDENTITY, LaunchContext
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def main(argv: Sequence[str] | None = None) -> int:
    try:
        context = LaunchContext.from_environment(argv)
    except IdentityError as e:
        setup_logging(DEFAULT_IDENTITY)
        logger.error(f"unable to launch: {e}")
        return EXIT_FAILURE

    setup_logging(context.identity)
    try:
        return asyncio.run(Dispatcher(context).dispatch())
    except GetItGoingError as e:
        logger.error(f"unable to launch {context.identity}: {e}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


def run() -> None:
    sys.exit(main())
