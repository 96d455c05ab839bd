# get_it_going/root.py
"""
Decides where the wrapped tool should run from.

A directory qualifies as the root when every required file, joined onto
it, exists (files and directories count alike). With search_parents the
working directory is tried first, then each ancestor up to the filesystem
root, and the nearest match wins.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .app_config import AppConfig

logger = logging.getLogger(__name__)


def files_exist_in(directory: Path, required_files: list[str]) -> bool:
    return all((directory / name).exists() for name in required_files)


def resolve_root(config: AppConfig, cwd: Path) -> Path | None:
    """
    Return the directory to run from, or None if no valid root exists.

    Args:
        config: Parsed launcher configuration
        cwd: Working directory the launcher was started in

    Returns:
        cwd itself when there are no required files, or when they are all
        present in cwd; the nearest qualifying ancestor when search_parents
        is set; otherwise None.
    """
    if not config.required_files:
        return cwd

    if files_exist_in(cwd, config.required_files):
        logger.debug(f"required files found in {cwd}")
        return cwd

    if not config.search_parents:
        logger.debug(f"required files missing from {cwd} and search_parents is off")
        return None

    for parent in cwd.parents:
        logger.debug(f"checking {parent} for required files")
        if files_exist_in(parent, config.required_files):
            logger.debug(f"required files found in {parent}")
            return parent

    logger.debug(f"no directory between {cwd} and the filesystem root has the required files")
    return None
