from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import BinaryIO, TextIO

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # <3.11

from .app_config import AppConfig, Fallback, before_run_from_table, run_from_table
from .exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

APP_DIR_NAME = "get-it-going"


# =====================================================================
#   Locating
# =====================================================================
def system_config_directory(platform: str | None = None) -> Path:
    """Machine-wide directory holding `<identity>.toml` files."""
    platform = sys.platform if platform is None else platform
    if platform.startswith("win"):
        base = Path("C:\\Program Files\\Common Files")
    elif platform == "darwin":
        base = Path("/Library/Application Support")
    else:
        base = Path("/etc")
    return base / APP_DIR_NAME


def config_search_path(cwd: Path) -> list[Path]:
    """Directories probed for a config file, in priority order."""
    return [cwd, system_config_directory()]


def locate_config(identity: str, search_dirs: list[Path]) -> Path | None:
    """
    Return the first `<identity>.toml` found in search_dirs, or None.

    Each directory is probed directly; nothing is listed.
    """
    config_name = f"{identity}.toml"
    for directory in search_dirs:
        config_file = directory / config_name
        logger.debug(f"checking if {config_file} exists")
        if config_file.exists():
            logger.info(f"found {config_file}")
            return config_file
    return None


# =====================================================================
#   Parsing
# =====================================================================
_TOP_LEVEL_KEYS = {"required_files", "search_parents", "before_run", "run", "fallback", "detach"}


def config_from_dict(data: dict, base_dir: Path) -> AppConfig:
    """
    Build an AppConfig from an already-parsed TOML document.

    Relative script paths in [before_run] resolve against base_dir.
    """
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigValidationError(f'unrecognised top-level key "{unknown[0]}"')
    for required in ("before_run", "run"):
        if required not in data:
            raise ConfigValidationError(f"missing [{required}] table")

    # ────── Polymorphic tables ──────
    before_run = before_run_from_table(data["before_run"], base_dir)
    run = run_from_table(data["run"])

    # ────── Optional [fallback] ──────
    fallback = None
    if "fallback" in data:
        fallback_dict = data["fallback"]
        if not isinstance(fallback_dict, dict):
            raise ConfigValidationError("fallback must be a table")
        try:
            fallback = Fallback(**fallback_dict)
        except TypeError as e:
            raise ConfigValidationError(f"Invalid config in [fallback]: {e}") from None

    config = AppConfig(
        before_run=before_run,
        run=run,
        required_files=data.get("required_files", []),
        search_parents=data.get("search_parents", False),
        fallback=fallback,
        detach=data.get("detach", False),
    )
    logger.debug(
        f"Parsed config (before_run={type(before_run).__name__}, run={type(run).__name__}, "
        f"required_files={config.required_files}, search_parents={config.search_parents}, "
        f"fallback={'yes' if fallback else 'no'})"
    )
    config.lint()
    return config


def parse_config(text: str, base_dir: Path | None = None) -> AppConfig:
    """Parse TOML text into an AppConfig."""
    try:
        data = tomli.loads(text)
    except tomli.TOMLDecodeError as e:
        raise ConfigValidationError(f"invalid TOML: {e}") from None
    return config_from_dict(data, base_dir or Path.cwd())


# =====================================================================
#   Main loader
# =====================================================================
def load_config(path: str | Path | BinaryIO | TextIO) -> AppConfig:
    """
    Load and validate a TOML config file into an AppConfig.
    Resolves a relative `script_path` relative to the config file location.
    """
    if hasattr(path, "read"):
        raw = path.read()  # type: ignore
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        return parse_config(text)

    config_path = Path(path).resolve()
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigValidationError(f"couldn't read {config_path}: {e}") from None

    try:
        return parse_config(text, base_dir=config_path.parent)
    except ConfigValidationError as e:
        raise ConfigValidationError(f"{config_path}: {e}") from None


def find_and_load(identity: str, cwd: Path) -> AppConfig:
    """Locate `<identity>.toml` and load it, failing if there isn't one."""
    search_dirs = config_search_path(cwd)
    config_file = locate_config(identity, search_dirs)
    if config_file is None:
        raise ConfigNotFoundError(f"{identity}.toml", search_dirs)
    return load_config(config_file)
