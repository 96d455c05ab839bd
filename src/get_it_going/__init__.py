__version__ = "0.2.0"

from .app_config import (
    AppConfig,
    Command,
    Executable,
    Fallback,
    PrependFolder,
    ScriptPath,
    SubcommandOf,
)
from .command_executor import CommandExecutor
from .command_spec import CommandSpec
from .compose import compose_before_run, compose_fallback, compose_run, strip_search_path
from .dispatcher import DispatchState, Dispatcher, exit_code_from_returncode
from .exceptions import (
    BeforeRunFailedError,
    ConfigNotFoundError,
    ConfigValidationError,
    GetItGoingError,
    IdentityError,
    RootNotFoundError,
    SpawnError,
)
from .identity import LaunchContext, resolve_identity
from .load_config import find_and_load, load_config, locate_config, parse_config
from .local_subprocess_executor import LocalSubprocessExecutor
from .logging_config import disable_logging, setup_logging
from .root import resolve_root

__all__ = [
    # Version
    "__version__",
    # Configuration
    "AppConfig",
    "Command",
    "ScriptPath",
    "SubcommandOf",
    "PrependFolder",
    "Executable",
    "Fallback",
    "find_and_load",
    "load_config",
    "locate_config",
    "parse_config",
    # Resolution & composition
    "LaunchContext",
    "resolve_identity",
    "resolve_root",
    "CommandSpec",
    "compose_before_run",
    "compose_run",
    "compose_fallback",
    "strip_search_path",
    # Dispatch
    "Dispatcher",
    "DispatchState",
    "exit_code_from_returncode",
    # Executors
    "CommandExecutor",
    "LocalSubprocessExecutor",
    # Logging
    "setup_logging",
    "disable_logging",
    # Exceptions
    "GetItGoingError",
    "IdentityError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "RootNotFoundError",
    "SpawnError",
    "BeforeRunFailedError",
]
