"""Root logger setup for the machine-setup CLI.

Applied, declined and failed edits are all logged, so the log file doubles as
an audit trail of what a provisioning run changed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "~/.local/state/machine-setup/machine-setup.log"
FALLBACK_LOG_NAME = "machine-setup.log"

FILE_HANDLER_NAME = "machine-setup-file"
CONSOLE_HANDLER_NAME = "machine-setup-console"

_FILE_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)
_CONSOLE_FORMAT = logging.Formatter("[%(levelname)s][%(name)s] %(message)s")


def _parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _find_handler(root: logging.Logger, name: str) -> Optional[logging.Handler]:
    return next((h for h in root.handlers if h.get_name() == name), None)


def _open_log_file(requested: Path) -> logging.FileHandler:
    try:
        requested.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(requested, encoding="utf-8")
    except OSError:
        return logging.FileHandler(Path.cwd() / FALLBACK_LOG_NAME, encoding="utf-8")


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int | str = logging.INFO,
    also_console: bool = True,
) -> str:
    """Attach the log file (and a stderr console) to the root logger.

    A log directory that cannot be created or written sends the log to
    ``machine-setup.log`` in the working directory instead. Repeated calls
    only update the level and keep the file chosen first.

    Returns the path of the log file in use.
    """

    root = logging.getLogger()
    root.setLevel(_parse_level(level))

    installed = _find_handler(root, FILE_HANDLER_NAME)
    if isinstance(installed, logging.FileHandler):
        return installed.baseFilename

    requested = Path(log_path).expanduser()
    file_handler = _open_log_file(requested)
    file_handler.set_name(FILE_HANDLER_NAME)
    file_handler.setFormatter(_FILE_FORMAT)
    root.addHandler(file_handler)

    # stderr keeps stdout free for diffs and prompts.
    if also_console and _find_handler(root, CONSOLE_HANDLER_NAME) is None:
        console = logging.StreamHandler()
        console.set_name(CONSOLE_HANDLER_NAME)
        console.setFormatter(_CONSOLE_FORMAT)
        root.addHandler(console)

    chosen = file_handler.baseFilename
    logging.getLogger(__name__).debug("Logging to %s (requested %s)", chosen, str(requested))
    return chosen
