from __future__ import annotations

import logging
import os
from typing import Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

SUDO_ARGV = ("sudo", "-E")


def is_root() -> bool:
    return os.geteuid() == 0


def elevated_argv(argv: Sequence[str]) -> list[str]:
    """Prefix ``argv`` with sudo unless we already run as root.

    ``-E`` keeps the caller's environment (proxy variables, HOME) visible to
    the elevated command.
    """

    if is_root():
        return list(argv)
    return [*SUDO_ARGV, *argv]


def run_elevated(argv: Sequence[str], *, check: bool = True, dry_run: bool = False) -> CmdResult:
    if is_root():
        logger.debug("Already running as root, executing directly")
    return run_cmd(elevated_argv(argv), check=check, dry_run=dry_run)
