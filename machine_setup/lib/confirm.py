from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, Optional, TextIO

logger = logging.getLogger(__name__)

YES = {"y", "yes"}
NO = {"n", "no"}


def _stdin_prompt(message: str) -> Optional[str]:
    try:
        return input(message)
    except EOFError:
        return None


@dataclass(frozen=True)
class ConfirmPolicy:
    """Decides whether a proposed change may be applied.

    ``assume_yes`` is the non-interactive override. Otherwise ``prompt`` is
    asked until it returns a yes/no answer; ``None`` (EOF) counts as no.
    """

    assume_yes: bool = False
    prompt: Callable[[str], Optional[str]] = _stdin_prompt
    stream: TextIO = field(default_factory=lambda: sys.stdout)

    def confirm(self, description: str) -> bool:
        if self.assume_yes:
            logger.debug("Auto-confirming %s", description)
            return True

        message = f"The above changes are made for {description}. Apply changes? (y/n): "
        while True:
            answer = self.prompt(message)
            if answer is None:
                logger.info("No answer for %s; treating as declined", description)
                return False
            answer = answer.strip().lower()
            if answer in YES:
                logger.debug("User confirmed: %s", description)
                return True
            if answer in NO:
                logger.debug("User declined: %s", description)
                return False
            print("Invalid input. Please enter Y or N.", file=self.stream)
