from __future__ import annotations

import difflib
import itertools
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import List, Literal, Optional, Sequence, TextIO

from ..errors import ConfirmationDeclined, PathError, WriteError
from .command import CommandError
from .confirm import ConfirmPolicy
from .privilege import run_elevated
from .textfile import DEFAULT_NEW_FILE_MODE, TextFile

logger = logging.getLogger(__name__)

WriteOutcome = Literal["unchanged", "written", "dry_run"]

_BOLD = "\033[1m"
_GREEN = "\033[92m\033[1m"
_RED = "\033[91m\033[1m"
_RESET = "\033[0m"


def render_diff(original: TextFile, updated: TextFile, *, color: bool = False) -> List[str]:
    """Unified diff (2 lines of context) of the proposed change."""

    out: List[str] = []
    diff = difflib.unified_diff(original.lines, updated.lines, n=2, lineterm="")
    # Drop the ---/+++ file header; hunks start at the first "@@".
    for line in itertools.dropwhile(lambda ln: not ln.startswith("@@"), diff):
        if not color:
            out.append(line)
        elif line.startswith("@@"):
            out.append(f"{_BOLD}{line}{_RESET}")
        elif line.startswith("+"):
            out.append(f"{_GREEN}{line}{_RESET}")
        elif line.startswith("-"):
            out.append(f"{_RED}{line}{_RESET}")
        else:
            out.append(line)
    return out


def show_diff(original: TextFile, updated: TextFile, stream: Optional[TextIO] = None) -> None:
    stream = stream or sys.stdout
    color = bool(getattr(stream, "isatty", lambda: False)())
    print(f"Proposed changes in {original.path}:", file=stream)
    for line in render_diff(original, updated, color=color):
        print(line, file=stream)


def _write_direct(doc: TextFile, text: str) -> None:
    """Write via a temp file in the target directory and rename over it.

    Raises PermissionError untouched so the caller can elevate.
    """

    target = doc.path
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        raise
    except OSError as e:
        raise PathError(f"Cannot create directory {target.parent}: {e}") from e

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp, doc.mode if doc.mode is not None else DEFAULT_NEW_FILE_MODE)
        if doc.uid is not None and doc.gid is not None:
            try:
                os.chown(tmp, doc.uid, doc.gid)
            except PermissionError:
                logger.debug("Cannot preserve ownership of %s", str(target))
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def _write_elevated(doc: TextFile, text: str) -> None:
    """Stage the content privately, then copy and rename it into place as root."""

    target = doc.path
    staging = target.with_name(f".{target.name}.machine-setup.tmp")

    fd, staged_name = tempfile.mkstemp(prefix="machine-setup-", suffix=".tmp")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)

    try:
        try:
            run_elevated(["mkdir", "-p", str(target.parent)])
        except CommandError as e:
            raise PathError(f"Cannot create directory {target.parent}: {e}") from e

        try:
            run_elevated(["cp", staged_name, str(staging)])
            if doc.exists:
                run_elevated(["chmod", f"--reference={target}", str(staging)])
                run_elevated(["chown", f"--reference={target}", str(staging)])
            else:
                run_elevated(["chmod", format(DEFAULT_NEW_FILE_MODE, "o"), str(staging)])
            run_elevated(["mv", "-f", str(staging), str(target)])
        except CommandError as e:
            run_elevated(["rm", "-f", str(staging)], check=False)
            raise WriteError(f"Elevated write to {target} failed: {e}") from e
    finally:
        Path(staged_name).unlink(missing_ok=True)


def write_text_file(doc: TextFile) -> None:
    """Atomically replace ``doc.path`` with ``doc``'s rendered content."""

    text = doc.render()
    try:
        _write_direct(doc, text)
        return
    except PermissionError:
        logger.info("Permission denied writing %s; retrying with elevated privileges", str(doc.path))
    except OSError as e:
        raise WriteError(f"Cannot write {doc.path}: {e}") from e

    try:
        _write_elevated(doc, text)
    except OSError as e:
        raise WriteError(f"Cannot stage content for {doc.path}: {e}") from e


def apply_change(
    original: TextFile,
    new_lines: Sequence[str],
    description: str,
    policy: ConfirmPolicy,
    *,
    dry_run: bool = False,
    stream: Optional[TextIO] = None,
) -> WriteOutcome:
    """Confirm and persist a computed line sequence.

    Unchanged content never prompts and never touches the file. A declined
    confirmation raises ConfirmationDeclined and leaves the file as it was.
    """

    updated = original.with_lines(new_lines)
    if updated.lines == original.lines:
        logger.info("%s: No change proposed", description)
        return "unchanged"

    show_diff(original, updated, stream=stream)

    if dry_run:
        logger.info("Would write %s (%s)", str(original.path), description)
        return "dry_run"

    if not policy.confirm(description):
        logger.info("Changes declined for %s", description)
        raise ConfirmationDeclined(description)

    write_text_file(updated)
    logger.info("Changes applied for %s", description)
    return "written"
