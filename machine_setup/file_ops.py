"""Idempotent insertion and removal of titled blocks in config files.

A block is a title line plus the content lines that should (or should not)
appear in the section that title owns. ``insert``/``remove`` raise on failure;
``safe_insert``/``safe_remove`` are the entry points for setup modules and
return an exit status instead.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, TextIO

from .errors import AmbiguousTitle, BlockEditError, ConfirmationDeclined
from .lib.blocks import EditResult, insert_block, locate, remove_block
from .lib.confirm import ConfirmPolicy
from .lib.textfile import TextFile, read_text_file
from .lib.writer import WriteOutcome, apply_change
from .settings import EditorSettings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_DECLINED = 2


def _check_title(doc: TextFile, title: str, settings: EditorSettings) -> None:
    section = locate(doc.lines, title, settings.title_rule)
    if section.occurrences <= 1:
        return
    if settings.strict_titles:
        raise AmbiguousTitle(title, section.occurrences)
    logger.warning(
        "Title line occurs %d times in %s; editing the first one: %s",
        section.occurrences,
        str(doc.path),
        title,
    )


def insert(
    path: str | Path,
    title: str,
    content: Sequence[str],
    *,
    description: Optional[str] = None,
    settings: Optional[EditorSettings] = None,
    policy: Optional[ConfirmPolicy] = None,
    stream: Optional[TextIO] = None,
) -> WriteOutcome:
    settings = settings or EditorSettings()
    description = description or f"insert {title!r} into {path}"

    doc = read_text_file(path)
    _check_title(doc, title, settings)

    result: EditResult = insert_block(doc.lines, title, content, settings.title_rule)
    logger.debug("Insert into %s: %d line(s) added", str(doc.path), len(result.added))
    return apply_change(
        doc,
        result.lines,
        description,
        policy or settings.confirm_policy(),
        dry_run=settings.dry_run,
        stream=stream,
    )


def remove(
    path: str | Path,
    title: str,
    content: Sequence[str],
    *,
    description: Optional[str] = None,
    settings: Optional[EditorSettings] = None,
    policy: Optional[ConfirmPolicy] = None,
    stream: Optional[TextIO] = None,
) -> WriteOutcome:
    settings = settings or EditorSettings()
    description = description or f"remove {title!r} from {path}"

    doc = read_text_file(path)
    if not doc.exists:
        logger.info("%s: File doesn't exist, nothing to remove", description)
        return "unchanged"
    _check_title(doc, title, settings)

    result = remove_block(doc.lines, title, content, settings.title_rule)
    logger.debug("Remove from %s: %d line(s) removed", str(doc.path), len(result.removed))
    return apply_change(
        doc,
        result.lines,
        description,
        policy or settings.confirm_policy(),
        dry_run=settings.dry_run,
        stream=stream,
    )


def _status(op: str, description: str, fn, /, *args, **kwargs) -> int:
    try:
        fn(*args, **kwargs)
    except ConfirmationDeclined:
        return EXIT_DECLINED
    except BlockEditError as e:
        logger.error("%s failed for %s: %s", op, description, e)
        return EXIT_FAILED
    return EXIT_OK


def safe_insert(
    description: str,
    path: str | Path,
    title: str,
    *content: str,
    settings: Optional[EditorSettings] = None,
    policy: Optional[ConfirmPolicy] = None,
    stream: Optional[TextIO] = None,
) -> int:
    """Insert a block after showing the diff and asking for confirmation.

    Returns 0 on success (including when nothing needed to change), 2 when
    the change was declined, 1 on any other failure.
    """

    logger.debug("Safely inserting content into file: %s for %s", str(path), description)
    return _status(
        "safe_insert",
        description,
        insert,
        path,
        title,
        list(content),
        description=description,
        settings=settings,
        policy=policy,
        stream=stream,
    )


def safe_remove(
    description: str,
    path: str | Path,
    title: str,
    *content: str,
    settings: Optional[EditorSettings] = None,
    policy: Optional[ConfirmPolicy] = None,
    stream: Optional[TextIO] = None,
) -> int:
    """Counterpart of ``safe_insert``. A missing file is already in the desired state."""

    logger.debug("Safely removing content from file: %s for %s", str(path), description)
    return _status(
        "safe_remove",
        description,
        remove,
        path,
        title,
        list(content),
        description=description,
        settings=settings,
        policy=policy,
        stream=stream,
    )
