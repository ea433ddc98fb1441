from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

# Shell/heading comments ("# ...") and INI section headers ("[...]").
DEFAULT_TITLE_PATTERN = r"[#\[]"


@dataclass(frozen=True)
class TitleRule:
    """Decides which lines end a section.

    The pattern is matched at the start of each line (``re.match``). The title
    being edited does not have to satisfy the rule itself; any line value may
    serve as a title.
    """

    pattern: str = DEFAULT_TITLE_PATTERN
    _regex: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regex", re.compile(self.pattern))

    def is_title(self, line: str) -> bool:
        return self._regex.match(line) is not None


DEFAULT_RULE = TitleRule()


@dataclass(frozen=True)
class Section:
    title_index: Optional[int]
    start: int
    end: int
    occurrences: int = 0

    @property
    def found(self) -> bool:
        return self.title_index is not None


@dataclass(frozen=True)
class EditResult:
    lines: List[str]
    added: List[str]
    removed: List[str]

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def _section_end(lines: Sequence[str], start: int, rule: TitleRule, content: Sequence[str]) -> int:
    # Lines owned by the block never end it, even when they look like titles.
    owned = set(content)
    for i in range(start, len(lines)):
        if rule.is_title(lines[i]) and lines[i] not in owned:
            return i
    return len(lines)


def locate(
    lines: Sequence[str],
    title: str,
    rule: TitleRule = DEFAULT_RULE,
    content: Sequence[str] = (),
) -> Section:
    """Find the first exact occurrence of ``title`` and the section it owns.

    Lines listed in ``content`` are treated as part of the section wherever
    they appear, so a block holding comment lines still ends where it did
    when it was written.
    """

    occurrences = sum(1 for ln in lines if ln == title)
    if occurrences == 0:
        return Section(title_index=None, start=len(lines), end=len(lines))

    title_index = list(lines).index(title)
    start = title_index + 1
    return Section(
        title_index=title_index,
        start=start,
        end=_section_end(lines, start, rule, content),
        occurrences=occurrences,
    )


def insert_block(
    lines: Sequence[str],
    title: str,
    content: Sequence[str],
    rule: TitleRule = DEFAULT_RULE,
) -> EditResult:
    """Ensure ``title`` exists and every content line is present in its section.

    Lines already in the section are skipped; missing ones are inserted at the
    end of the section in argument order.
    """

    out = list(lines)
    section = locate(out, title, rule, content)

    if not section.found:
        block = [title, *content]
        logger.debug("Title line not found, appending block: %s", title)
        return EditResult(lines=out + block, added=block, removed=[])

    added: List[str] = []
    end = section.end
    for line in content:
        if line in out[section.start:end]:
            logger.debug("Line already exists: %s", line)
            continue
        logger.debug("Adding missing line: %s", line)
        out.insert(end, line)
        added.append(line)
        end += 1

    return EditResult(lines=out, added=added, removed=[])


def remove_block(
    lines: Sequence[str],
    title: str,
    content: Sequence[str],
    rule: TitleRule = DEFAULT_RULE,
) -> EditResult:
    """Delete the named content lines from the section owned by ``title``.

    Each argument removes at most one matching line. If the section ends up
    empty (next line is a title or EOF) the title line is dropped too, but
    only when something was removed or no content was named at all.
    """

    section = locate(lines, title, rule, content)
    if not section.found:
        logger.debug("Title line not found, nothing to remove: %s", title)
        return EditResult(lines=list(lines), added=[], removed=[])

    pending = Counter(content)
    kept: List[str] = []
    removed: List[str] = []
    for line in lines[section.start:section.end]:
        if pending[line] > 0:
            pending[line] -= 1
            removed.append(line)
            logger.debug("Removing line: %s", line)
        else:
            kept.append(line)

    head = list(lines[: section.title_index])
    tail = list(lines[section.end:])
    if kept or (content and not removed):
        out = head + [title] + kept + tail
    else:
        logger.debug("Removing empty title line: %s", title)
        out = head + tail
        removed.insert(0, title)

    return EditResult(lines=out, added=[], removed=removed)
