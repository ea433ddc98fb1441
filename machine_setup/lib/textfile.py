from __future__ import annotations

import logging
import stat
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..errors import PathError

logger = logging.getLogger(__name__)

DEFAULT_NEW_FILE_MODE = 0o644


@dataclass(frozen=True)
class TextFile:
    """A config file held in memory as a list of lines.

    ``trailing_newline`` records whether the file on disk ended with a newline
    so that a file edited and then restored renders back byte-for-byte.
    New files always get one.
    """

    path: Path
    lines: List[str] = field(default_factory=list)
    trailing_newline: bool = True
    exists: bool = False
    mode: Optional[int] = None
    uid: Optional[int] = None
    gid: Optional[int] = None

    def render(self) -> str:
        return render_lines(self.lines, trailing_newline=self.trailing_newline)

    def with_lines(self, lines: Sequence[str]) -> "TextFile":
        return replace(self, lines=list(lines))


def render_lines(lines: Sequence[str], *, trailing_newline: bool = True) -> str:
    r"""Join lines with ``\n``, ending with one unless the source file lacked it.

    Files created from scratch take the default, so a new block file is
    written as ``"# T\na\nb\n"`` like every other POSIX text file.
    """

    if not lines:
        return ""
    text = "\n".join(lines)
    return text + "\n" if trailing_newline else text


def split_lines(text: str) -> Tuple[List[str], bool]:
    if not text:
        return [], True
    trailing = text.endswith("\n")
    body = text[:-1] if trailing else text
    return body.split("\n"), trailing


def read_text_file(path: str | Path) -> TextFile:
    """Read ``path`` fully into memory.

    A missing file yields an empty ``TextFile`` with ``exists=False``.
    Anything present but not a regular file is rejected with ``PathError``.
    """

    p = Path(path).expanduser()
    try:
        st = p.stat()
    except FileNotFoundError:
        logger.debug("File doesn't exist: %s", str(p))
        return TextFile(path=p)
    except OSError as e:
        raise PathError(f"Cannot stat {p}: {e}") from e

    if not stat.S_ISREG(st.st_mode):
        raise PathError(f"Not a regular file: {p}")

    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PathError(f"Cannot read {p}: {e}") from e

    lines, trailing = split_lines(text)
    return TextFile(
        path=p,
        lines=lines,
        trailing_newline=trailing,
        exists=True,
        mode=stat.S_IMODE(st.st_mode),
        uid=st.st_uid,
        gid=st.st_gid,
    )
