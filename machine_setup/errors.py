from __future__ import annotations


class BlockEditError(RuntimeError):
    """Base class for failures of a single insert/remove call."""


class PathError(BlockEditError):
    pass


class WriteError(BlockEditError):
    pass


class ConfirmationDeclined(BlockEditError):
    """The confirmation policy rejected the change. The file is untouched."""

    def __init__(self, description: str) -> None:
        super().__init__(f"Changes declined for {description}")
        self.description = description


class AmbiguousTitle(BlockEditError):
    """A title line occurs more than once.

    Only raised in strict mode; otherwise the first occurrence is edited and a
    warning is logged.
    """

    def __init__(self, title: str, occurrences: int) -> None:
        super().__init__(f"Title line occurs {occurrences} times: {title!r}")
        self.title = title
        self.occurrences = occurrences
