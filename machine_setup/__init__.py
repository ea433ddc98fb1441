"""Machine setup toolkit: idempotent configuration-block editor.

Core design goals:
- Idempotent edits (applying the same block twice changes nothing)
- Line-oriented, format-agnostic (shell profiles, git config, apt sources)
- Confirm before writing, replace atomically
- Centralized logging
"""

from .file_ops import insert, remove, safe_insert, safe_remove

__all__ = ["insert", "remove", "safe_insert", "safe_remove"]
