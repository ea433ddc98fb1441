from __future__ import annotations

import argparse
import logging
from typing import Optional

from .file_ops import EXIT_FAILED, safe_insert, safe_remove
from .logging_utils import configure_logging
from .settings import LOG_LEVELS, EditorSettings, load_settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="machine-setup",
        description="Insert or remove titled blocks of lines in configuration files.",
    )
    p.add_argument("--config", default=None, help="Settings file (yaml|json)")
    p.add_argument("--log", default=None, help="Path to log file")
    p.add_argument("--log-level", default=None, type=str.upper, choices=LOG_LEVELS)
    p.add_argument(
        "-y",
        "--yes",
        dest="assume_yes",
        action="store_const",
        const=True,
        default=None,
        help="Apply changes without asking (same as CONFIRM_ALL=true)",
    )
    p.add_argument(
        "--dry-run",
        action="store_const",
        const=True,
        default=None,
        help="Show the proposed diff but do not write",
    )
    p.add_argument(
        "--title-pattern",
        default=None,
        help="Regex matched at line start that marks a line as a section title (default: [#\\[])",
    )
    p.add_argument(
        "--strict-titles",
        action="store_const",
        const=True,
        default=None,
        help="Fail instead of warning when a title occurs more than once",
    )

    sub = p.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("insert", "Ensure TITLE and LINEs are present"),
        ("remove", "Remove LINEs from TITLE's section"),
    ):
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument("description", help="What the change is for (shown in prompts and logs)")
        sp.add_argument("path", help="File to edit")
        sp.add_argument("title", help="Title line owning the section")
        sp.add_argument("lines", nargs="*", metavar="LINE", help="Content lines")
    return p


def resolve_settings(args: argparse.Namespace) -> EditorSettings:
    return load_settings(
        args.config,
        overrides={
            "assume_yes": args.assume_yes,
            "dry_run": args.dry_run,
            "title_pattern": args.title_pattern,
            "strict_titles": args.strict_titles,
            "log_level": args.log_level,
            "log_path": args.log,
        },
    )


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except (OSError, ValueError) as e:
        p.error(str(e))

    configure_logging(log_path=settings.log_path, level=settings.log_level)

    op = safe_insert if args.command == "insert" else safe_remove
    try:
        return op(args.description, args.path, args.title, *args.lines, settings=settings)
    except Exception:
        logger.exception("%s crashed for %s", args.command, args.description)
        return EXIT_FAILED
