from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .lib.blocks import DEFAULT_TITLE_PATTERN, TitleRule
from .lib.confirm import ConfirmPolicy
from .logging_utils import DEFAULT_LOG_PATH

LOG_LEVELS = ("ERROR", "WARNING", "INFO", "DEBUG")

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EditorSettings:
    """Per-invocation behaviour of the block editor.

    Threaded explicitly into every call; nothing here is process-global.
    """

    assume_yes: bool = False
    dry_run: bool = False
    title_pattern: str = DEFAULT_TITLE_PATTERN
    strict_titles: bool = False
    log_level: str = "INFO"
    log_path: str = DEFAULT_LOG_PATH

    @property
    def title_rule(self) -> TitleRule:
        return TitleRule(self.title_pattern)

    def confirm_policy(self) -> ConfirmPolicy:
        return ConfirmPolicy(assume_yes=self.assume_yes)

    def merged(self, overrides: Mapping[str, Any]) -> "EditorSettings":
        """Return a copy with every non-None override applied."""

        return replace(self, **_validate({k: v for k, v in overrides.items() if v is not None}))


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE


def _validate(raw: Mapping[str, Any]) -> Dict[str, Any]:
    known = {f.name: f for f in fields(EditorSettings)}
    unknown = sorted(set(raw) - set(known))
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")

    out: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in {"assume_yes", "dry_run", "strict_titles"}:
            out[key] = _as_bool(value)
        elif key == "log_level":
            level = str(value).upper()
            if level not in LOG_LEVELS:
                raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
            out[key] = level
        else:
            out[key] = str(value)
    if "title_pattern" in out:
        try:
            re.compile(out["title_pattern"])
        except re.error as e:
            raise ValueError(f"Invalid title_pattern {out['title_pattern']!r}: {e}") from e
    return out


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    raw: Dict[str, Any] = {}
    if "CONFIRM_ALL" in env:
        raw["assume_yes"] = _as_bool(env["CONFIRM_ALL"])
    if env.get("LOG_LEVEL"):
        raw["log_level"] = env["LOG_LEVEL"]
    return raw


def _read_config_file(p: Path) -> Dict[str, Any]:
    ext = p.suffix.lower()
    text = p.read_text(encoding="utf-8")
    if ext in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("PyYAML is required to read YAML settings") from e
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {p}: {e}") from e
    else:
        data = json.loads(text) if text.strip() else {}

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping/object, got {type(data).__name__}")
    # Legacy name used by the shell setup scripts.
    if "confirm_all" in data:
        data["assume_yes"] = data.pop("confirm_all")
    return data


def load_settings(
    path: Optional[str] = None,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> EditorSettings:
    """Build settings from defaults < environment < config file < overrides."""

    settings = EditorSettings().merged(settings_from_env(environ))

    if path is not None:
        p = Path(path).expanduser()
        if not p.exists():
            raise FileNotFoundError(path)
        settings = settings.merged(_read_config_file(p))

    if overrides:
        settings = settings.merged(overrides)
    return settings
