"""Configuration loading for parsecheck (.parsecheck.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set

import yaml

from .models import Dialect

CONFIG_FILENAME = ".parsecheck.yml"

_DEFAULT_DIALECTS = {
    "ts": Dialect.TYPESCRIPT,
    "tsx": Dialect.TSX,
}

_DEFAULT_PRUNE_DIRS = {".git"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class HarnessConfig:
    """Extension allow-list and dialect mapping used for one run."""

    extensions: Set[str] = field(default_factory=lambda: set(_DEFAULT_DIALECTS))
    dialects: Dict[str, Dialect] = field(default_factory=lambda: dict(_DEFAULT_DIALECTS))
    prune_dirs: Set[str] = field(default_factory=lambda: set(_DEFAULT_PRUNE_DIRS))
    repeat_pass: bool = False
    source: Optional[Path] = None

    def supports(self, extension: str) -> bool:
        return extension in self.extensions


def load_config(config_path: Path) -> HarnessConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return HarnessConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = HarnessConfig(source=config_file)

    if "dialects" in data:
        config.dialects = _parse_dialects(data.get("dialects"))
        config.extensions = set(config.dialects)
    if "extensions" in data:
        config.extensions = {_strip_dot(ext) for ext in _as_str_list(data.get("extensions"))}
    if "prune_dirs" in data:
        config.prune_dirs = set(_as_str_list(data.get("prune_dirs")))
    repeat_pass = _as_bool(data.get("repeat_pass"))
    if repeat_pass is not None:
        config.repeat_pass = repeat_pass

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _parse_dialects(value: Any) -> Dict[str, Dialect]:
    if not isinstance(value, dict):
        raise ConfigError("dialects must be a mapping of extension to dialect name")
    dialects: Dict[str, Dialect] = {}
    for ext, name in value.items():
        try:
            dialects[_strip_dot(str(ext))] = Dialect(str(name).lower())
        except ValueError as exc:
            known = ", ".join(d.value for d in Dialect)
            raise ConfigError(f"Unknown dialect {name!r} for .{ext} (expected one of: {known})") from exc
    return dialects


def _strip_dot(ext: str) -> str:
    return ext[1:] if ext.startswith(".") else ext


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "HarnessConfig", "load_config"]
