"""Settings: load the built-in YAML defaults and deep-merge a user overlay."""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from script_qa.core.resources import get_default_config_path

_log = logging.getLogger(__name__)

# Top-level keys forwarded to every rule as options.
_RULE_OPTION_KEYS = ("tab_width", "header_marker", "safe_prefixes")


class ConfigError(ValueError):
    """The configuration file is unreadable or holds invalid values."""


def deep_merge(base: dict, overlay: dict) -> dict:
    """Merge overlay into base. Overlay wins on scalar conflicts.

    Dicts are merged recursively. Lists are replaced (not concatenated).
    """
    result = deepcopy(base)
    for key, val in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = deep_merge(result[key], val)
        else:
            result[key] = deepcopy(val)
    return result


def read_yaml(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {path} must be a mapping, got {type(data).__name__}")
    return data


def _str_list(data: dict, key: str) -> list[str]:
    value = data.get(key) or []
    if isinstance(value, str) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)


@dataclass
class Settings:
    targets: list[str] = field(default_factory=list)
    encoding: str = "utf-8"
    output_suffix: str = ".fixed"
    tab_width: int = 4
    header_marker: str = "# ----"
    safe_prefixes: list[str] = field(default_factory=lambda: ["echo"])
    required_tools: list[str] = field(default_factory=list)
    rules: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build validated Settings from a merged config dict."""
        tab_width = data.get("tab_width", 4)
        # The range is checked at startup with the other capabilities.
        if isinstance(tab_width, bool) or not isinstance(tab_width, int):
            raise ConfigError(f"'tab_width' must be an integer, got {tab_width!r}")

        for key in ("encoding", "output_suffix", "header_marker"):
            if key in data and (not isinstance(data[key], str) or not data[key]):
                raise ConfigError(f"'{key}' must be a non-empty string")

        rules = data.get("rules") or {}
        if not isinstance(rules, dict) or not all(
            isinstance(v, dict) for v in rules.values()
        ):
            raise ConfigError("'rules' must map rule ids to option mappings")

        defaults = cls()
        return cls(
            targets=_str_list(data, "targets"),
            encoding=data.get("encoding", defaults.encoding),
            output_suffix=data.get("output_suffix", defaults.output_suffix),
            tab_width=tab_width,
            header_marker=data.get("header_marker", defaults.header_marker),
            safe_prefixes=_str_list(data, "safe_prefixes") if "safe_prefixes" in data
            else defaults.safe_prefixes,
            required_tools=_str_list(data, "required_tools"),
            rules={str(k): dict(v) for k, v in rules.items()},
        )

    def is_enabled(self, rule_id: str) -> bool:
        return bool(self.rules.get(rule_id, {}).get("enabled", True))

    def rule_config(self, rule_id: str) -> dict[str, Any]:
        """Global rule options overlaid with the rule's own section."""
        cfg = {key: getattr(self, key) for key in _RULE_OPTION_KEYS}
        own = {k: v for k, v in self.rules.get(rule_id, {}).items() if k != "enabled"}
        return {**cfg, **own}


def load_settings(overlay_path: Path | None = None, base_path: Path | None = None) -> Settings:
    """Return Settings from the built-in defaults plus an optional overlay file."""
    config = read_yaml(base_path or get_default_config_path())
    if overlay_path is not None:
        if not overlay_path.exists():
            raise ConfigError(f"Configuration file not found: {overlay_path}")
        config = deep_merge(config, read_yaml(overlay_path))
        _log.info("Loaded configuration overlay %s", overlay_path)
    return Settings.from_dict(config)
