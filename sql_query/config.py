from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml
from platformdirs import user_config_dir

from sql_query.sanitize.types import CommentSource, CommentStrategy

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

DEFAULT_CONFIG: Dict[str, Any] = {
    "sql": {
        "path": "/app/sql_queries",
        "remove_comments": CommentStrategy.ALL.value,
        "remove_comments_from": CommentSource.ALL.value,
    },
    "logging": {
        "level": "WARNING",
    },
}


@dataclass
class ConfigResult:
    config: Dict[str, Any]
    warnings: List[str]
    path: Path


def default_config_path() -> Path:
    return Path(user_config_dir("sql_query")) / "config.yaml"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _default_for(path: Tuple[str, ...]) -> Any:
    value: Any = DEFAULT_CONFIG
    for part in path:
        value = value[part]
    return value


def _validate_config(config: Dict[str, Any]) -> List[str]:
    warnings: List[str] = []

    def section(name: str) -> Dict[str, Any]:
        if not isinstance(config.get(name), dict):
            warnings.append(f"Invalid section {name}; using default.")
            config[name] = copy.deepcopy(DEFAULT_CONFIG[name])
        return config[name]

    def ensure(path: Tuple[str, ...], normalize: Callable[[Any], Any]) -> None:
        current = section(path[0])
        key = path[-1]
        try:
            current[key] = normalize(current.get(key))
        except (TypeError, ValueError):
            warnings.append(f"Invalid value for {'.'.join(path)}; using default.")
            current[key] = _default_for(path)

    def as_str(value: Any) -> str:
        if not isinstance(value, str):
            raise TypeError(value)
        return value

    def as_level(value: Any) -> str:
        level = as_str(value).upper()
        if level not in LOG_LEVELS:
            raise ValueError(value)
        return level

    ensure(("sql", "path"), as_str)
    ensure(("sql", "remove_comments"), lambda value: CommentStrategy.parse(as_str(value)).value)
    ensure(("sql", "remove_comments_from"), lambda value: CommentSource.parse(as_str(value)).value)
    ensure(("logging", "level"), as_level)

    return warnings


def build_config(raw: Optional[Dict[str, Any]] = None) -> Tuple[Dict[str, Any], List[str]]:
    merged = _deep_merge(DEFAULT_CONFIG, raw or {})
    warnings = _validate_config(merged)
    return merged, warnings


def load_config(path: Optional[Path] = None) -> ConfigResult:
    path = Path(path) if path is not None else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    raw: Dict[str, Any] = {}
    if path.exists():
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            logger.warning("Could not read %s, using defaults: %s", path, exc)
            raw = {}
        if not isinstance(raw, dict):
            raw = {}
    config, warnings = build_config(raw)
    for warning in warnings:
        logger.warning("%s: %s", path, warning)
    if not path.exists():
        path.write_text(yaml.safe_dump(config, sort_keys=False), encoding="utf-8")
    return ConfigResult(config=config, warnings=warnings, path=path)


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> None:
    path = Path(path) if path is not None else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config, sort_keys=False), encoding="utf-8")


def comment_strategy(config: Dict[str, Any]) -> CommentStrategy:
    return CommentStrategy.parse(config["sql"]["remove_comments"])


def should_comments_be_removed(config: Dict[str, Any], *, for_logs: bool) -> bool:
    source = CommentSource.parse(config["sql"]["remove_comments_from"])
    if source == CommentSource.PREPARED_FOR_LOGS:
        return for_logs
    return source == CommentSource.ALL
