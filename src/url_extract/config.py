from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


def _coerce_bool(value: bool | str | int) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "1", "yes", "y", "on"}:
            return True
        if normalized in {"false", "0", "no", "n", "off"}:
            return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def _coerce_positive(name: str, value: float | str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc
    if number <= 0:
        raise ValueError(f"{name} must be positive, got {number}")
    return number


def _coerce_args(value: list[str] | tuple[str, ...] | str) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return tuple(str(part) for part in value)


@dataclass
class FetchConfig:
    timeout_s: float = 10.0
    max_attempts: int = 1
    user_agent: str = BROWSER_USER_AGENT

    def __post_init__(self) -> None:
        self.timeout_s = _coerce_positive("fetch.timeout_s", self.timeout_s)
        self.max_attempts = int(_coerce_positive("fetch.max_attempts", self.max_attempts))


@dataclass
class RenderConfig:
    """Browser launch settings handed to the renderer at construction."""

    browser: str = "chromium"
    headless: bool = True
    launch_args: tuple[str, ...] = ("--no-sandbox", "--disable-setuid-sandbox")
    navigation_timeout_s: float = 30.0
    selector_timeout_s: float = 5.0
    evaluate_timeout_s: float = 10.0
    user_agent: str = BROWSER_USER_AGENT

    def __post_init__(self) -> None:
        self.headless = _coerce_bool(self.headless)
        self.launch_args = _coerce_args(self.launch_args)
        self.navigation_timeout_s = _coerce_positive(
            "render.navigation_timeout_s", self.navigation_timeout_s
        )
        self.selector_timeout_s = _coerce_positive(
            "render.selector_timeout_s", self.selector_timeout_s
        )
        self.evaluate_timeout_s = _coerce_positive(
            "render.evaluate_timeout_s", self.evaluate_timeout_s
        )
        if self.browser not in {"chromium", "firefox", "webkit"}:
            raise ValueError(f"Unsupported browser: {self.browser!r}")


@dataclass
class ExtractorConfig:
    fetch: FetchConfig = field(default_factory=FetchConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    sufficiency_chars: int = 100
    log_events: bool = True
    log_path: Path | None = None

    def __post_init__(self) -> None:
        self.log_events = _coerce_bool(self.log_events)
        if self.log_path is not None and self.log_path != "":
            self.log_path = Path(self.log_path)
        else:
            self.log_path = None

    def validate(self) -> None:
        if int(self.sufficiency_chars) < 0:
            raise ValueError("sufficiency_chars must be >= 0")
        self.sufficiency_chars = int(self.sufficiency_chars)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExtractorConfig":
        fetch = FetchConfig(**(data.get("fetch", {}) or {}))
        render = RenderConfig(**(data.get("render", {}) or {}))
        config = cls(
            fetch=fetch,
            render=render,
            sufficiency_chars=data.get("sufficiency_chars", 100),
            log_events=data.get("log_events", True),
            log_path=data.get("log_path"),
        )
        config.validate()
        return config


DEFAULT_CONFIG_PATH = Path("url_extract.yaml")
ENV_PREFIX = "URL_EXTRACT__"


def _deep_set(target: dict[str, Any], keys: list[str], value: Any) -> None:
    current = target
    for key in keys[:-1]:
        current = current.setdefault(key, {})
    current[keys[-1]] = value


def _parse_env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        path = key[len(ENV_PREFIX) :].lower().split("__")
        if not path or any(not part for part in path):
            continue
        _deep_set(overrides, path, value)
    return overrides


def _merge_dicts(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    path: Path | str = DEFAULT_CONFIG_PATH,
    env: Mapping[str, str] | None = None,
) -> ExtractorConfig:
    config_path = Path(path)
    data: dict[str, Any] = {}
    if config_path.exists():
        raw = config_path.read_text(encoding="utf-8")
        loaded = yaml.safe_load(raw) or {}
        if not isinstance(loaded, dict):
            raise ValueError("url_extract.yaml must define a mapping at the top level")
        data = loaded

    env_overrides = _parse_env_overrides(os.environ if env is None else env)
    merged = _merge_dicts(data, env_overrides)
    return ExtractorConfig.from_dict(merged)
