"""shellword configuration: expansion defaults, environment overlay and logging."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from shellword.core.parser import unquote

if TYPE_CHECKING:
    from shellword.core.expand import Environment, ExpandOptions

USER_CONFIG = Path.home() / ".shellword" / "config"
PROJECT_CONFIG_NAME = ".shellword"
ENV_CONFIG = "SHELLWORD_CONFIG"

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Settings that take no value
_FLAG_SETTINGS = frozenset(
    {
        "dollar_vars",
        "param_expansion",
        "command_substitution",
        "error_on_unset",
        "verbose",
    }
)


@dataclass
class Config:
    """Parsed configuration."""

    dollar_vars: bool | None = None  # None = not set, defaults to on
    param_expansion: bool = False
    command_substitution: bool = False
    error_on_unset: bool = False
    timeout: float | None = None  # seconds per command substitution
    env: dict[str, str] = field(default_factory=dict)
    """Variables overlaid on the process environment during expansion."""

    verbose: bool = False
    log: Path | None = None  # None = no logging

    def expand_options(self) -> ExpandOptions:
        """Build expansion options from these settings."""
        from shellword.core.expand import ExpandOptions

        return ExpandOptions(
            dollar_vars=self.dollar_vars if self.dollar_vars is not None else True,
            param_expansion=self.param_expansion,
            command_substitution=self.command_substitution,
            error_on_unset=self.error_on_unset,
            timeout=self.timeout,
        )

    def environment(self) -> Environment:
        """Environment with the configured variables overlaid on os.environ."""
        from collections import ChainMap

        from shellword.core.expand import Environment

        if not self.env:
            return Environment()
        return Environment(ChainMap(self.env, os.environ))


# === Config Loading ===


def _find_project_config(cwd: Path) -> Path | None:
    """Walk up from cwd to find a .shellword file."""
    current = cwd.resolve()
    while True:
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:  # reached root
            return None
        current = parent


def _merge_configs(base: Config, overlay: Config) -> Config:
    """Merge overlay config into base. Env entries accumulate, settings override."""
    return replace(
        base,
        dollar_vars=overlay.dollar_vars
        if overlay.dollar_vars is not None
        else base.dollar_vars,
        param_expansion=overlay.param_expansion or base.param_expansion,
        command_substitution=overlay.command_substitution
        or base.command_substitution,
        error_on_unset=overlay.error_on_unset or base.error_on_unset,
        timeout=overlay.timeout if overlay.timeout is not None else base.timeout,
        env={**base.env, **overlay.env},
        verbose=overlay.verbose or base.verbose,
        log=overlay.log if overlay.log is not None else base.log,
    )


def load_config(cwd: Path) -> Config:
    """Load config from ~/.shellword/config, .shellword, and $SHELLWORD_CONFIG. Last match wins."""
    config = Config()

    # 1. User config (lowest priority)
    if USER_CONFIG.is_file():
        config = _merge_configs(config, parse_config(USER_CONFIG.read_text()))

    # 2. Project config (walk up from cwd)
    project_path = _find_project_config(cwd)
    if project_path is not None:
        config = _merge_configs(config, parse_config(project_path.read_text()))

    # 3. Env override (highest priority)
    env_path = os.environ.get(ENV_CONFIG)
    if env_path:
        env_config_path = Path(env_path).expanduser()
        if env_config_path.is_file():
            config = _merge_configs(
                config, parse_config(env_config_path.read_text())
            )

    return config


def parse_config(text: str) -> Config:
    """Parse config text into Config object. Raises ValueError on syntax errors."""
    settings: dict[str, bool | float | Path] = {}
    env: dict[str, str] = {}

    for lineno, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split(None, 1)
        directive = parts[0].lower()
        rest = parts[1].strip() if len(parts) > 1 else ""

        try:
            if directive == "set":
                _apply_setting(settings, rest)
            elif directive == "env":
                name, value = _parse_env(rest)
                env[name] = value
            else:
                raise ValueError(f"unknown directive '{directive}'")
        except ValueError as e:
            raise ValueError(f"line {lineno}: {e}") from None

    return Config(
        dollar_vars=settings.get("dollar_vars"),
        param_expansion=settings.get("param_expansion", False),
        command_substitution=settings.get("command_substitution", False),
        error_on_unset=settings.get("error_on_unset", False),
        timeout=settings.get("timeout"),
        env=env,
        verbose=settings.get("verbose", False),
        log=settings.get("log"),
    )


def _parse_env(rest: str) -> tuple[str, str]:
    """Parse 'NAME value' from an env directive. The value may be quoted."""
    if not rest:
        raise ValueError("'env' requires a variable name")
    parts = rest.split(None, 1)
    name = parts[0]
    if not _NAME_RE.fullmatch(name):
        raise ValueError(f"invalid variable name '{name}'")
    value = unquote(parts[1]) if len(parts) > 1 else ""
    return name, value


def _apply_setting(settings: dict[str, bool | float | Path], rest: str) -> None:
    """Parse and apply a 'set' directive. Raises ValueError on invalid setting."""
    if not rest:
        raise ValueError("'set' requires a setting name")

    parts = rest.split(None, 1)
    key = parts[0].lower()
    value = parts[1] if len(parts) > 1 else None
    key_normalized = key.replace("-", "_")

    if key_normalized in _FLAG_SETTINGS or key_normalized == "no_dollar_vars":
        if value is not None:
            raise ValueError(f"'{key}' takes no value")
        if key_normalized == "no_dollar_vars":
            settings["dollar_vars"] = False
        else:
            settings[key_normalized] = True

    elif key_normalized == "timeout":
        if value is None:
            raise ValueError("'timeout' requires a number of seconds")
        try:
            seconds = float(value)
        except ValueError:
            raise ValueError(
                f"'timeout' requires a number of seconds, got '{value}'"
            ) from None
        if seconds <= 0:
            raise ValueError(f"'timeout' must be positive, got '{value}'")
        settings[key_normalized] = seconds

    elif key_normalized == "log":
        if value is None:
            raise ValueError("'log' requires a path")
        settings[key_normalized] = Path(value).expanduser()

    else:
        raise ValueError(f"unknown setting '{key}'")


# === Logging ===

_logger: structlog.BoundLogger | None = None


class _AppendLogger:
    """Writes each rendered event as one line, opening the file per write."""

    def __init__(self, path: Path):
        self.path = path

    def msg(self, message: str) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(message + "\n")

    debug = info = warning = error = critical = exception = log = msg


def configure_logging(config: Config) -> None:
    """Configure logging based on config settings. Call once at startup."""
    global _logger
    if config.log is None:
        _logger = None
        return

    # Ensure log directory exists
    config.log.parent.mkdir(parents=True, exist_ok=True)
    log_path = config.log

    # JSON lines, one per event
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if config.verbose else logging.INFO
        ),
        logger_factory=lambda *args: _AppendLogger(log_path),
        cache_logger_on_first_use=False,
    )
    _logger = structlog.get_logger()


def log_event(event: str, level: str = "info", **fields) -> None:
    """Log an event. No-op if logging not configured."""
    if _logger is None:
        return
    getattr(_logger, level)(event, **fields)
