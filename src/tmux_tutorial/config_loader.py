"""
Configuration loading.

Optional TOML file at ~/.config/tmux-tutorial/config.toml (platform
dependent, see platformdirs), or wherever TMUX_TUTORIAL_CONFIG points.
Every key has a safe default, so the file only needs the overrides.
"""

from __future__ import annotations

import os
import re
import shlex
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path

import platformdirs
from loguru import logger

from tmux_tutorial.errors import Error, ErrorType, Result
from tmux_tutorial.logging_config import APP_NAME, known_level

ENV_CONFIG_PATH = "TMUX_TUTORIAL_CONFIG"

# Default configuration - works without any user config
DEFAULT_CONFIG = {
    "tmux": {
        "binary": "tmux",
        "socket_name": "",  # empty: the user's default tmux server
    },
    "session": {
        "width": 120,
        "height": 40,
    },
    "shell": {
        "command": "",  # empty: $SHELL, then bash
    },
    "progress": {
        "path": "~/.tmux-tutorial-progress",
    },
    "logging": {
        "console_level": "",
        "file_level": "DEBUG",
    },
}

FALLBACK_SHELL = "bash"


def default_config_path() -> Path:
    override = os.environ.get(ENV_CONFIG_PATH)
    if override:
        return Path(override).expanduser()
    return Path(platformdirs.user_config_dir(APP_NAME)) / "config.toml"


def extract_toml_error_context(error: tomllib.TOMLDecodeError, file_path: Path) -> dict:
    """
    Extract line context from TOML parse error.

    Returns:
        Dict with line_number, line_content, and formatted_message
    """
    error_str = str(error)
    line_number = None
    line_content = None

    line_match = re.search(r'line\s+(\d+)', error_str, re.IGNORECASE)
    if line_match:
        line_number = int(line_match.group(1))

    if line_number and file_path.exists():
        try:
            lines = file_path.read_text().splitlines()
            if 0 < line_number <= len(lines):
                line_content = lines[line_number - 1].rstrip()
        except OSError:
            pass

    if line_number:
        formatted = f"Error on line {line_number}"
        if line_content:
            display_line = line_content[:50] + "..." if len(line_content) > 50 else line_content
            formatted += f": {display_line}"
        formatted += f" ({error_str})"
    else:
        formatted = f"TOML parse error: {error_str}"

    return {
        "line_number": line_number,
        "line_content": line_content,
        "formatted_message": formatted,
    }


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dictionary."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Path | None = None) -> Result[dict]:
    """
    Load configuration from TOML file with defaults fallback.

    A missing file is not an error: the defaults are returned.

    Returns:
        Result[dict]: Ok with merged config, or Err with parse details
    """
    config_path = config_path or default_config_path()
    start_time = time.perf_counter()

    if not config_path.exists():
        logger.debug(
            "Config file does not exist, using defaults",
            operation="load_config",
            status="default",
            config_path=str(config_path)
        )
        return Result.ok(deep_merge(DEFAULT_CONFIG, {}))

    try:
        with open(config_path, "rb") as f:
            user_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        error_context = extract_toml_error_context(e, config_path)
        logger.error(
            "Invalid TOML syntax in configuration file",
            operation="load_config",
            status="failed",
            file=str(config_path),
            line_number=error_context["line_number"],
            line_content=error_context["line_content"],
        )
        return Result.err(Error(
            error_type=ErrorType.PARSE_ERROR,
            message=error_context["formatted_message"],
            context={"config_path": str(config_path), "line_number": error_context["line_number"]},
            original_exception=e
        ))
    except OSError as e:
        logger.error(
            "Config file unreadable",
            operation="load_config",
            status="failed",
            file=str(config_path),
            error=str(e)
        )
        return Result.err(Error(
            error_type=ErrorType.PARSE_ERROR,
            message=f"Cannot read {config_path}: {e}",
            context={"config_path": str(config_path)},
            original_exception=e
        ))

    merged = deep_merge(DEFAULT_CONFIG, user_config)
    logger.debug(
        "Config loaded successfully",
        operation="load_config",
        status="success",
        config_path=str(config_path),
        metrics={"duration_ms": int((time.perf_counter() - start_time) * 1000)}
    )
    return Result.ok(merged)


def _typed(config: dict, section: str, key: str, expected: type, problems: list[str]):
    """Read config[section][key], falling back to the default on a type mismatch."""
    default = DEFAULT_CONFIG[section][key]
    section_values = config.get(section)
    if not isinstance(section_values, dict):
        if section_values is not None:
            problems.append(f"[{section}] must be a table")
        return default
    value = section_values.get(key, default)
    # bool is an int subclass; never accept it for a number
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        problems.append(f"{section}.{key} must be {expected.__name__}, got {value!r}")
        return default
    return value


def _log_level(config: dict, key: str, problems: list[str]) -> str:
    level = _typed(config, "logging", key, str, problems)
    if level and not known_level(level):
        problems.append(f"logging.{key} is not a log level, got {level!r}")
        return DEFAULT_CONFIG["logging"][key]
    return level


def _shell_words(command: str) -> list[str]:
    """Words of a shell command line, [] if it cannot be split."""
    try:
        return shlex.split(command)
    except ValueError:
        return []


@dataclass(frozen=True)
class TutorialSettings:
    tmux_binary: str = "tmux"
    socket_name: str | None = None
    width: int = 120
    height: int = 40
    shell: str = FALLBACK_SHELL
    progress_path: Path = Path("~/.tmux-tutorial-progress").expanduser()
    console_log_level: str | None = None
    file_log_level: str = "DEBUG"

    @staticmethod
    def from_config(config: dict) -> tuple[TutorialSettings, list[Error]]:
        """
        Build settings from a merged config dict.

        Returns:
            The settings plus one validation Error per value that was replaced
            by its default.
        """
        problems: list[str] = []
        shell = _typed(config, "shell", "command", str, problems)
        if shell and not _shell_words(shell):
            problems.append(f"shell.command is not a valid command line, got {shell!r}")
            shell = DEFAULT_CONFIG["shell"]["command"]
        width = _typed(config, "session", "width", int, problems)
        height = _typed(config, "session", "height", int, problems)
        if width <= 0 or height <= 0:
            problems.append(f"session size must be positive, got {width}x{height}")
            width, height = DEFAULT_CONFIG["session"]["width"], DEFAULT_CONFIG["session"]["height"]

        settings = TutorialSettings(
            tmux_binary=_typed(config, "tmux", "binary", str, problems) or "tmux",
            socket_name=_typed(config, "tmux", "socket_name", str, problems) or None,
            width=width,
            height=height,
            shell=shell or shlex.quote(os.environ.get("SHELL") or FALLBACK_SHELL),
            progress_path=Path(_typed(config, "progress", "path", str, problems)).expanduser(),
            console_log_level=_log_level(config, "console_level", problems) or None,
            file_log_level=_log_level(config, "file_level", problems) or "DEBUG",
        )
        errors = [
            Error(error_type=ErrorType.VALIDATION_ERROR, message=problem)
            for problem in problems
        ]
        return settings, errors
