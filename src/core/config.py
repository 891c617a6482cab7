"""Core configuration.

Why here:
- Centralises environment variables (pydantic-settings) away from the CLI.
- Adapters (scanner, process runner) read the same typed settings.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

APP_NAME = "flutter-buildgen"

DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = (
    ".dart_tool",
    ".git",
    ".idea",
    "android",
    "build",
    "ios",
    "linux",
    "macos",
    "web",
    "windows",
)


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Write or update variables in the user's global .env."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# flutter-buildgen user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application-wide settings.

    Precedence: explicit keyword arguments, environment variables, the
    project `.env`, then the per-user `.env`.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLUTTER_BUILDGEN_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    flutter_executable: str = Field(
        default="flutter",
        min_length=1,
        description="Name or path of the flutter executable.",
    )
    dart_executable: str = Field(
        default="dart",
        min_length=1,
        description="Name or path of the dart executable (diagnostics only).",
    )
    build_yaml_name: str = Field(
        default="build.yaml",
        min_length=1,
        description="File name of the build_runner configuration, relative to the project.",
    )
    command_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-command timeout in seconds; unset means wait forever.",
    )
    exclude_dirs: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Top-level directory names skipped while walking the project (comma separated).",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR).",
    )

    @field_validator("exclude_dirs", mode="before")
    @classmethod
    def _split_exclude_dirs(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value
