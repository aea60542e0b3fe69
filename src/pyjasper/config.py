"""Configuration models and loaders for pyjasper."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pyjasper.invocation import ALLOWED_FORMATS, DEFAULT_EXECUTABLE_NAME, DEFAULT_FORMAT

DEFAULT_EXECUTABLE_DIR = Path("bin") / "jasperstarter" / "bin"
CONFIG_FILE_NAMES: tuple[str, ...] = ("pyjasper.yaml", "pyjasper.yml", "pyproject.toml")


@dataclass(frozen=True)
class AppConfig:
    """Top-level configuration for the application.

    Attributes:
        executable_dir: Directory holding the report tool executable. An empty
            string means no directory is configured.
        executable_name: File name of the report tool executable.
        default_format: Output format used when none is requested.
        locale: Optional default locale for ``process``.
        run_as_user: Optional OS user commands are run as.
        log_level: Logging level name.
    """

    executable_dir: Path | str = DEFAULT_EXECUTABLE_DIR
    executable_name: str = DEFAULT_EXECUTABLE_NAME
    default_format: str = DEFAULT_FORMAT
    locale: str | None = None
    run_as_user: str | None = None
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load application configuration from disk.

    Args:
        path: Optional path to a configuration file or directory.

    Returns:
        Parsed AppConfig with defaults applied when no config exists.
    """

    config_path = _resolve_config_path(path)
    if config_path is None:
        return AppConfig()

    if config_path.suffix in {".yaml", ".yml"}:
        raw_data = _load_yaml(config_path)
    elif config_path.name == "pyproject.toml" or config_path.suffix == ".toml":
        raw_data = _load_toml(config_path)
    else:
        raise ValueError(f"Unsupported config file type: {config_path}")

    return _parse_app_config(raw_data, base_path=config_path.parent)


def config_to_dict(config: AppConfig) -> dict[str, Any]:
    """Serialize an AppConfig into a JSON-compatible dictionary."""

    return {
        "executable_dir": str(config.executable_dir),
        "executable_name": config.executable_name,
        "default_format": config.default_format,
        "locale": config.locale,
        "run_as_user": config.run_as_user,
        "log_level": config.log_level,
    }


def update_executable_dir(config: AppConfig, executable_dir: Path | str) -> AppConfig:
    """Return a config copy with an updated executable directory."""

    return replace(config, executable_dir=executable_dir)


def update_run_as_user(config: AppConfig, user: str | None) -> AppConfig:
    """Return a config copy with an updated run-as user."""

    return replace(config, run_as_user=user)


def _resolve_config_path(path: Path | None) -> Path | None:
    candidate_paths: list[Path] = []
    if path is None:
        candidate_paths.extend(Path(name) for name in CONFIG_FILE_NAMES)
    elif path.is_dir():
        candidate_paths.extend(path / name for name in CONFIG_FILE_NAMES)
    else:
        candidate_paths.append(path)

    for candidate in candidate_paths:
        if candidate.exists():
            return candidate
    return None


def _load_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        data = tomllib.load(handle)
    if path.name == "pyproject.toml":
        tool_config = data.get("tool", {}).get("pyjasper", {})
        if not isinstance(tool_config, dict):
            raise ValueError("tool.pyjasper must be a mapping.")
        return tool_config
    if not isinstance(data, dict):
        raise ValueError("TOML configuration must be a mapping.")
    return data


def _load_yaml(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None
    if data is not None:
        if not isinstance(data, dict):
            raise ValueError("YAML configuration must be a mapping.")
        return data
    import yaml

    parsed = yaml.safe_load(text)
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError("YAML configuration must be a mapping.")
    return parsed


def _parse_app_config(raw_data: dict[str, Any], base_path: Path) -> AppConfig:
    default_format = str(raw_data.get("default_format", DEFAULT_FORMAT)).strip().lower()
    if default_format not in ALLOWED_FORMATS:
        raise ValueError(f"Unsupported default_format: {default_format}")

    return AppConfig(
        executable_dir=_parse_executable_dir(raw_data.get("executable_dir"), base_path),
        executable_name=str(raw_data.get("executable_name", DEFAULT_EXECUTABLE_NAME)),
        default_format=default_format,
        locale=_optional_str(raw_data.get("locale")),
        run_as_user=_optional_str(raw_data.get("run_as_user")),
        log_level=str(raw_data.get("log_level", "INFO")),
    )


def _parse_executable_dir(raw: Any, base_path: Path) -> Path | str:
    if raw is None:
        return (base_path / DEFAULT_EXECUTABLE_DIR).resolve()
    text = str(raw).strip()
    if not text:
        return ""
    executable_dir = Path(text).expanduser()
    if not executable_dir.is_absolute():
        executable_dir = (base_path / executable_dir).resolve()
    return executable_dir


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
