"""TOML config: project Config.toml validation + tool settings merge."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomli_w

from .constants import CONFIG_FILENAME, DEFAULT_UPDATE_URL, SETTINGS_FILENAME
from .errors import ConfigurationError

REQUIRED_FIELDS = ("distro", "image_name")


@dataclass(frozen=True)
class BuildConfig:
    """The subset of Config.toml the front-end cares about."""
    distro: str
    image_name: str
    installer: str | None = None
    architecture: str | None = None


@dataclass(frozen=True)
class Settings:
    """Tool-level settings, built once at startup and passed around."""
    home: Path
    backend_path: Path
    update_url: str
    config_path: Path
    refresh_per_second: float = 12.0
    tick_interval: float = 0.1


def default_settings() -> dict:
    """Built-in defaults, before user overrides."""
    return {
        "backend": {
            "path": "",
            "update_url": DEFAULT_UPDATE_URL,
        },
        "project": {
            "config_name": CONFIG_FILENAME,
        },
        "ui": {
            "refresh_per_second": 12.0,
            "tick_interval": 0.1,
        },
    }


def load_settings(
    *,
    config_path: Path | None = None,
    environ: dict | None = None,
) -> Settings:
    """Defaults, merged with ~/.ulb/settings.toml, then env overrides.

    Env: ULB_HOME, ULB_BACKEND, ULB_UPDATE_URL.
    """
    env = os.environ if environ is None else environ
    home = Path(env.get("ULB_HOME") or Path.home() / ".ulb").expanduser()

    raw = default_settings()
    settings_file = home / SETTINGS_FILENAME
    if settings_file.exists():
        try:
            with open(settings_file, "rb") as f:
                _deep_merge(raw, tomllib.load(f))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError) as e:
            raise ConfigurationError(f"Invalid settings file {settings_file}: {e}") from e

    backend_cfg = raw.get("backend", {})
    ui_cfg = raw.get("ui", {})

    backend_path = env.get("ULB_BACKEND") or backend_cfg.get("path") or home / "backend"
    update_url = env.get("ULB_UPDATE_URL") or backend_cfg.get("update_url") or DEFAULT_UPDATE_URL
    if config_path is None:
        config_path = Path(raw.get("project", {}).get("config_name", CONFIG_FILENAME))

    return Settings(
        home=home,
        backend_path=Path(backend_path).expanduser(),
        update_url=update_url,
        config_path=Path(config_path),
        refresh_per_second=float(ui_cfg.get("refresh_per_second", 12.0)),
        tick_interval=float(ui_cfg.get("tick_interval", 0.1)),
    )


def load_build_config(path: Path) -> BuildConfig:
    """Read and validate a project Config.toml.

    Raises ConfigurationError naming the first precondition that failed.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    for field_name in REQUIRED_FIELDS:
        value = data.get(field_name)
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"{field_name} is required in {path}")

    return BuildConfig(
        distro=data["distro"],
        image_name=data["image_name"],
        installer=_optional_str(data, "installer"),
        architecture=_optional_str(data, "architecture"),
    )


def save_build_config(path: Path, config: BuildConfig) -> None:
    """Write a Config.toml, omitting unset optional fields."""
    data = {"distro": config.distro, "image_name": config.image_name}
    if config.installer:
        data["installer"] = config.installer
    if config.architecture:
        data["architecture"] = config.architecture
    with open(path, "wb") as f:
        tomli_w.dump(data, f)


def _optional_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) and value else None


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place, recursing into dicts."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
