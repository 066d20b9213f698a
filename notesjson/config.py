"""Configuration loading for notesjson."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exchange.models import ImportMode


@dataclass
class StoreConfig:
    """Configuration for the note database."""

    db_path: str = "~/.notesjson/notes.db"


@dataclass
class ExportConfig:
    """Configuration for export files."""

    directory: str = "~/Documents"
    indent: int | None = 2  # None writes compact JSON


@dataclass
class ImportConfig:
    default_mode: str = ImportMode.MERGE.value


@dataclass
class DashboardConfig:
    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class Config:
    store: StoreConfig = field(default_factory=StoreConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    importing: ImportConfig = field(default_factory=ImportConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)


def _get_env(key: str, default: Any = None) -> Any:
    """Get environment variable with NOTESJSON_ prefix."""
    return os.environ.get(f"NOTESJSON_{key}", default)


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config."""
    if db_path := _get_env("DB_PATH"):
        config.store.db_path = db_path

    if export_dir := _get_env("EXPORT_DIR"):
        config.export.directory = export_dir
    if indent := _get_env("EXPORT_INDENT"):
        config.export.indent = None if indent.lower() == "none" else int(indent)

    if mode := _get_env("IMPORT_MODE"):
        config.importing.default_mode = mode

    if host := _get_env("DASHBOARD_HOST"):
        config.dashboard.host = host
    if port := _get_env("DASHBOARD_PORT"):
        config.dashboard.port = int(port)

    return config


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to YAML config file. If None, uses default config.

    Returns:
        Loaded and validated Config object.

    Raises:
        ValueError: If the configured import mode is unknown.
    """
    config = Config()

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}

            if "store" in data:
                config.store = StoreConfig(
                    db_path=data["store"].get("db_path", config.store.db_path)
                )

            if "export" in data:
                export_data = data["export"]
                config.export = ExportConfig(
                    directory=export_data.get("directory", config.export.directory),
                    indent=export_data.get("indent", config.export.indent),
                )

            # "import" is a keyword, hence the attribute name
            if "import" in data:
                config.importing = ImportConfig(
                    default_mode=data["import"].get(
                        "default_mode", config.importing.default_mode
                    )
                )

            if "dashboard" in data:
                dash_data = data["dashboard"]
                config.dashboard = DashboardConfig(
                    host=dash_data.get("host", config.dashboard.host),
                    port=dash_data.get("port", config.dashboard.port),
                )

    config = _apply_env_overrides(config)

    # Normalize and validate
    config.importing.default_mode = ImportMode.parse(
        config.importing.default_mode
    ).value

    return config
