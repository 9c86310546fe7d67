"""Settings loader for Ulidkit."""

from pathlib import Path
from typing import Any

import tomllib
from pydantic_settings import BaseSettings, SettingsConfigDict


def _toml_settings_source() -> dict[str, Any]:
    """Load settings from config.toml with keys mapped to Settings fields.

    This source has LOWER priority than env/.env so those can override TOML.

    Example:
        [ulid]
        monotonic = true
        allow_insecure = false

        [logging]
        level = "DEBUG"
        console = "INFO"
        to_file = false
    """
    cfg_path = Path("config.toml")
    if not cfg_path.exists():
        return {}
    with cfg_path.open("rb") as f:
        t = tomllib.load(f)
    ulid_cfg = t.get("ulid", {}) or {}
    log_cfg = t.get("logging", {}) or {}
    out: dict[str, Any] = {
        "ulid_monotonic": ulid_cfg.get("monotonic", False),
        "ulid_allow_insecure": ulid_cfg.get("allow_insecure", False),
        "ulid_allow_imprecise": ulid_cfg.get("allow_imprecise", False),
        "logging_level": log_cfg.get("level", "INFO"),
        "logging_file_path": log_cfg.get("file_path", "logs/ulidkit.jsonl"),
        "logging_max_bytes": log_cfg.get("max_bytes", 5_000_000),
        "logging_backup_count": log_cfg.get("backup_count", 5),
    }

    # Per-handler levels: strings INFO|DEBUG|WARNING|ERROR|CRITICAL|NONE
    # Booleans map True->overall level, False->NONE
    overall = str(out["logging_level"]).upper()

    def _norm_level(v, default):
        if isinstance(v, str):
            return v.upper()
        if isinstance(v, bool):
            return default if v else "NONE"
        return default

    out["logging_console"] = _norm_level(log_cfg.get("console"), overall)
    file_val = log_cfg.get("to_file")
    out["logging_file"] = "NONE" if file_val is None else _norm_level(file_val, overall)
    return out


class Settings(BaseSettings):
    # --- Generator defaults ---
    ulid_monotonic: bool = False
    ulid_allow_insecure: bool = False
    ulid_allow_imprecise: bool = False

    # --- Logging ---
    logging_level: str = "INFO"
    logging_console: str = "INFO"
    # File logging is opt-in for a library
    logging_file: str = "NONE"
    logging_file_path: str = "logs/ulidkit.jsonl"
    logging_max_bytes: int = 5_000_000
    logging_backup_count: int = 5

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Precedence (highest to lowest):
        # 1) init_settings (explicit overrides in code/tests)
        # 2) dotenv (.env in cwd)
        # 3) env_settings (OS env)
        # 4) TOML (config.toml in cwd)
        # 5) file_secret_settings
        return (
            init_settings,
            dotenv_settings,
            env_settings,
            _toml_settings_source,
            file_secret_settings,
        )


def load_settings() -> Settings:
    return Settings()
