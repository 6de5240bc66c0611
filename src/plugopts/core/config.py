# src/plugopts/core/config.py
"""
Engine settings and loading.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from pydantic import BaseModel, Field


class EngineSettings(BaseModel):
    """Validator engine configuration.

    Example YAML:
        external_timeout_seconds: 10
        max_concurrent_external_checks: 4
    """

    model_config = {"frozen": True}

    external_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-check time limit; an overrun is reported as that field's error",
    )
    max_concurrent_external_checks: int | None = Field(
        default=None,
        gt=0,
        description="Upper bound on external checks in flight (None = unbounded)",
    )


def load_settings(config_path: Path) -> EngineSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (PLUGOPTS_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated EngineSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Explicit check for file existence (Dynaconf silently accepts missing files)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="PLUGOPTS",
        settings_files=[str(config_path)],
        environments=False,  # No [default]/[production] sections
        load_dotenv=False,  # Don't auto-load .env
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; convert to lowercase for Pydantic
    # Also filter out internal Dynaconf settings
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {
        k.lower(): v
        for k, v in dynaconf_settings.as_dict().items()
        if k not in internal_keys
    }
    return EngineSettings(**raw_config)
