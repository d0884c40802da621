"""Load the loader configuration from file, environment and CLI options.

Precedence, lowest first: model defaults, config file (YAML or JSON),
``VGPULOAD_*`` environment variables, explicit overrides.
"""

import json
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped, unused-ignore]
from pydantic import ValidationError

from vgpuload.exceptions import ConfigError
from vgpuload.models.config_models import LoaderConfig
from vgpuload.utils.env import get_env

# config field -> environment variable
ENV_OVERRIDES = {
    "profile": "VGPULOAD_PROFILE",
    "store_dir": "VGPULOAD_STORE_DIR",
    "sysfs_root": "VGPULOAD_SYSFS_ROOT",
    "sriov_manage": "VGPULOAD_SRIOV_MANAGE",
    "mismatch_policy": "VGPULOAD_MISMATCH_POLICY",
}


def _read_config_file(config_path: str | Path) -> dict[str, Any]:
    """Load a configuration mapping from a JSON or YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        content = path.read_text()
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to parse config file {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must be a dictionary")
    return data


def load_config(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> LoaderConfig:
    """Build the run configuration.

    Args:
        config_path: Optional YAML/JSON file.
        overrides: Explicit values (typically CLI options); None values are
            ignored.

    Raises:
        ConfigError: If the file is unreadable or a value fails validation.
    """
    data: dict[str, Any] = {}
    if config_path:
        data.update(_read_config_file(config_path))

    for field, env_name in ENV_OVERRIDES.items():
        value = get_env(env_name)
        if value:
            data[field] = value

    for field, value in (overrides or {}).items():
        if value is not None:
            data[field] = value

    try:
        return LoaderConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
