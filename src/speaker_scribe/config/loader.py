"""Configuration loader: YAML layers plus environment overrides."""

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from speaker_scribe.config.schema import ScribeConfig
from speaker_scribe.core.exceptions import ConfigError
from speaker_scribe.utils.logging import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "SPEAKER_SCRIBE"


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = copy.deepcopy(base)

    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Read one YAML layer.

    Raises:
        ConfigError: If the file is missing, unparsable, or not a mapping
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {path} must be a mapping")
    return data


def apply_env_overrides(
    config: dict[str, Any],
    prefix: str = ENV_PREFIX,
    environ: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Overlay ``{PREFIX}__{SECTION}__{KEY}`` variables onto ``config``.

    Example: SPEAKER_SCRIBE__TRANSCRIPTION__MODEL_SIZE=small
    """
    environ = os.environ if environ is None else environ
    result = copy.deepcopy(config)
    marker = f"{prefix}__"

    for key, value in environ.items():
        if not key.startswith(marker):
            continue

        parts = key[len(marker):].lower().split("__")
        target = result
        for part in parts[:-1]:
            target = target.setdefault(part, {})

        target[parts[-1]] = _convert_value(value)
        logger.debug(f"Env override: {'.'.join(parts)} = {value}")

    return result


def _convert_value(value: str) -> Any:
    lowered = value.lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    if lowered in ("null", "none"):
        return None

    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue

    return value


def load_config(
    config_path: Path | str | None = None,
    env: str | None = None,
    config_dir: Path | str = "configs",
) -> ScribeConfig:
    """Build a validated ScribeConfig.

    Layers, later ones winning:
    1. schema defaults
    2. {config_dir}/base.yaml
    3. {config_dir}/{env}.yaml
    4. config_path
    5. SPEAKER_SCRIBE__* environment variables

    Raises:
        ConfigError: If any layer is unreadable or the result is invalid
    """
    config_dir = Path(config_dir)
    layers = [config_dir / "base.yaml"]
    if env:
        layers.append(config_dir / f"{env}.yaml")

    config: dict[str, Any] = {}
    for path in layers:
        if path.exists():
            logger.debug(f"Loading config layer: {path}")
            config = deep_merge(config, load_yaml(path))

    if config_path:
        config = deep_merge(config, load_yaml(Path(config_path)))

    config = apply_env_overrides(config)

    try:
        return ScribeConfig(**config)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e
