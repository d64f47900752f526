import logging
import os
from copy import deepcopy
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from cerberus import Validator
from pydantic import ValidationError

from practice_comp.config.models import EngineConfig

# Configure logger for this module
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default_config.yaml")


class ConfigLoadError(Exception):
    """Custom exception for errors during config loading."""

    pass


_NUMBER = {"type": "number"}
_PROJECTION_SCHEMA = {
    "type": "dict",
    "schema": {
        "income_growth_pct": _NUMBER,
        "non_employment_costs_pct": _NUMBER,
        "non_md_employment_costs_pct": _NUMBER,
        "misc_employment_costs_pct": _NUMBER,
        "benefit_costs_growth_pct": _NUMBER,
        "medical_director_hours": {"type": "number", "min": 0},
        "prcs_medical_director_hours": {"type": "number", "min": 0},
        "consulting_services_agreement": {"type": "number", "min": 0},
        "locums_costs": {"type": "number", "min": 0},
    },
}

ENGINE_CONFIG_SCHEMA: Dict[str, Any] = {
    "baseline_year": {"type": "integer", "required": False},
    "projection_years": {"type": "integer", "min": 1, "required": False},
    "payroll_taxes": {
        "type": "dict",
        "required": True,
        "schema": {
            "social_security_wage_bases": {
                "type": "dict",
                "required": True,
                "keysrules": {"type": "integer"},
                "valuesrules": {"type": "number", "min": 0},
            },
            "regimes": {
                "type": "list",
                "required": False,
                "schema": {
                    "type": "dict",
                    "schema": {
                        "name": {"type": "string", "required": True},
                        "rate": {"type": "number", "min": 0, "required": True},
                        "cap": {
                            "type": "string",
                            "allowed": ["none", "fixed", "social_security"],
                            "required": False,
                        },
                        "wage_base": {"type": "number", "min": 0, "nullable": True},
                    },
                },
            },
        },
    },
    "benefits": {"type": "dict", "required": False},
    "staff": {
        "type": "list",
        "required": False,
        "schema": {
            "type": "dict",
            "schema": {
                "name": {"type": "string", "required": True},
                "hourly_rate": {"type": "number", "min": 0, "required": True},
                "hours_per_week": {"type": "number", "min": 0, "required": True},
                "receives_benefits": {"type": "boolean", "required": False},
            },
        },
    },
    "medical_director": {"type": "dict", "required": False},
    "pay_schedule": {"type": "dict", "required": False},
    "consulting_services_default": {"type": "number", "min": 0, "required": False},
    "misc_employment_costs_default": {"type": "number", "min": 0, "required": False},
    "projection_defaults": {
        "type": "dict",
        "required": False,
        "keysrules": {"type": "string"},
        "valuesrules": _PROJECTION_SCHEMA,
    },
    "tolerances": {"type": "dict", "required": False},
    "historic_data": {
        "type": "list",
        "required": False,
        "schema": {
            "type": "dict",
            "schema": {
                "year": {"type": "integer", "required": True},
                "therapy_income": {"type": "number", "required": True},
                "non_employment_costs": {"type": "number", "required": True},
                "employee_payroll": {"type": "number", "nullable": True},
                "non_md_employment_costs": {"type": "number", "nullable": True},
                "locum_costs": {"type": "number", "nullable": True},
                "misc_employment_costs": {"type": "number", "nullable": True},
                "medical_director_hours": {"type": "number", "nullable": True},
                "prcs_medical_director_hours": {"type": "number", "nullable": True},
                "consulting_services_agreement": {"type": "number", "nullable": True},
                "description": {"type": "string", "nullable": True},
            },
        },
    },
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge override into base and return the result.
    """
    for key, val in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(val, dict):
            base[key] = deep_merge(base[key], val)
        else:
            base[key] = deepcopy(val)
    return base


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Loads configuration data from a YAML file.

    Args:
        config_path: Path pointing to the YAML configuration file.

    Returns:
        A dictionary containing the loaded configuration.

    Raises:
        ConfigLoadError: If the file cannot be found or parsed.
    """
    config_path = Path(config_path)
    logger.info(f"Attempting to load configuration from: {config_path}")

    if not config_path.is_file():
        logger.error(f"Configuration file not found at path: {config_path}")
        raise ConfigLoadError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.exception(f"Error parsing YAML configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Error parsing YAML file {config_path}") from e
    except OSError as e:
        logger.exception(f"Could not read configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Could not read config {config_path}") from e

    if not isinstance(config_data, dict):
        logger.error(f"Configuration file {config_path} did not parse into a dictionary.")
        raise ConfigLoadError(
            f"Invalid configuration format in {config_path}: Expected a dictionary."
        )

    logger.info(f"Successfully loaded configuration from {config_path}")
    return config_data


def resolve_extends(config_path: Union[str, Path], _seen: Optional[set] = None) -> Dict[str, Any]:
    """
    Load a YAML file, resolving an ``extends:`` key relative to the file's directory.

    The parent is loaded first and the child's keys are deep-merged on top.
    """
    config_path = Path(config_path)
    seen = set() if _seen is None else _seen
    resolved = config_path.resolve()
    if resolved in seen:
        raise ConfigLoadError(f"Circular extends detected at {config_path}")
    seen.add(resolved)

    cfg = load_yaml_config(config_path)
    parent = cfg.pop("extends", None)
    if not parent:
        return cfg

    parent_fp = Path(parent)
    if not parent_fp.is_absolute():
        parent_fp = Path(os.path.dirname(config_path)) / parent_fp
    if not parent_fp.exists():
        raise ConfigLoadError(f"Parent config '{parent}' not found for {config_path}")
    logger.debug(f"{config_path} extends {parent_fp}")
    return deep_merge(resolve_extends(parent_fp, seen), cfg)


def validate_config_data(config_data: Dict[str, Any], source: Any = "<mapping>") -> EngineConfig:
    """Schema-check a raw mapping with Cerberus, then build the typed config."""
    v = Validator(ENGINE_CONFIG_SCHEMA)
    if not v.validate(config_data):
        logger.error(f"Config validation failed for {source}: {v.errors}")
        raise ConfigLoadError(f"Config validation failed: {v.errors}")
    try:
        return EngineConfig.model_validate(config_data)
    except ValidationError as e:
        logger.error(f"Config model validation failed for {source}: {e}")
        raise ConfigLoadError(f"Invalid engine configuration in {source}: {e}") from e


def load_engine_config(config_path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Load and validate an engine configuration.

    With no path, the packaged ``default_config.yaml`` is used.

    Raises:
        ConfigLoadError: for missing, unparseable or invalid configuration.
    """
    path = DEFAULT_CONFIG_PATH if config_path is None else Path(config_path)
    config_data = resolve_extends(path)
    config = validate_config_data(config_data, path)
    logger.debug(
        f"Engine config loaded: baseline {config.baseline_year}, "
        f"{config.projection_years} projection years, {len(config.payroll_taxes.regimes)} tax regimes"
    )
    return config


@lru_cache(maxsize=1)
def get_default_config() -> EngineConfig:
    """The packaged configuration, loaded once per process."""
    return load_engine_config()


# Expose for import
__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG_PATH",
    "deep_merge",
    "get_default_config",
    "load_engine_config",
    "load_yaml_config",
    "resolve_extends",
    "validate_config_data",
]
