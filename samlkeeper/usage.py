import os
import yaml
from typing import Any, Dict, Mapping, Optional
from .config import SamlKeeperConfig

# Environment variables honoured as configuration overrides
ENV_OVERRIDES = {
    "AWS_SHARED_CREDENTIALS_FILE": "credentials_file",
    "AWS_PROFILE": "profile",
    "AWS_ROLE_ARN": "role_arn",
    "AWS_SESSION_DURATION": "session_duration",
    "AWS_REGION": "region",
}


def load_yaml_config(path: str) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Dictionary containing the loaded configuration, or empty dict if file not found
    """
    try:
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"Config file '{path}' not found. Continuing without it.")
        return {}


def load_env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Collect configuration overrides from environment variables.

    Empty variables are ignored.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Dictionary of config field names to values
    """
    environ = os.environ if environ is None else environ
    return {
        field: environ[variable]
        for variable, field in ENV_OVERRIDES.items()
        if environ.get(variable)
    }


def merge_configs(yaml_config: Dict[str, Any], overrides: Mapping[str, Any]) -> SamlKeeperConfig:
    """
    Merge YAML configuration with overrides and validate the result.

    Args:
        yaml_config: Configuration loaded from YAML file
        overrides: Values taking precedence over YAML (environment, caller arguments)

    Returns:
        Validated SamlKeeperConfig object

    Raises:
        ValueError: If configuration validation fails
    """
    # Start with YAML
    merged = yaml_config.copy()

    # Apply overrides (only known fields that were actually provided)
    merged.update({
        k: v for k, v in overrides.items()
        if k in SamlKeeperConfig.model_fields and v is not None
    })

    # Validate and return final config (will raise if values have wrong types)
    return SamlKeeperConfig(**merged)
