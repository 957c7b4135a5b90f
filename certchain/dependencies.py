"""Factories wiring configuration to services."""

import logging
from pathlib import Path
from typing import Optional, Union

from certchain.models.config import AppConfig
from certchain.services.issuer_service import ChainIssuer
from certchain.services.yaml_service import YAMLService
from certchain.utils.logger import setup_logger

logger = logging.getLogger("certchain")

DEFAULT_CONFIG_PATH = Path("config.yaml")


def get_config(config_path: Union[str, Path, None] = None) -> AppConfig:
    """
    Get application configuration.

    Args:
        config_path: YAML config file; defaults to ./config.yaml

    Returns:
        Application configuration, defaults when the file does not exist
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        logger.debug(f"No config file at {path}, using defaults")
        return AppConfig()

    config_data = YAMLService.load_yaml(path)
    return AppConfig(**config_data)


def get_issuer(config: Optional[AppConfig] = None) -> ChainIssuer:
    """
    Get chain issuer instance with the package logger configured.

    Args:
        config: Application configuration; loaded via get_config when omitted

    Returns:
        Chain issuer
    """
    config = config or get_config()
    setup_logger(config)
    return ChainIssuer(config.issuer)
