"""Path management utilities for contract-verifier library."""

import os
from pathlib import Path
from typing import Optional, Union

CONFIG_PATH_ENV = "CONTRACT_VERIFIER_CONFIG"


def get_default_config_dir() -> Path:
    """
    Get default configuration directory (working directory).

    Returns:
        Path to ./.contract-verifier
    """
    return Path.cwd() / ".contract-verifier"


def get_config_path(config_path: Optional[Union[Path, str]] = None) -> Path:
    """
    Get the network configuration file path.

    Args:
        config_path: Explicit path; otherwise $CONTRACT_VERIFIER_CONFIG,
                     otherwise ./.contract-verifier/networks.json

    Returns:
        Absolute path to the networks JSON file
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_PATH_ENV)

    if config_path is None:
        return get_default_config_dir() / "networks.json"

    return Path(config_path).absolute()
