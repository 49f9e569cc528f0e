"""Configuration module for OdinKit.

This module assembles the acquisition request from defaults, odinkit.yaml,
INPUT_* environment variables and command-line flags.
"""

from odinkit.config.inputs import (
    AcquisitionRequest,
    OdinKitConfig,
    DEFAULTS,
    DEFAULT_REPOSITORY,
    load_config,
    parse_bool,
)

__all__ = [
    "AcquisitionRequest",
    "OdinKitConfig",
    "DEFAULTS",
    "DEFAULT_REPOSITORY",
    "load_config",
    "parse_bool",
]
