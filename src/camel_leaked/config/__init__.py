"""Configuration loading, schema, and defaults."""

from camel_leaked.config.loader import ConfigError, load_config
from camel_leaked.config.schema import (
    CamelLeakedConfig,
    NotifyConfig,
    OutputConfig,
    ScanConfig,
)

__all__ = [
    "CamelLeakedConfig",
    "ConfigError",
    "NotifyConfig",
    "OutputConfig",
    "ScanConfig",
    "load_config",
]
