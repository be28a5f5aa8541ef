from .loader import CompareConfig, ConfigError, ErrorLogConfig, load_config, resolve_config

__all__ = [
    "CompareConfig",
    "ConfigError",
    "ErrorLogConfig",
    "load_config",
    "resolve_config",
]
