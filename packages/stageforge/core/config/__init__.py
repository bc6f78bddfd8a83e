"""Configuration management for StageForge."""

from stageforge.core.config.loader import (
    configure_logging_from_config,
    load_app_config,
    load_config,
)
from stageforge.core.config.models import (
    AppConfig,
    CaptureConfig,
    LoggingConfig,
    NamingConfig,
    ProductionConfig,
    RendererConfig,
)

__all__ = [
    # Loaders
    "load_config",
    "load_app_config",
    "configure_logging_from_config",
    # Models
    "AppConfig",
    "CaptureConfig",
    "LoggingConfig",
    "NamingConfig",
    "ProductionConfig",
    "RendererConfig",
]
