"""Config module exports."""

from docgraph.config.loader import DocGraphSettings, load_config
from docgraph.config.models import (
    ConverterConfig,
    DocGraphConfig,
    LoggingConfig,
    LogOutputConfig,
    SerializerConfig,
)

__all__ = [
    "load_config",
    "DocGraphConfig",
    "DocGraphSettings",
    "ConverterConfig",
    "SerializerConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
