"""Core module exports."""

from docgraph.core.errors import (
    ConfigError,
    ConversionError,
    DocGraphError,
    ErrorCode,
    InternalError,
    ModelError,
    RegistryError,
    SemanticModelError,
    SerializationError,
)
from docgraph.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "DocGraphError",
    "ConfigError",
    "ConversionError",
    "ErrorCode",
    "InternalError",
    "ModelError",
    "RegistryError",
    "SemanticModelError",
    "SerializationError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
