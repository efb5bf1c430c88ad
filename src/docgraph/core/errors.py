"""docgraph error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Conversion (semantic collaborator broke an assumption)
- 4xxx: Model (reflection tree invariants)
- 5xxx: Registry (converter and worker registration)
- 6xxx: Serialization
- 7xxx: Semantic model input
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Conversion (3xxx)
    CONVERSION_SIGNATURE_UNRESOLVED = 3001
    CONVERSION_PARAMETER_UNDECLARED = 3002
    CONVERSION_ENUM_VALUE_MISSING = 3003
    CONVERSION_SYMBOL_UNRESOLVED = 3004
    CONVERSION_NOT_IN_PROGRESS = 3005

    # Model (4xxx)
    MODEL_ALREADY_CONTAINED = 4001
    MODEL_NOT_A_CHILD = 4002
    MODEL_INVALID_CHILD_KIND = 4003
    MODEL_INVALID_KIND_VALUE = 4004

    # Registry (5xxx)
    REGISTRY_DUPLICATE_CONVERTER = 5001
    REGISTRY_INVALID_WORKER_ORDER = 5002
    REGISTRY_UNKNOWN_EVENT = 5003

    # Serialization (6xxx)
    SERIALIZATION_NO_WORKERS = 6001
    SERIALIZATION_OUTPUT_FAILED = 6002

    # Semantic model (7xxx)
    SEMANTIC_PARSE_ERROR = 7001
    SEMANTIC_UNKNOWN_SYMBOL = 7002
    SEMANTIC_INVALID_DECLARATION = 7003

    # Internal (9xxx)
    INTERNAL_PLUGIN_LOAD_FAILED = 9002


@dataclass(frozen=True, eq=False)
class DocGraphError(Exception):
    """Base error with structured context for CLI and JSON reporting."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DocGraphError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ConversionError(DocGraphError):
    """The semantic model returned something conversion cannot represent.

    These are fatal: they abort the whole conversion pass and are never retried.
    """

    @classmethod
    def signature_unresolved(cls, name: str) -> "ConversionError":
        return cls(
            code=ErrorCode.CONVERSION_SIGNATURE_UNRESOLVED,
            message=f"Failed to get a signature for {name}",
            details={"name": name},
        )

    @classmethod
    def parameter_undeclared(cls, signature: str, parameter: str) -> "ConversionError":
        return cls(
            code=ErrorCode.CONVERSION_PARAMETER_UNDECLARED,
            message=f"Parameter '{parameter}' of {signature} has no value declaration",
            details={"signature": signature, "parameter": parameter},
        )

    @classmethod
    def enum_value_missing(cls, member: str) -> "ConversionError":
        return cls(
            code=ErrorCode.CONVERSION_ENUM_VALUE_MISSING,
            message=f"Failed to get the constant value of enum member {member}",
            details={"member": member},
        )

    @classmethod
    def symbol_unresolved(cls, what: str, text: str) -> "ConversionError":
        return cls(
            code=ErrorCode.CONVERSION_SYMBOL_UNRESOLVED,
            message=f"{what} failed to get a symbol for {text}",
            details={"what": what, "text": text},
        )

    @classmethod
    def not_in_progress(cls, accessor: str) -> "ConversionError":
        return cls(
            code=ErrorCode.CONVERSION_NOT_IN_PROGRESS,
            message=f"{accessor} may only be accessed while conversion is in progress",
            details={"accessor": accessor},
        )


class ModelError(DocGraphError):
    """Reflection tree invariant violations."""

    @classmethod
    def already_contained(cls, child: str, container: str) -> "ModelError":
        return cls(
            code=ErrorCode.MODEL_ALREADY_CONTAINED,
            message=f"{child} was added to two containers simultaneously",
            details={"child": child, "container": container},
        )

    @classmethod
    def not_a_child(cls, child: str, container: str) -> "ModelError":
        return cls(
            code=ErrorCode.MODEL_NOT_A_CHILD,
            message=f"{child} is not a child of {container}",
            details={"child": child, "container": container},
        )

    @classmethod
    def invalid_child_kind(cls, child: str, kind: str, container: str) -> "ModelError":
        return cls(
            code=ErrorCode.MODEL_INVALID_CHILD_KIND,
            message=f"{container} cannot contain {child} of kind {kind}",
            details={"child": child, "kind": kind, "container": container},
        )

    @classmethod
    def invalid_kind_value(cls, value: int) -> "ModelError":
        return cls(
            code=ErrorCode.MODEL_INVALID_KIND_VALUE,
            message=f"{value} is not a single kind",
            details={"value": value},
        )


class RegistryError(DocGraphError):
    """Converter, worker and event registration errors."""

    @classmethod
    def duplicate_converter(cls, registry: str, kind: str) -> "RegistryError":
        return cls(
            code=ErrorCode.REGISTRY_DUPLICATE_CONVERTER,
            message=f"Duplicate {registry} converter for {kind}",
            details={"registry": registry, "kind": kind},
        )

    @classmethod
    def invalid_worker_order(cls, order: int, minimum: int) -> "RegistryError":
        return cls(
            code=ErrorCode.REGISTRY_INVALID_WORKER_ORDER,
            message=f"Serialize worker order {order} must be greater than {minimum}",
            details={"order": order, "minimum": minimum},
        )

    @classmethod
    def unknown_event(cls, event: str) -> "RegistryError":
        return cls(
            code=ErrorCode.REGISTRY_UNKNOWN_EVENT,
            message=f"Unknown event: {event}",
            details={"event": event},
        )


class SerializationError(DocGraphError):
    """Serialization pipeline errors."""

    @classmethod
    def no_workers(cls, value: str) -> "SerializationError":
        return cls(
            code=ErrorCode.SERIALIZATION_NO_WORKERS,
            message=f"No serialize workers registered for {value}",
            details={"value": value},
        )

    @classmethod
    def output_failed(cls, path: str, reason: str) -> "SerializationError":
        return cls(
            code=ErrorCode.SERIALIZATION_OUTPUT_FAILED,
            message=f"Failed to write {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class SemanticModelError(DocGraphError):
    """Errors in a program description handed to the in-memory semantic model."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "SemanticModelError":
        return cls(
            code=ErrorCode.SEMANTIC_PARSE_ERROR,
            message=f"Failed to parse program at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unknown_symbol(cls, ref: str) -> "SemanticModelError":
        return cls(
            code=ErrorCode.SEMANTIC_UNKNOWN_SYMBOL,
            message=f"Unknown symbol reference: {ref}",
            details={"ref": ref},
        )

    @classmethod
    def invalid_declaration(cls, where: str, reason: str) -> "SemanticModelError":
        return cls(
            code=ErrorCode.SEMANTIC_INVALID_DECLARATION,
            message=f"Invalid declaration at {where}: {reason}",
            details={"where": where, "reason": reason},
        )


class InternalError(DocGraphError):
    """Errors in the plugin environment rather than in the converted program."""

    @classmethod
    def plugin_load_failed(cls, plugin: str, reason: str) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_PLUGIN_LOAD_FAILED,
            message=f"Failed to load plugin {plugin}: {reason}",
            details={"plugin": plugin, "reason": reason},
        )
