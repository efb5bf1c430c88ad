"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DOCGRAPH__SECTION__KEY)
3. Repo YAML (.docgraph/config.yaml)
4. Global YAML (~/.config/docgraph/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DOCGRAPH__<SECTION>__<KEY>=<VALUE>

Examples:
    DOCGRAPH__LOGGING__LEVEL=DEBUG
    DOCGRAPH__CONVERTER__STRIP_INTERNAL=true
    DOCGRAPH__SERIALIZER__INDENT=4
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from docgraph.config.constants import DEFAULT_SORT_ORDER

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

SortStrategy = Literal["kind", "alphabetical", "kind-then-alphabetical", "none"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DOCGRAPH__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every converted symbol.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ConverterConfig(BaseModel):
    """Conversion configuration.

    Env vars:
        DOCGRAPH__CONVERTER__NAME: Project name written to the root reflection
        DOCGRAPH__CONVERTER__STRIP_INTERNAL: Remove reflections tagged @internal
    """

    name: str = Field(
        default="",
        description="Project name. Empty means the program description's own name.",
    )
    entry_points: list[str] = Field(
        default_factory=list,
        description="Entry files to document. Empty means every entry file of the program.",
    )
    strip_internal: bool = Field(
        default=False,
        description="Remove reflections whose comment carries an @internal tag.",
    )
    exclude_tags: list[str] = Field(
        default_factory=list,
        description="Extra comment tags stripped from every comment, without the leading @.",
    )
    sort: SortStrategy = Field(
        default="kind-then-alphabetical",
        description="How container children are ordered before serialization.",
    )
    sort_order: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SORT_ORDER),
        description="Reflection kind names, in the order kinds are listed by the sort plugin.",
    )
    plugins: list[str] = Field(
        default_factory=list,
        description="Extra plugins to load, as dotted 'module:attribute' paths.",
    )
    disable_plugins: list[str] = Field(
        default_factory=list,
        description="Names of built-in or entry-point plugins that should not be loaded.",
    )

    @field_validator("exclude_tags")
    @classmethod
    def strip_tag_prefix(cls, v: list[str]) -> list[str]:
        return [tag.lstrip("@").lower() for tag in v]


class SerializerConfig(BaseModel):
    """JSON output configuration.

    Env vars:
        DOCGRAPH__SERIALIZER__OUT: Output path (empty writes to stdout)
        DOCGRAPH__SERIALIZER__INDENT: JSON indentation
    """

    out: str = Field(
        default="",
        description="Path of the JSON file to write. Empty writes to stdout.",
    )
    indent: int | None = Field(
        default=2,
        description="JSON indentation. None writes compact output.",
    )
    sort_keys: bool = Field(
        default=False,
        description="Sort object keys in the JSON output.",
    )

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError(f"Indent must be >= 0, got {v}")
        return v


class DocGraphConfig(BaseModel):
    """Root configuration model (for type hints)."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    converter: ConverterConfig = Field(default_factory=ConverterConfig)
    serializer: SerializerConfig = Field(default_factory=SerializerConfig)
