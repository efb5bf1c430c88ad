"""Wiring of one documentation run: config -> logging -> converter -> plugins -> serializer."""

from __future__ import annotations

from pathlib import Path

from docgraph.config.models import DocGraphConfig
from docgraph.converter.converter import Converter
from docgraph.core.errors import ConfigError
from docgraph.core.logging import configure_logging, get_logger
from docgraph.models.project import ProjectReflection
from docgraph.plugins.loader import Plugin, load_plugins
from docgraph.semantic.model import SemanticModel
from docgraph.serialization.serializer import Serializer

log = get_logger("application")


class Application:
    """Owns the converter, its plugins and the serializer for a configuration.

    Args:
        config: Resolved configuration. Defaults are used when omitted.
        configure_logs: Configure structlog from ``config.logging``. Callers
            that set up logging themselves (the CLI, tests) pass False.
    """

    def __init__(self, config: DocGraphConfig | None = None, *, configure_logs: bool = True) -> None:
        self.config = config or DocGraphConfig()
        if configure_logs:
            configure_logging(config=self.config.logging)
        self.converter = Converter(self.config.converter)
        self.serializer = Serializer(self.config.serializer)
        self.plugins: list[Plugin] = load_plugins(self.converter)

    async def convert(self, model: SemanticModel) -> ProjectReflection:
        entry_points = self.config.converter.entry_points or None
        return await self.converter.convert(model, entry_points)

    def to_json(self, project: ProjectReflection) -> str:
        return self.serializer.project_to_json(project)

    def write_json(self, project: ProjectReflection, path: Path | None = None) -> Path:
        """Write the project to ``path``, or to the configured ``serializer.out``."""
        if path is None and not self.config.serializer.out:
            raise ConfigError.missing_required("serializer.out")
        target = path or Path(self.config.serializer.out)
        log.info("application.write", path=str(target))
        return self.serializer.write(project, target)
