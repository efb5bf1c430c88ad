"""Conversion engine: semantic model -> reflection tree.

The module converter is not a registered converter. Each entry file becomes a
ModuleReflection and its exports are walked in two passes: first the symbols
declared in the file itself, then the re-exports, so that a re-exported
symbol turns into a ReferenceReflection whenever its target was already
documented.
"""

from __future__ import annotations

import asyncio
import posixpath
import re
import time
from collections.abc import Sequence
from contextvars import ContextVar

from docgraph.config.models import ConverterConfig
from docgraph.converter.comments import get_comment_for_nodes
from docgraph.converter.context import Context, ConversionRun
from docgraph.converter.events import EventBus
from docgraph.converter.merge import MergeGroup, classify_merge
from docgraph.converter.nodes import add_node_converters
from docgraph.converter.registry import (
    KindRegistry,
    OrderedRegistry,
    ReflectionConverter,
    ResolvedTypeConverter,
    TypeNodeConverter,
)
from docgraph.converter.type_nodes import add_type_node_converters
from docgraph.converter.types import add_type_converters
from docgraph.core.errors import ConversionError
from docgraph.core.logging import clear_run_id, get_logger, set_run_id
from docgraph.models.ids import IdAllocator
from docgraph.models.project import ProjectReflection
from docgraph.models.reflections import ContainerReflection, ModuleReflection, ReferenceReflection
from docgraph.models.types import IntrinsicType, Type, UnknownType
from docgraph.semantic.model import (
    DeclarationKind,
    ResolvedType,
    SemanticModel,
    Symbol,
    TypeNode,
)

log = get_logger("converter")

_SOURCE_EXTENSION = re.compile(r"(\.d)?\.[tj]sx?$")

_current_run: ContextVar[ConversionRun | None] = ContextVar("conversion_run", default=None)


class Converter:
    """Walks a semantic model and builds the project reflection.

    Converters for reflections, type nodes and resolved types are held in
    registries; plugins may add their own before calling ``convert``.
    Lifecycle events are published on ``self.events``.
    """

    EVENT_BEGIN = "begin"
    EVENT_MODULE_CREATED = "module_created"
    EVENT_REFLECTION_CREATED = "reflection_created"
    EVENT_FINALIZE_NAMES = "finalize_names"
    EVENT_END = "end"

    EVENTS = (
        EVENT_BEGIN,
        EVENT_MODULE_CREATED,
        EVENT_REFLECTION_CREATED,
        EVENT_FINALIZE_NAMES,
        EVENT_END,
    )

    def __init__(self, config: ConverterConfig | None = None) -> None:
        self.config = config or ConverterConfig()
        self.events = EventBus(self.EVENTS)

        self._reflection_converters: KindRegistry[DeclarationKind, ReflectionConverter] = (
            KindRegistry("reflection")
        )
        self._type_node_converters: KindRegistry = KindRegistry("type node")
        self._type_converters = OrderedRegistry()

        add_node_converters(self)
        add_type_node_converters(self)
        add_type_converters(self)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def add_reflection_converter(self, converter: ReflectionConverter) -> None:
        self._reflection_converters.register(converter.kinds, converter)

    def add_type_node_converter(self, converter: TypeNodeConverter) -> None:
        self._type_node_converters.register(converter.kinds, converter)

    def add_type_converter(self, converter: ResolvedTypeConverter) -> None:
        self._type_converters.register(converter)

    # -------------------------------------------------------------------------
    # Run state
    # -------------------------------------------------------------------------

    @property
    def run(self) -> ConversionRun:
        """State of the conversion in progress in the current task."""
        run = _current_run.get()
        if run is None:
            raise ConversionError.not_in_progress("run")
        return run

    @property
    def model(self) -> SemanticModel:
        return self.run.model

    @property
    def project(self) -> ProjectReflection:
        return self.run.project

    @property
    def ids(self) -> IdAllocator:
        return self.run.ids

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    async def convert(
        self, model: SemanticModel, entry_points: Sequence[str] | None = None
    ) -> ProjectReflection:
        """Convert the given entry files of ``model`` into a new project.

        Every call allocates ids from a fresh counter starting at 0, so
        converting the same input twice yields identical ids. The run state
        lives in a context variable, so calls overlapping in separate tasks
        do not share it.
        """
        start = time.monotonic()
        run_id = set_run_id()
        ids = IdAllocator()
        name = self.config.name or model.name or posixpath.basename(model.root_dir) or "project"
        project = ProjectReflection(ids.next_id(), name)
        run = ConversionRun(model, project, ids)
        token = _current_run.set(run)
        try:
            log.info("converter.begin", project=name, run_id=run_id)
            await self.events.emit(self.EVENT_BEGIN, project, model)

            context = Context(self, run, project)
            paths = list(entry_points) if entry_points else [f.source_file for f in model.entry_files()]
            for path in paths:
                await self._convert_entry(context, path)

            await self.events.emit(self.EVENT_FINALIZE_NAMES, project)
            await self.events.emit(self.EVENT_END, project)

            log.info(
                "converter.end",
                reflections=len(project.reflections),
                elapsed_ms=round((time.monotonic() - start) * 1000, 1),
            )
            return project
        finally:
            _current_run.reset(token)
            clear_run_id()

    def module_name(self, path: str) -> str:
        """Module name for a source path: relative to the root, no extension."""
        root = self.model.root_dir or "."
        relative = posixpath.relpath(path.replace("\\", "/"), root.replace("\\", "/"))
        return _SOURCE_EXTENSION.sub("", relative)

    async def _convert_entry(self, context: Context, path: str) -> None:
        model = context.model
        entry_start = time.monotonic()

        source_file = model.get_source_file(path)
        if source_file is None:
            log.error("converter.entry.not_found", entry=path)
            return
        file_symbol = model.get_source_file_symbol(source_file)
        if file_symbol is None:
            log.error("converter.entry.not_a_module", entry=path)
            return

        module = ModuleReflection(context.next_id(), self.module_name(source_file.source_file))
        module.comment = get_comment_for_nodes([source_file])
        context.project.register(module, file_symbol)
        context.project.add_child(module)
        await self.events.emit(self.EVENT_MODULE_CREATED, module, source_file)

        module_context = context.with_container(module)
        exports = [
            (model.get_aliased_symbol(symbol) if symbol.is_alias else symbol, symbol)
            for symbol in model.get_exports_of_module(file_symbol)
        ]

        def is_local(target: Symbol) -> bool:
            declarations = model.get_declarations(target)
            return bool(declarations) and declarations[0].source_file == source_file.source_file

        # First pass: symbols declared in this file.
        for target, _ in exports:
            if is_local(target):
                await self.convert_symbol(module_context, target)
        first_ms = round((time.monotonic() - entry_start) * 1000, 1)
        log.debug("converter.entry.first_pass", module=module.name, elapsed_ms=first_ms)

        # Second pass: re-exports, converted through the exporting alias.
        second_start = time.monotonic()
        for target, original in exports:
            if not is_local(target):
                await self.convert_symbol(module_context, original)
        log.debug(
            "converter.entry.second_pass",
            module=module.name,
            elapsed_ms=round((time.monotonic() - second_start) * 1000, 1),
        )

    # -------------------------------------------------------------------------
    # Symbols
    # -------------------------------------------------------------------------

    async def convert_symbol(self, context: Context, symbol: Symbol) -> None:
        """Convert one symbol into reflections added to ``context.container``.

        A symbol that was already converted becomes a ReferenceReflection to
        the first reflection produced for it. Otherwise its declarations are
        grouped by the merge policy and each group is converted concurrently.
        """
        log.debug("converter.symbol", symbol=symbol.name)
        override_name = symbol.name if symbol.is_alias else None
        if symbol.is_alias:
            symbol = context.model.get_aliased_symbol(symbol)

        existing = context.project.get_by_symbol(symbol)
        if existing:
            reference = ReferenceReflection(context.next_id(), override_name or symbol.name, existing[0])
            context.project.register(reference, symbol)
            # Only re-exports reach this point, and modules accept references.
            context.container.add_child(reference)
            return

        declarations = context.model.get_declarations(symbol)
        decision = classify_merge(d.kind for d in declarations)
        await asyncio.gather(
            *(
                self._convert_group(context, symbol, group, declarations, override_name)
                for group in decision.groups
            )
        )

    async def _convert_group(
        self,
        context: Context,
        symbol: Symbol,
        group: MergeGroup,
        declarations: list,
        override_name: str | None,
    ) -> None:
        converter = self._reflection_converters.get(group.kind)
        if converter is None:
            log.warning(
                "converter.missing_converter",
                symbol=symbol.name,
                declaration_kind=group.kind.value,
            )
            return

        nodes = [d for kind in group.node_kinds for d in declarations if d.kind == kind]
        reflection = await converter.convert(context, symbol, nodes)
        context.project.register(reflection, symbol)
        reflection.comment = get_comment_for_nodes(nodes)
        if override_name is not None:
            reflection.name = override_name
        context.container.add_child(reflection)
        await self.events.emit(self.EVENT_REFLECTION_CREATED, reflection, symbol, nodes)

        if converter.convert_children is not None and context.project.is_alive(reflection):
            await converter.convert_children(context, reflection, symbol, nodes)

    async def convert_children(
        self, context: Context, container: ContainerReflection, symbols: Sequence[Symbol]
    ) -> None:
        """Convert ``symbols`` concurrently into ``container``."""
        child_context = context.with_container(container)
        await asyncio.gather(*(self.convert_symbol(child_context, child) for child in symbols))

    # -------------------------------------------------------------------------
    # Types
    # -------------------------------------------------------------------------

    def convert_type(self, node_or_type: TypeNode | ResolvedType | None) -> Type:
        """Convert a type node, or a resolved type when no node exists.

        Never raises for an unsupported type: the result is an UnknownType
        carrying the display text, and a warning is logged.
        """
        if node_or_type is None:
            return IntrinsicType("any")
        if isinstance(node_or_type, TypeNode):
            return self._convert_type_node(node_or_type)
        return self._convert_resolved_type(node_or_type)

    def _convert_type_node(self, node: TypeNode) -> Type:
        converter = self._type_node_converters.get(node.kind)
        if converter is None:
            log.warning("converter.missing_type_converter", type_node_kind=node.kind.value, text=node.text)
            return UnknownType(node.text)
        return converter.convert(self, node)

    def _convert_resolved_type(self, type: ResolvedType) -> Type:
        run = self.run
        model = run.model
        symbol = type.symbol
        if symbol is not None and type.alias_symbol is None:
            if symbol in run.seen_type_symbols:
                text = model.type_to_string(type)
                log.debug("converter.recursive_type", type=text)
                return UnknownType(text)
            run.seen_type_symbols.add(symbol)
        else:
            symbol = None

        try:
            converter = self._type_converters.find(type)
            if converter is None:
                text = model.type_to_string(type)
                log.warning("converter.unknown_type", type=text)
                return UnknownType(text)
            return converter.convert(self, type)
        finally:
            if symbol is not None:
                run.seen_type_symbols.discard(symbol)

    def get_symbol_at_location(self, node: TypeNode) -> Symbol | None:
        """Symbol a type node names, with import aliases followed."""
        symbol = self.model.get_symbol_at_location(node)
        if symbol is None:
            return None
        return self.model.get_aliased_symbol(symbol) if symbol.is_alias else symbol
