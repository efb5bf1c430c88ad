"""Projection of reflections and types to plain JSON-compatible objects.

Every reflection kind and every type kind has a list of serialize workers,
ordered by (order, registration). ``to_object`` folds them over a partial
result: each worker gets a copy of the accumulator and returns the updated
one. A base worker at ``BASE_WORKER_ORDER`` always runs first and fills the
fields shared by every reflection or type.

Empty lists serialize to ``OMIT`` and any key holding ``OMIT`` is dropped
from the final object, so output never carries ``[]``. ``None`` is kept:
a broken reference serializes its ``target`` as ``None`` (JSON ``null``).
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from docgraph.config.constants import BASE_WORKER_ORDER
from docgraph.config.models import SerializerConfig
from docgraph.core.errors import RegistryError, SerializationError
from docgraph.core.logging import get_logger
from docgraph.models.comments import Comment, CommentTag
from docgraph.models.kinds import REFLECTION_KIND_ALL, TYPE_KIND_ALL, ReflectionKind, TypeKind, kind_string
from docgraph.models.reflections import ContainerReflection, Reflection
from docgraph.models.types import Type

log = get_logger("serialization")


class _Omit:
    """Marker for a field that must not appear in the output."""

    _instance: _Omit | None = None

    def __new__(cls) -> _Omit:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMIT"

    def __bool__(self) -> bool:
        return False


OMIT = _Omit()

# (serializer, value, partial) -> partial
WorkerFn = Callable[["Serializer", Any, dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class SerializeWorker:
    kinds: int
    order: int
    serialize: WorkerFn


class _WorkerRegistry:
    def __init__(self) -> None:
        self._workers: list[tuple[int, int, SerializeWorker]] = []
        self._sequence = 0

    def add(self, worker: SerializeWorker) -> None:
        self._workers.append((worker.order, self._sequence, worker))
        self._sequence += 1
        self._workers.sort(key=lambda entry: (entry[0], entry[1]))

    def for_kind(self, kind: int) -> list[SerializeWorker]:
        return [worker for _, _, worker in self._workers if worker.kinds & kind]

    def __len__(self) -> int:
        return len(self._workers)


# =============================================================================
# Base workers
# =============================================================================


def _serialize_reflection_base(
    serializer: Serializer, reflection: Reflection, result: dict[str, Any]
) -> dict[str, Any]:
    result["id"] = reflection.id
    result["name"] = reflection.name
    result["kind"] = int(reflection.kind)
    result["kindString"] = reflection.kind_string
    if reflection.is_renamed:
        result["originalName"] = reflection.original_name
    result["flags"] = reflection.flags.to_dict()
    if reflection.comment is not None:
        result["comment"] = serializer.to_object(reflection.comment)
    if isinstance(reflection, ContainerReflection):
        result["children"] = serializer.to_object(reflection.children)
    result.update(reflection.serialize(serializer))
    return result


def _serialize_type_base(serializer: Serializer, type: Type, result: dict[str, Any]) -> dict[str, Any]:
    result["kind"] = int(type.kind)
    result["kindString"] = kind_string(type.kind, TypeKind)
    result.update(type.serialize(serializer))
    return result


def _serialize_tag(tag: CommentTag) -> dict[str, Any]:
    result: dict[str, Any] = {"tagName": tag.tag_name}
    if tag.param_name:
        result["paramName"] = tag.param_name
    result["text"] = tag.text
    return result


def _serialize_comment(comment: Comment) -> dict[str, Any] | _Omit:
    result: dict[str, Any] = {}
    if comment.short_text:
        result["shortText"] = comment.short_text
    if comment.text:
        result["text"] = comment.text
    if comment.returns:
        result["returns"] = comment.returns
    if comment.tags:
        result["tags"] = [_serialize_tag(tag) for tag in comment.tags]
    return result or OMIT


# =============================================================================
# Serializer
# =============================================================================


class Serializer:
    """Worker registry plus the JSON writer."""

    def __init__(self, config: SerializerConfig | None = None) -> None:
        self.config = config or SerializerConfig()
        self._reflection_workers = _WorkerRegistry()
        self._type_workers = _WorkerRegistry()
        self._reflection_workers.add(
            SerializeWorker(REFLECTION_KIND_ALL, BASE_WORKER_ORDER, _serialize_reflection_base)
        )
        self._type_workers.add(SerializeWorker(TYPE_KIND_ALL, BASE_WORKER_ORDER, _serialize_type_base))

    def add_worker(self, kinds: ReflectionKind | TypeKind, worker: WorkerFn, order: int = 0) -> None:
        """Register ``worker`` for every kind in the ``kinds`` mask.

        Raises:
            RegistryError: If ``order`` would run before the base worker.
        """
        if order <= BASE_WORKER_ORDER:
            raise RegistryError.invalid_worker_order(order, BASE_WORKER_ORDER)
        registry = self._type_workers if isinstance(kinds, TypeKind) else self._reflection_workers
        registry.add(SerializeWorker(int(kinds), order, worker))

    def workers_for(self, value: Reflection | Type) -> list[SerializeWorker]:
        registry = self._type_workers if isinstance(value, Type) else self._reflection_workers
        return registry.for_kind(value.kind)

    def to_object(self, value: Any, seed: Mapping[str, Any] | None = None) -> Any:
        """Project ``value`` to JSON-compatible data.

        Raises:
            SerializationError: If ``value`` is of a kind nothing can serialize.
        """
        if value is None or isinstance(value, (str, bool, int, float)):
            return value
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (list, tuple)):
            if not value:
                return OMIT
            return [self.to_object(item) for item in value]
        if isinstance(value, (Reflection, Type)):
            return self._fold(value, seed)
        if isinstance(value, Comment):
            return _serialize_comment(value)
        if isinstance(value, Mapping):
            return _strip_omitted({str(k): self.to_object(v) for k, v in value.items()})
        raise SerializationError.no_workers(type(value).__name__)

    def _fold(self, value: Reflection | Type, seed: Mapping[str, Any] | None) -> dict[str, Any]:
        workers = self.workers_for(value)
        if not workers:
            raise SerializationError.no_workers(repr(value))
        result: dict[str, Any] = dict(seed or {})
        for worker in workers:
            result = worker.serialize(self, value, dict(result))
        return _strip_omitted(result)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def project_to_json(self, project: Reflection) -> str:
        data = self.to_object(project)
        return json.dumps(data, indent=self.config.indent, sort_keys=self.config.sort_keys)

    def write(self, project: Reflection, path: Path) -> Path:
        """Write the project JSON to ``path``, creating parent directories."""
        text = self.project_to_json(project)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text + "\n", encoding="utf-8")
        except OSError as e:
            raise SerializationError.output_failed(str(path), str(e)) from e
        log.info("serializer.written", path=str(path), bytes=len(text))
        return path


def _strip_omitted(result: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in result.items() if value is not OMIT}
