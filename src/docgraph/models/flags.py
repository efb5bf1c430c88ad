"""Reflection modifier flags."""

from __future__ import annotations

from enum import IntFlag


class ReflectionFlag(IntFlag):
    NONE = 0
    PRIVATE = 0x1
    PROTECTED = 0x2
    PUBLIC = 0x4
    STATIC = 0x8
    EXPORTED = 0x10
    EXPORT_ASSIGNMENT = 0x20
    EXTERNAL = 0x40
    OPTIONAL = 0x80
    DEFAULT_VALUE = 0x100
    REST = 0x200
    CONSTRUCTOR_PROPERTY = 0x400
    ABSTRACT = 0x800
    CONST = 0x1000
    LET = 0x2000
    READONLY = 0x4000


_VISIBILITY = ReflectionFlag.PRIVATE | ReflectionFlag.PROTECTED | ReflectionFlag.PUBLIC

# Serialized name of each flag, in output order. DEFAULT_VALUE is never emitted.
_SERIALIZED_NAMES: tuple[tuple[ReflectionFlag, str], ...] = (
    (ReflectionFlag.PRIVATE, "isPrivate"),
    (ReflectionFlag.PROTECTED, "isProtected"),
    (ReflectionFlag.PUBLIC, "isPublic"),
    (ReflectionFlag.STATIC, "isStatic"),
    (ReflectionFlag.EXPORTED, "isExported"),
    (ReflectionFlag.EXTERNAL, "isExternal"),
    (ReflectionFlag.OPTIONAL, "isOptional"),
    (ReflectionFlag.REST, "isRest"),
    (ReflectionFlag.EXPORT_ASSIGNMENT, "hasExportAssignment"),
    (ReflectionFlag.CONSTRUCTOR_PROPERTY, "isConstructorProperty"),
    (ReflectionFlag.ABSTRACT, "isAbstract"),
    (ReflectionFlag.CONST, "isConst"),
    (ReflectionFlag.LET, "isLet"),
    (ReflectionFlag.READONLY, "isReadonly"),
)


class ReflectionFlags:
    """Mutable modifier set with the exclusivity rules of the model.

    Setting one visibility flag clears the other two. CONST and LET exclude
    each other.
    """

    __slots__ = ("_flags",)

    def __init__(self, flags: ReflectionFlag = ReflectionFlag.NONE) -> None:
        self._flags = ReflectionFlag.NONE
        for flag in ReflectionFlag:
            if flags & flag:
                self.set_flag(flag, True)

    def has_flag(self, flag: ReflectionFlag) -> bool:
        return bool(self._flags & flag)

    def set_flag(self, flag: ReflectionFlag, value: bool) -> None:
        if value and flag & _VISIBILITY:
            self._flags &= ~_VISIBILITY
        if value and flag == ReflectionFlag.CONST:
            self._flags &= ~ReflectionFlag.LET
        if value and flag == ReflectionFlag.LET:
            self._flags &= ~ReflectionFlag.CONST
        if value:
            self._flags |= flag
        else:
            self._flags &= ~flag

    @property
    def value(self) -> ReflectionFlag:
        return self._flags

    @property
    def is_private(self) -> bool:
        return self.has_flag(ReflectionFlag.PRIVATE)

    @property
    def is_protected(self) -> bool:
        return self.has_flag(ReflectionFlag.PROTECTED)

    @property
    def is_public(self) -> bool:
        return self.has_flag(ReflectionFlag.PUBLIC)

    @property
    def is_static(self) -> bool:
        return self.has_flag(ReflectionFlag.STATIC)

    @property
    def is_optional(self) -> bool:
        return self.has_flag(ReflectionFlag.OPTIONAL)

    @property
    def is_rest(self) -> bool:
        return self.has_flag(ReflectionFlag.REST)

    @property
    def is_const(self) -> bool:
        return self.has_flag(ReflectionFlag.CONST)

    @property
    def is_readonly(self) -> bool:
        return self.has_flag(ReflectionFlag.READONLY)

    def to_dict(self) -> dict[str, bool]:
        """Sparse map of the flags that are set, e.g. ``{"isOptional": True}``."""
        return {name: True for flag, name in _SERIALIZED_NAMES if self._flags & flag}

    def __iter__(self):
        return iter(flag for flag, _ in _SERIALIZED_NAMES if self._flags & flag)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ReflectionFlags):
            return self._flags == other._flags
        return NotImplemented

    def __repr__(self) -> str:
        return f"ReflectionFlags({self._flags!r})"
