"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are wire-format constraints and implementation details.

For configurable values, see models.py (ConverterConfig, SerializerConfig, etc.).
"""

# =============================================================================
# Serialization
# =============================================================================

BASE_WORKER_ORDER = -1
"""Order of the base serialize worker. Every other worker must sort after it."""

# =============================================================================
# Sorting
# =============================================================================

DEFAULT_SORT_ORDER = (
    "project",
    "module",
    "namespace",
    "enum",
    "enumMember",
    "class",
    "interface",
    "alias",
    "property",
    "variable",
    "function",
    "accessor",
    "method",
    "object",
    "parameter",
)
"""Kind names in the order the sort plugin lists them. Unlisted kinds go last."""

# =============================================================================
# Comments
# =============================================================================

HIDDEN_TAGS = frozenset({"hidden", "ignore"})
"""Tags that remove the documented reflection entirely."""

INTERNAL_TAG = "internal"
"""Removes the documented reflection when strip_internal is enabled."""

BLACKLISTED_TAGS = (
    "augments",
    "callback",
    "class",
    "constructor",
    "enum",
    "extends",
    "this",
    "type",
    "typedef",
)
"""Tags dropped from every comment; they restate what the declaration already says."""

VISIBILITY_TAGS = ("private", "protected", "public")
"""Tags that override member visibility."""

PREFERRED_TAG = "@preferred"
"""Marks the comment block that wins when a symbol has several."""

PACKAGE_DOCUMENTATION_TAG = "@packageDocumentation"
"""Marks a comment as documenting the enclosing file rather than a declaration."""

# =============================================================================
# Plugins
# =============================================================================

PLUGIN_ENTRY_POINT_GROUP = "docgraph.plugins"
"""importlib.metadata entry point group scanned for third-party plugins."""

# =============================================================================
# Module names
# =============================================================================

MODULE_NAME_SUFFIXES = ("/index", "/lib", "/src")
"""Trailing path segments trimmed from module names."""
