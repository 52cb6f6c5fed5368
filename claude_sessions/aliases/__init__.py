"""
Named aliases for Claude Code sessions.

The alias index maps short names (e.g. "auth-work") to session file paths and
is rewritten atomically with a backup on every change.
"""

from .index import (
    ALIAS_VERSION,
    RESERVED_ALIASES,
    AliasIndex,
    AliasResult,
    AliasSummary,
    CleanupResult,
    ResolvedAlias,
    validate_alias_name,
)

__all__ = [
    "ALIAS_VERSION",
    "RESERVED_ALIASES",
    "AliasIndex",
    "AliasResult",
    "AliasSummary",
    "CleanupResult",
    "ResolvedAlias",
    "validate_alias_name",
]
