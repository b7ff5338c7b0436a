"""
Command prefixes per guild.

Chat front-ends let each guild pick the prefix that marks a command.
Only the mapping lives here; nothing is persisted.
"""

from __future__ import annotations

from ..config import DEFAULT_PREFIX

MAX_PREFIX_LENGTH = 5


class PrefixRegistry:
    """Guild id -> command prefix, falling back to a default."""

    def __init__(self, default: str = DEFAULT_PREFIX):
        self.default = default
        self._prefixes: dict[str, str] = {}

    def get(self, guild_id: str) -> str:
        return self._prefixes.get(guild_id, self.default)

    def set(self, guild_id: str, prefix: str) -> str:
        """
        Store a guild's prefix.

        Raises ValueError for an empty prefix, one containing whitespace,
        or one longer than MAX_PREFIX_LENGTH characters.
        """
        if not prefix or any(ch.isspace() for ch in prefix):
            raise ValueError("Prefix must be non-empty and contain no spaces")
        if len(prefix) > MAX_PREFIX_LENGTH:
            raise ValueError(f"Prefix can be at most {MAX_PREFIX_LENGTH} characters")
        self._prefixes[guild_id] = prefix
        return prefix

    def reset(self, guild_id: str) -> None:
        self._prefixes.pop(guild_id, None)
