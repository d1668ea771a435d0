"""
Per-instance storage for validated settings and lazily derived values.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from configurator.schema import SchemaEntry


@dataclass
class SettingValue:
    """A validated value together with the entry it was validated against."""
    entry: SchemaEntry
    value: Any


@dataclass
class InstanceState:
    """
    Settings stored on one container instance.

    A name is either stored in `settings` or cached in `cache`, never both:
    storing a value evicts any cached lazy result of the same name.
    """
    settings: Dict[str, SettingValue] = field(default_factory=dict)
    cache: Dict[str, Any] = field(default_factory=dict)

    def lookup(self, name: str) -> Optional[SettingValue]:
        return self.settings.get(name)

    def store(self, entry: SchemaEntry, value: Any) -> None:
        self.cache.pop(entry.name, None)
        self.settings[entry.name] = SettingValue(entry, value)

    def cache_result(self, name: str, value: Any) -> None:
        if name in self.settings:
            return
        self.cache[name] = value

    def has_cached(self, name: str) -> bool:
        return name in self.cache
