"""
Case-insensitive dance style lookup.

Users type dance styles freely ("salsa", "Salsa", "modern-dans"), while the
catalog keeps one canonical label per style. The dictionary maps every
entry's id, label and value (lowercased) to the entry so any of those forms
collapses onto the same label.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, Optional

from partner_match.schemas.partners import StyleEntry


class StyleDictionary(Mapping[str, StyleEntry]):
    """Read-only mapping from lowercased id/label/value to its StyleEntry."""

    def __init__(self, table: Mapping[str, StyleEntry], entries: tuple[StyleEntry, ...] = ()):
        self._table = MappingProxyType(dict(table))
        self._entries = entries

    def __getitem__(self, key: str) -> StyleEntry:
        return self._table[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    @property
    def entries(self) -> tuple[StyleEntry, ...]:
        return self._entries

    def lookup(self, style: str) -> Optional[StyleEntry]:
        return self._table.get(style.lower())

    def canonical(self, style: str) -> str:
        # Unknown styles are preserved as typed.
        entry = self.lookup(style)
        return entry.label if entry is not None else style


def build_style_dictionary(entries: Iterable[StyleEntry]) -> StyleDictionary:
    table: dict[str, StyleEntry] = {}
    kept: list[StyleEntry] = []
    for entry in entries:
        kept.append(entry)
        # Last write wins on colliding keys.
        table[entry.id.lower()] = entry
        table[entry.label.lower()] = entry
        table[entry.value.lower()] = entry
    return StyleDictionary(table, tuple(kept))


def style_entry_from_document(doc: Mapping[str, Any]) -> StyleEntry:
    """Build a StyleEntry from a store document ({"id": ..., "label": ..., "value": ...})."""
    label = doc.get("label") or ""
    value = doc.get("value") or label
    return StyleEntry(id=str(doc.get("id") or ""), label=str(label), value=str(value))
