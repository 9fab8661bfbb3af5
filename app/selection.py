"""Requested-field trees and the pure queries the resolvers ask of them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from .errors import InvalidArgument


@dataclass(frozen=True, slots=True)
class FieldSelection:
    """Immutable, ordered tree of requested field names for one object."""

    entries: tuple[tuple[str, "FieldSelection"], ...] = field(default=())

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "FieldSelection":
        """Build a selection from dotted paths such as ``similarTitles.id``."""

        tree: dict[str, Any] = {}
        for raw_path in paths:
            segments = [segment.strip() for segment in str(raw_path).split(".")]
            if not all(segments):
                raise InvalidArgument(f"Invalid field path: {raw_path!r}")
            node = tree
            for segment in segments:
                node = node.setdefault(segment, {})
        return cls.from_mapping(tree)

    @classmethod
    def from_mapping(cls, tree: Mapping[str, Any] | None) -> "FieldSelection":
        """Build a selection from a nested mapping; leaves may be ``None``."""

        if not tree:
            return EMPTY_SELECTION
        entries: list[tuple[str, FieldSelection]] = []
        for name, children in tree.items():
            if not isinstance(name, str) or not name.strip():
                raise InvalidArgument(f"Invalid field name: {name!r}")
            if children is not None and not isinstance(children, Mapping):
                raise InvalidArgument(f"Invalid selection for field {name!r}")
            entries.append((name.strip(), cls.from_mapping(children)))
        return cls(tuple(entries))

    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.entries)

    def child(self, name: str) -> "FieldSelection":
        """Return the sub-selection of ``name``, empty when it has none."""

        for entry_name, selection in self.entries:
            if entry_name == name:
                return selection
        return EMPTY_SELECTION

    def is_empty(self) -> bool:
        return not self.entries

    def __contains__(self, name: object) -> bool:
        return any(entry_name == name for entry_name, _ in self.entries)

    def __iter__(self) -> Iterator[tuple[str, "FieldSelection"]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


EMPTY_SELECTION = FieldSelection()


def requested_top_level_fields(selection: FieldSelection) -> frozenset[str]:
    """Return the field names requested directly on the current object."""

    return frozenset(selection.names())


def contains_field_anywhere(selection: FieldSelection, field_name: str) -> bool:
    """Return whether ``field_name`` is requested at any depth below this object."""

    for name, child in selection:
        if name == field_name or contains_field_anywhere(child, field_name):
            return True
    return False


def count_fields_outside(
    selection: FieldSelection, baseline: Iterable[str]
) -> int:
    """Count the top-level requested fields that are not part of ``baseline``."""

    known = frozenset(baseline)
    return sum(1 for name in requested_top_level_fields(selection) if name not in known)
