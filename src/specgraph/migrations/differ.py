"""
Structural diff between two entity specifications.

This module compares an old and a new list of entities and produces an
ordered list of classified ``SpecChange`` records. Every divergence between
two well-formed entity lists is representable as a change; nothing here
raises or performs I/O.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..entities import Entity, Field, Relation
from ..types import ChangeType, FieldType


class _Unset:
    """Marker for a default value that was never declared."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

# Widening type changes that existing data always survives.
DEFAULT_COMPATIBLE_TYPE_CHANGES: Mapping[FieldType, frozenset[FieldType]] = MappingProxyType(
    {
        FieldType.STRING: frozenset({FieldType.TEXT}),
        FieldType.INTEGER: frozenset({FieldType.DECIMAL}),
    }
)


@dataclass(frozen=True)
class SpecChange:
    """
    A single classified difference between two entity specs.

    Attributes:
        type: Kind of change
        entity: Name of the entity the change belongs to
        field: Field name for field-level changes
        relation: Relation name for relation-level changes
        old_value: Previous value (type, nullable flag or default)
        new_value: New value; the full ``Field``/``Relation`` for additions
        breaking: Whether existing data or consumers may be affected
        description: Human-readable one-line description
    """

    type: ChangeType
    entity: str
    breaking: bool
    description: str
    field: str | None = None
    relation: str | None = None
    old_value: Any = None
    new_value: Any = None


@dataclass(frozen=True)
class DiffResult:
    """
    Result of diffing two entity lists.

    Attributes:
        changes: Ordered changes
        has_breaking_changes: True iff any change is breaking
        summary: Tally lines (additions, removals, modifications, breaking)
    """

    changes: tuple[SpecChange, ...] = field(default_factory=tuple)
    has_breaking_changes: bool = False
    summary: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_changes(cls, changes: Sequence[SpecChange]) -> DiffResult:
        """Build a result, deriving the breaking flag and summary from ``changes``."""
        changes = tuple(changes)
        return cls(
            changes=changes,
            has_breaking_changes=any(c.breaking for c in changes),
            summary=tuple(summarize_changes(changes)),
        )

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    def breaking_changes(self) -> list[SpecChange]:
        return [c for c in self.changes if c.breaking]


class EntityDiffer:
    """
    Compares entity lists and classifies each difference.

    The set of safe type widenings is injected at construction time and held
    immutably. Any transition not in it is classified as breaking.

    Example:
        differ = EntityDiffer()
        result = differ.diff(old_entities, new_entities)
        for change in result.changes:
            print(change.description)
    """

    def __init__(self, compatible_type_changes: Mapping[FieldType | str, Any] | None = None):
        if compatible_type_changes is None:
            self.compatible_type_changes = DEFAULT_COMPATIBLE_TYPE_CHANGES
        else:
            self.compatible_type_changes = MappingProxyType(
                {
                    FieldType(old): frozenset(FieldType(new) for new in targets)
                    for old, targets in compatible_type_changes.items()
                }
            )

    def diff(self, old_entities: Sequence[Entity], new_entities: Sequence[Entity]) -> DiffResult:
        """
        Compute the changes needed to go from ``old_entities`` to ``new_entities``.

        Args:
            old_entities: Previous entity list (e.g., the last snapshot)
            new_entities: Current entity list

        Returns:
            DiffResult with ordered, classified changes
        """
        changes: list[SpecChange] = []
        old_map = {e.name: e for e in old_entities}
        new_map = {e.name: e for e in new_entities}

        # Entities to create (in new but not in old)
        for name, entity in new_map.items():
            if name not in old_map:
                changes.append(
                    SpecChange(
                        type=ChangeType.ENTITY_ADDED,
                        entity=name,
                        breaking=False,
                        description=f"Add entity {name}",
                    )
                )
                # A new table has no rows, so none of its columns can break it
                for f in entity.fields:
                    changes.append(
                        SpecChange(
                            type=ChangeType.FIELD_ADDED,
                            entity=name,
                            field=f.name,
                            new_value=f,
                            breaking=False,
                            description=f"Add field {name}.{f.name} ({f.type})",
                        )
                    )

        # Entities to drop (in old but not in new)
        for name in old_map:
            if name not in new_map:
                changes.append(
                    SpecChange(
                        type=ChangeType.ENTITY_REMOVED,
                        entity=name,
                        breaking=True,
                        description=f"Remove entity {name} (DESTRUCTIVE)",
                    )
                )

        # Entities to modify (in both)
        for name, new_entity in new_map.items():
            old_entity = old_map.get(name)
            if old_entity is not None:
                changes.extend(self._diff_fields(name, old_entity.fields, new_entity.fields))
                changes.extend(self._diff_relations(name, old_entity.relations, new_entity.relations))

        return DiffResult.from_changes(changes)

    def is_compatible_type_change(self, old_type: FieldType | str, new_type: FieldType | str) -> bool:
        """Check whether a type change is a whitelisted, non-breaking widening."""
        targets = self.compatible_type_changes.get(FieldType(old_type), frozenset())
        return FieldType(new_type) in targets

    def _diff_fields(
        self,
        entity_name: str,
        old_fields: Sequence[Field],
        new_fields: Sequence[Field],
    ) -> list[SpecChange]:
        changes: list[SpecChange] = []
        old_map = {f.name: f for f in old_fields}
        new_map = {f.name: f for f in new_fields}

        # Fields to add
        for name, f in new_map.items():
            if name not in old_map:
                breaking = not f.nullable and not f.has_default
                suffix = " (BREAKING: non-nullable without default)" if breaking else ""
                changes.append(
                    SpecChange(
                        type=ChangeType.FIELD_ADDED,
                        entity=entity_name,
                        field=name,
                        new_value=f,
                        breaking=breaking,
                        description=f"Add field {entity_name}.{name} ({f.type}){suffix}",
                    )
                )

        # Fields to drop
        for name in old_map:
            if name not in new_map:
                changes.append(
                    SpecChange(
                        type=ChangeType.FIELD_REMOVED,
                        entity=entity_name,
                        field=name,
                        breaking=True,
                        description=f"Remove field {entity_name}.{name} (DESTRUCTIVE)",
                    )
                )

        # Fields to alter
        for name, new_field in new_map.items():
            old_field = old_map.get(name)
            if old_field is None:
                continue
            changes.extend(self._diff_field(entity_name, old_field, new_field))

        return changes

    def _diff_field(self, entity_name: str, old: Field, new: Field) -> list[SpecChange]:
        changes: list[SpecChange] = []
        qualified = f"{entity_name}.{new.name}"

        if old.type != new.type:
            breaking = not self.is_compatible_type_change(old.type, new.type)
            changes.append(
                SpecChange(
                    type=ChangeType.FIELD_TYPE_CHANGED,
                    entity=entity_name,
                    field=new.name,
                    old_value=old.type,
                    new_value=new.type,
                    breaking=breaking,
                    description=f"Change {qualified} type: {old.type} -> {new.type}{' (BREAKING)' if breaking else ''}",
                )
            )

        if old.nullable != new.nullable:
            # Tightening can fail on existing NULLs, loosening never does
            breaking = old.nullable and not new.nullable
            changes.append(
                SpecChange(
                    type=ChangeType.FIELD_NULLABLE_CHANGED,
                    entity=entity_name,
                    field=new.name,
                    old_value=old.nullable,
                    new_value=new.nullable,
                    breaking=breaking,
                    description=(
                        f"Change {qualified} nullable: {str(old.nullable).lower()} -> "
                        f"{str(new.nullable).lower()}{' (BREAKING)' if breaking else ''}"
                    ),
                )
            )

        old_default = old.default if old.has_default else UNSET
        new_default = new.default if new.has_default else UNSET
        if _value_key(old_default) != _value_key(new_default):
            changes.append(
                SpecChange(
                    type=ChangeType.FIELD_DEFAULT_CHANGED,
                    entity=entity_name,
                    field=new.name,
                    old_value=old_default,
                    new_value=new_default,
                    breaking=False,
                    description=f"Change {qualified} default: {format_value(old_default)} -> {format_value(new_default)}",
                )
            )

        return changes

    def _diff_relations(
        self,
        entity_name: str,
        old_relations: Sequence[Relation],
        new_relations: Sequence[Relation],
    ) -> list[SpecChange]:
        changes: list[SpecChange] = []
        old_map = {r.name: r for r in old_relations}
        new_map = {r.name: r for r in new_relations}

        for name, relation in new_map.items():
            if name not in old_map:
                changes.append(
                    SpecChange(
                        type=ChangeType.RELATION_ADDED,
                        entity=entity_name,
                        relation=name,
                        new_value=relation,
                        breaking=False,
                        description=f"Add relation {entity_name}.{name} -> {relation.entity} ({relation.type})",
                    )
                )

        for name in old_map:
            if name not in new_map:
                changes.append(
                    SpecChange(
                        type=ChangeType.RELATION_REMOVED,
                        entity=entity_name,
                        relation=name,
                        breaking=True,
                        description=f"Remove relation {entity_name}.{name} (DESTRUCTIVE)",
                    )
                )

        return changes


def diff_entities(
    old_entities: Sequence[Entity],
    new_entities: Sequence[Entity],
    compatible_type_changes: Mapping[FieldType | str, Any] | None = None,
) -> DiffResult:
    """
    Compare two entity lists and classify every change.

    Args:
        old_entities: Previous entity list
        new_entities: Current entity list
        compatible_type_changes: Optional override of the safe widening whitelist

    Returns:
        DiffResult
    """
    return EntityDiffer(compatible_type_changes).diff(old_entities, new_entities)


def summarize_changes(changes: Sequence[SpecChange]) -> list[str]:
    """Tally changes into human-readable summary lines."""
    added = sum(1 for c in changes if "added" in c.type)
    removed = sum(1 for c in changes if "removed" in c.type)
    changed = sum(1 for c in changes if "changed" in c.type)
    breaking = sum(1 for c in changes if c.breaking)

    summary: list[str] = []
    if added:
        summary.append(f"+ {added} additions")
    if removed:
        summary.append(f"- {removed} removals")
    if changed:
        summary.append(f"~ {changed} modifications")
    if breaking:
        summary.append(f"! {breaking} breaking changes")
    return summary


def format_value(value: Any) -> str:
    """Render a default value for change descriptions."""
    if value is UNSET:
        return "unset"
    return json.dumps(value, default=str)


def _value_key(value: Any) -> str | None:
    # Deep comparison that keeps True distinct from 1
    if value is UNSET:
        return None
    return json.dumps(value, sort_keys=True, default=str)


__all__ = [
    "UNSET",
    "DEFAULT_COMPATIBLE_TYPE_CHANGES",
    "SpecChange",
    "DiffResult",
    "EntityDiffer",
    "diff_entities",
    "summarize_changes",
]
