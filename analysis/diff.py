"""Vergleich Entwurf ↔ gespeicherter Stand (Änderungsvorschau vor dem Speichern).

Reine Anzeige: gespeichert wird weiterhin der komplette Entwurf.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Iterable

from models.slot import Slot
from models.timeslot import TimeSlot


@dataclass
class SlotChange:
    """Eine geänderte Zelle."""

    coordinate: TimeSlot
    old: dict
    new: dict


@dataclass
class DraftDiff:
    """Unterschiede zwischen gespeichertem Stand und Entwurf einer Klasse."""

    added: list[Slot] = field(default_factory=list)
    removed: list[Slot] = field(default_factory=list)
    changed: list[SlotChange] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Gibt True zurück wenn kein Unterschied gefunden wurde."""
        return not self.added and not self.removed and not self.changed

    def to_dict(self) -> dict:
        """Serialisiert den Diff als Dictionary (für JSON-Ausgabe)."""
        return {
            "added": [s.to_payload() for s in self.added],
            "removed": [s.to_payload() for s in self.removed],
            "changed": [
                {
                    "day_of_week": c.coordinate.day,
                    "period_number": c.coordinate.period,
                    "old": c.old,
                    "new": c.new,
                }
                for c in self.changed
            ],
        }

    def to_json(self, indent: int = 2) -> str:
        """Gibt den Diff als JSON-String zurück."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def diff_draft(persisted: Iterable[Slot], draft: Iterable[Slot]) -> DraftDiff:
    """Vergleicht zwei Slot-Sätze einer Klasse zellenweise.

    Berücksichtigt nur speicherbare Slots (mit Fach), also genau das, was
    ein Speichern tatsächlich verändern würde.

    Args:
        persisted: Zuletzt gespeicherter Stand.
        draft: Aktueller Entwurf.

    Returns:
        DraftDiff mit hinzugefügten, entfernten und geänderten Zellen,
        jeweils nach Tag und Stunde sortiert.
    """
    old = {s.coordinate: s for s in persisted if s.subject_id}
    new = {s.coordinate: s for s in draft if s.subject_id}
    diff = DraftDiff()

    for coord in sorted(set(old) | set(new), key=lambda t: t.key):
        a, b = old.get(coord), new.get(coord)
        if a is None:
            diff.added.append(b)
        elif b is None:
            diff.removed.append(a)
        elif a.editable_fields() != b.editable_fields():
            diff.changed.append(
                SlotChange(coordinate=coord, old=a.editable_fields(),
                           new=b.editable_fields())
            )
    return diff
