"""ScheduleGridModel – Entwurf des Wochenrasters einer Klasse.

Hält während einer Bearbeitungssitzung alle Slots genau einer Klasse im
Speicher. Pro Koordinate (Tag, Stunde) existiert höchstens ein Slot:
``assign_slot`` ersetzt immer, es hängt nie an.
"""

import logging
from typing import Iterable, Optional, Union

from models.slot import Slot, SlotData, TimetableEntry
from models.timeslot import TimeSlot

logger = logging.getLogger(__name__)


class ScheduleGridModel:
    """Entwurfs-Raster einer Klasse, indiziert über die Zell-Koordinate."""

    def __init__(self, class_id: str) -> None:
        self.class_id = class_id
        self._slots: dict[TimeSlot, Slot] = {}
        self._passthrough: list[Slot] = []

    # ─── Laden ───

    def load(self, initial_entries: Iterable[Union[Slot, TimetableEntry]]) -> None:
        """Befüllt den Entwurf aus bereits gespeicherten Einträgen.

        Die Eingabe wird nicht verändert; es werden Kopien abgelegt.
        Ein vorhandener Entwurf wird vollständig ersetzt. Einträge fremder
        Klassen werden übersprungen. Sonntags-Einträge sind nicht im Raster,
        werden aber unverändert mitgespeichert (siehe ``persistable_slots``).
        """
        slots: dict[TimeSlot, Slot] = {}
        passthrough: list[Slot] = []
        for entry in initial_entries:
            if entry.class_id != self.class_id:
                logger.warning(
                    f"Eintrag für Klasse {entry.class_id} ignoriert "
                    f"(Entwurf gehört zu {self.class_id})"
                )
                continue
            if isinstance(entry, TimetableEntry):
                if not entry.is_editable_day:
                    logger.debug(
                        f"Sonntags-Eintrag Std.{entry.period_number} wird "
                        f"unverändert übernommen"
                    )
                    passthrough.append(entry.model_copy())
                    continue
                slot = entry.to_slot()
            else:
                slot = entry.model_copy()
            slots[slot.coordinate] = slot
        self._slots = slots
        self._passthrough = passthrough
        logger.debug(
            f"Entwurf {self.class_id}: {len(slots)} Slots geladen, "
            f"{len(passthrough)} nicht bearbeitbar"
        )

    # ─── Lesen ───

    def get_slot(self, day: int, period: int) -> Optional[Slot]:
        """Slot an (Tag, Stunde) oder None."""
        return self._slots.get(TimeSlot(day, period))

    def slots(self) -> list[Slot]:
        """Alle Slots des Entwurfs, sortiert nach Tag und Stunde."""
        return [self._slots[k] for k in sorted(self._slots, key=lambda t: t.key)]

    def passthrough(self) -> list[Slot]:
        """Geladene Einträge außerhalb des Rasters (Sonntag)."""
        return list(self._passthrough)

    def persistable_slots(self) -> list[Slot]:
        """Alles, was ein Speichern senden muss: Raster plus Sonntags-Einträge."""
        return self.slots() + self.passthrough()

    def max_period(self) -> int:
        """Höchste belegte Stundennummer (0 bei leerem Entwurf)."""
        return max((k.period for k in self._slots), default=0)

    def periods_with_data(self) -> set[int]:
        return {k.period for k in self._slots}

    # ─── Schreiben ───

    def assign_slot(self, day: int, period: int, data: SlotData) -> Optional[Slot]:
        """Setzt die Zelle (Tag, Stunde). Ersetzt einen vorhandenen Slot.

        Ohne subject_id wirkt der Aufruf wie ``remove_slot``.
        Gibt den eingefügten Slot zurück (oder None).
        """
        coord = TimeSlot(day, period)
        self._slots.pop(coord, None)
        if not data.subject_id:
            return None
        slot = Slot.at(self.class_id, day, period, data)
        self._slots[coord] = slot
        return slot

    def remove_slot(self, day: int, period: int) -> bool:
        """Leert die Zelle. Gibt True zurück wenn ein Slot entfernt wurde."""
        return self._slots.pop(TimeSlot(day, period), None) is not None

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, coord: object) -> bool:
        return coord in self._slots

    def __repr__(self) -> str:
        return f"ScheduleGridModel({self.class_id}, {len(self._slots)} Slots)"
