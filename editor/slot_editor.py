"""SlotEditor – Zustandsautomat für die Bearbeitung einer einzelnen Zelle.

Zustände::

    CLOSED ──open()──▶ OPENING ──▶ EDITING ──commit()──▶ COMMITTED ─┐
                                      │  ├──clear()───▶ CLEARED   ─┼─▶ CLOSED
                                      │  └──cancel()──▶ CANCELLED ─┘
                                      └── update(...)

OPENING ist transient: der Kandidat wird aus dem vorhandenen Slot der Zelle
(oder leer) befüllt, danach steht der Editor in EDITING. Die Endzustände
werden als ``last_outcome`` festgehalten, der Editor kehrt sofort nach
CLOSED zurück. Es ist immer höchstens eine Zelle geöffnet.
"""

import logging
from enum import Enum
from typing import Optional

from models.slot import Slot, SlotFields
from models.timeslot import TimeSlot
from editor.grid_model import ScheduleGridModel

logger = logging.getLogger(__name__)


class EditorState(str, Enum):
    CLOSED = "closed"
    OPENING = "opening"
    EDITING = "editing"


class EditorOutcome(str, Enum):
    COMMITTED = "committed"
    CANCELLED = "cancelled"
    CLEARED = "cleared"


class EditorStateError(Exception):
    """Aktion ist im aktuellen Editor-Zustand nicht erlaubt."""


class SlotEditor:
    """Bearbeitet jeweils eine Zelle eines ScheduleGridModel."""

    def __init__(self, grid: ScheduleGridModel) -> None:
        self.grid = grid
        self.state = EditorState.CLOSED
        self.cell: Optional[TimeSlot] = None
        self.candidate: Optional[SlotFields] = None
        self.last_outcome: Optional[EditorOutcome] = None

    @property
    def is_open(self) -> bool:
        return self.state != EditorState.CLOSED

    @property
    def can_commit(self) -> bool:
        """Übernehmen ist nur mit gesetztem Fach möglich."""
        return (
            self.state == EditorState.EDITING
            and self.candidate is not None
            and self.candidate.is_real
        )

    def open(self, day: int, period: int) -> SlotFields:
        """Öffnet die Zelle (Tag, Stunde) und gibt den Kandidaten zurück."""
        if self.is_open:
            raise EditorStateError(
                f"Zelle {self.cell} ist noch geöffnet – erst übernehmen, "
                f"leeren oder abbrechen"
            )
        cell = TimeSlot(day, period)
        self.state = EditorState.OPENING
        self.cell = cell
        existing = self.grid.get_slot(day, period)
        if existing is not None:
            # gespeicherte Werte unverändert, geprüft wird erst die Eingabe
            self.candidate = SlotFields.model_construct(**existing.editable_fields())
        else:
            self.candidate = SlotFields()
        self.state = EditorState.EDITING
        logger.debug(f"Zelle {cell} geöffnet (belegt: {existing is not None})")
        return self.candidate

    def update(self, **fields) -> SlotFields:
        """Ändert Felder des Kandidaten (subject_id, teacher_id, start_time, end_time, room).

        Alle oder keine: Ist ein Wert ungültig, bleibt der Kandidat unverändert.
        """
        self._require_editing("update")
        unknown = set(fields) - set(SlotFields.model_fields)
        if unknown:
            raise ValueError(f"Unbekannte Felder: {sorted(unknown)}")
        checked = SlotFields.model_validate(fields)
        values = {name: getattr(checked, name) for name in fields}
        self.candidate = self.candidate.model_copy(update=values)
        return self.candidate

    def commit(self) -> Slot:
        """Übernimmt den Kandidaten in den Entwurf."""
        self._require_editing("commit")
        if not self.can_commit:
            raise EditorStateError("Ohne Fach kann die Zelle nicht übernommen werden")
        slot = self.grid.assign_slot(self.cell.day, self.cell.period, self.candidate)
        self._close(EditorOutcome.COMMITTED)
        return slot

    def clear(self) -> None:
        """Leert die Zelle im Entwurf."""
        self._require_editing("clear")
        self.grid.remove_slot(self.cell.day, self.cell.period)
        self._close(EditorOutcome.CLEARED)

    def cancel(self) -> None:
        """Verwirft den Kandidaten ohne den Entwurf zu ändern."""
        self._require_editing("cancel")
        self._close(EditorOutcome.CANCELLED)

    # ─── intern ───

    def _require_editing(self, action: str) -> None:
        if self.state != EditorState.EDITING:
            raise EditorStateError(
                f"'{action}' nicht möglich: keine Zelle geöffnet"
            )

    def _close(self, outcome: EditorOutcome) -> None:
        logger.debug(f"Zelle {self.cell}: {outcome.value}")
        self.last_outcome = outcome
        self.state = EditorState.CLOSED
        self.cell = None
        self.candidate = None
