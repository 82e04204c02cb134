"""ScheduleEditingSession – Bearbeitungssitzung für den Stundenplan einer Klasse.

Bündelt den gesamten Zustand einer Sitzung als explizite Felder: Entwurf
(``grid``), Zellen-Editor (``editor``), sichtbares Raster (``layout``),
Stammdaten für die Auswahl und Benachrichtigungen an den Nutzer.

Ablauf:
  1. ``open()`` – Entwurf aus den gespeicherten Einträgen befüllen, Fächer
     und Lehrkräfte parallel laden. Bis beide geladen sind, ist
     ``loading`` True und die Bearbeitung gesperrt.
  2. Zellen über ``editor`` bearbeiten.
  3. ``save()`` – kompletten Entwurf speichern. Bei Erfolg wird die Sitzung
     geschlossen und der gespeicherte Stand neu gelesen; bei Fehlern bleibt
     der Entwurf für einen erneuten Versuch erhalten.

Kein Fehler der Datenquelle verlässt die Sitzung als Exception; Fehler
werden als ``Notification`` gemeldet.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

from api.client import TimetableApi, TimetableApiError
from config.defaults import DEFAULT_PERIOD_COUNT
from editor.bulk_save import BulkPersistence, SaveInProgressError, SaveResult
from editor.grid_model import ScheduleGridModel
from editor.layout import LayoutConfig
from editor.slot_editor import SlotEditor
from models.catalog import SubjectRef, TeacherRef
from models.slot import Slot, TimetableEntry

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """Nicht-blockierende Meldung an den Nutzer (Toast)."""

    level: str      # "info", "success", "warning", "error"
    title: str
    message: str = ""


class ScheduleEditingSession:
    """Stundenplan-Bearbeitung einer Klasse (Entwurf + Editor + Speichern)."""

    def __init__(
        self,
        api: TimetableApi,
        class_id: str,
        class_name: str = "",
        initial_entries: Iterable[TimetableEntry | Slot] = (),
        default_period_count: int = DEFAULT_PERIOD_COUNT,
        on_success: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        self.api = api
        self.class_id = class_id
        self.class_name = class_name or class_id
        self.initial_entries = list(initial_entries)
        self.default_period_count = default_period_count

        self.grid = ScheduleGridModel(class_id)
        self.editor = SlotEditor(self.grid)
        self.layout = LayoutConfig(default_period_count)
        self.persistence = BulkPersistence(api, on_success=self._after_save)
        self._on_success = on_success

        self.subjects: list[SubjectRef] = []
        self.teachers: list[TeacherRef] = []
        self.notifications: list[Notification] = []
        self.persisted: list[Slot] = []
        self.loading = False
        self.is_open = False

    # ─── Öffnen / Schließen ───

    async def open(self) -> None:
        """Öffnet die Sitzung: Entwurf befüllen, Stammdaten parallel laden."""
        self.grid.load(self.initial_entries)
        self.persisted = self.grid.slots()
        self.layout = LayoutConfig.for_grid(self.grid, self.default_period_count)
        self.is_open = True

        self.loading = True
        try:
            subjects, teachers = await asyncio.gather(
                self.api.get_subjects_by_class(self.class_id),
                self.api.get_teachers(),
                return_exceptions=True,
            )
        finally:
            self.loading = False

        self.subjects = self._catalog_or_empty(subjects, "Fächer")
        self.teachers = self._catalog_or_empty(teachers, "Lehrkräfte")
        logger.info(
            f"Sitzung {self.class_id} geöffnet: {len(self.grid)} Slots, "
            f"{len(self.subjects)} Fächer, {len(self.teachers)} Lehrkräfte"
        )

    def close(self) -> None:
        """Schließt die Sitzung. Ein laufender Speichervorgang wird nicht abgebrochen."""
        if self.editor.is_open:
            self.editor.cancel()
        self.is_open = False

    @property
    def editing_enabled(self) -> bool:
        return self.is_open and not self.loading

    @property
    def is_saving(self) -> bool:
        return self.persistence.in_flight

    # ─── Speichern ───

    async def save(self) -> SaveResult:
        """Speichert den kompletten Entwurf der Klasse."""
        hidden = self.layout.hidden_periods(self.grid)
        if hidden:
            self.notify(
                "info", "Ausgeblendete Stunden werden mitgespeichert",
                f"Stunden {', '.join(map(str, hidden))} sind belegt, aber ausgeblendet.",
            )
        try:
            result = await self.persistence.save(
                self.class_id, self.grid.persistable_slots()
            )
        except SaveInProgressError as e:
            self.notify("warning", "Speichern läuft bereits", str(e))
            return SaveResult(ok=False, error=str(e))

        if result.ok:
            self.notify(
                "success", "Stundenplan gespeichert",
                f"{result.saved_count} Stunden für {self.class_name} gespeichert.",
            )
        else:
            self.notify("error", "Fehler", result.error or "Speichern fehlgeschlagen.")
        return result

    async def _after_save(self) -> None:
        """Nach erfolgreichem Speichern: schließen und gespeicherten Stand neu lesen."""
        self.close()
        try:
            entries = await self.api.get_timetable(class_id=self.class_id)
        except TimetableApiError as e:
            logger.warning(f"Neu-Laden nach dem Speichern fehlgeschlagen: {e}")
            self.notify("warning", "Neu-Laden fehlgeschlagen", str(e))
        else:
            self.initial_entries = entries
            reloaded = ScheduleGridModel(self.class_id)
            reloaded.load(entries)
            self.persisted = reloaded.slots()
        if self._on_success is not None:
            await self._on_success()

    # ─── Anzeige-Hilfen ───

    def subject_name(self, subject_id: Optional[str]) -> Optional[str]:
        return next((s.name for s in self.subjects if s.id == subject_id), None)

    def teacher_name(self, teacher_id: Optional[str]) -> Optional[str]:
        return next((t.name for t in self.teachers if t.id == teacher_id), None)

    def notify(self, level: str, title: str, message: str = "") -> None:
        self.notifications.append(Notification(level, title, message))

    def pop_notifications(self) -> list[Notification]:
        """Gibt alle offenen Meldungen zurück und leert die Liste."""
        pending, self.notifications = self.notifications, []
        return pending

    # ─── intern ───

    def _catalog_or_empty(self, result, label: str) -> list:
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning(f"{label} konnten nicht geladen werden: {result}")
            self.notify(
                "warning", f"{label} nicht verfügbar",
                f"Die Auswahlliste bleibt leer ({result}).",
            )
            return []
        return list(result)

    def __repr__(self) -> str:
        return f"ScheduleEditingSession({self.class_id}, {len(self.grid)} Slots)"
