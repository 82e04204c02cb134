"""BulkPersistence – speichert den Entwurf einer Klasse als Ganzes.

Gespeichert wird immer der komplette Satz echter Slots (mit Fach). Die
Datenquelle ersetzt damit alle bisherigen Einträge der Klasse; was im
gesendeten Satz fehlt, wird serverseitig gelöscht. Es gibt weder Diff noch
Versionsprüfung: bei zwei gleichzeitigen Sitzungen gewinnt der letzte
Speichervorgang.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

from api.client import TimetableApi, TimetableApiError
from models.slot import Slot

logger = logging.getLogger(__name__)


class SaveInProgressError(Exception):
    """Es läuft bereits ein Speichervorgang dieser Sitzung."""


@dataclass
class SaveResult:
    """Ergebnis eines Speichervorgangs."""

    ok: bool
    saved_count: int = 0
    error: Optional[str] = None


def filter_persistable(slots: Iterable[Slot]) -> list[Slot]:
    """Nur Slots mit gesetztem Fach werden gespeichert."""
    return [s for s in slots if s.subject_id]


class BulkPersistence:
    """Speichert Entwürfe über ``TimetableApi.bulk_save_timetable``."""

    def __init__(self, api: TimetableApi,
                 on_success: Optional[Callable[[], Awaitable[None]]] = None) -> None:
        self.api = api
        self.on_success = on_success
        self.in_flight = False

    async def save(self, class_id: str, draft: Iterable[Slot]) -> SaveResult:
        """Sendet den gefilterten Entwurf in einem einzigen Aufruf.

        Bei Fehlern der Datenquelle bleibt der Entwurf unverändert und das
        Ergebnis enthält die Fehlermeldung. Ein zweiter Aufruf während ein
        Speichervorgang läuft, löst ``SaveInProgressError`` aus.
        """
        if self.in_flight:
            raise SaveInProgressError(
                f"Stundenplan {class_id} wird bereits gespeichert"
            )
        payload = filter_persistable(draft)
        self.in_flight = True
        try:
            saved = await self.api.bulk_save_timetable(class_id, payload)
        except TimetableApiError as e:
            logger.warning(f"Speichern von {class_id} fehlgeschlagen: {e}")
            return SaveResult(ok=False, error=str(e) or "Speichern fehlgeschlagen")
        finally:
            self.in_flight = False

        if self.on_success is not None:
            await self.on_success()
        return SaveResult(ok=True, saved_count=saved)
