"""Lesesichten auf gespeicherte Stundenplan-Einträge.

Zwei Projektionen über dieselben Einträge, beide reine Funktionen der
gelesenen Liste (Eingabe wird nie verändert):

- nach Klasse: Gruppierung nach Wochentag, je Tag nach Stunde sortiert
- nach Lehrkraft: gleiche Gruppierung plus Kennzahlen (Stunden gesamt,
  verschiedene Fächer, verschiedene Klassen)

``build_grid`` erzeugt daraus ein Raster Stunden × Tage, in dem leere
Zellen explizit als ``None`` stehen.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from config.defaults import DEFAULT_PERIOD_COUNT, WEEKDAYS
from models.slot import TimetableEntry

if TYPE_CHECKING:
    from api.client import TimetableApi


# ─── Projektionen ─────────────────────────────────────────────────────────────

def group_by_day(entries: Iterable[TimetableEntry]) -> dict[int, list[TimetableEntry]]:
    """Gruppiert nach day_of_week; jede Gruppe aufsteigend nach Stunde sortiert."""
    by_day: dict[int, list[TimetableEntry]] = defaultdict(list)
    for e in entries:
        by_day[e.day_of_week].append(e)
    return {
        day: sorted(items, key=lambda e: e.period_number)
        for day, items in sorted(by_day.items())
    }


def build_grid(
    entries: Iterable[TimetableEntry],
    period_count: Optional[int] = None,
    days: Sequence[int] = WEEKDAYS,
) -> list[list[Optional[TimetableEntry]]]:
    """Raster [Stunde-1][Tag] mit None als Platzhalter für leere Zellen.

    Ohne period_count: das Größere aus 8 und der höchsten belegten Stunde.
    """
    cell_map: dict[tuple[int, int], TimetableEntry] = {}
    for e in entries:
        cell_map.setdefault((e.day_of_week, e.period_number), e)
    if period_count is None:
        period_count = max(
            [DEFAULT_PERIOD_COUNT] + [p for (_, p) in cell_map]
        )
    return [
        [cell_map.get((day, period)) for day in days]
        for period in range(1, period_count + 1)
    ]


@dataclass
class ClassSchedule:
    """Wochenplan einer Klasse."""

    class_id: str
    entries: list[TimetableEntry]
    by_day: dict[int, list[TimetableEntry]]

    @property
    def total_periods(self) -> int:
        return len(self.entries)

    def grid(self, period_count: Optional[int] = None):
        return build_grid(self.entries, period_count)


@dataclass
class TeacherScheduleSummary:
    """Kennzahlen eines Lehrer-Stundenplans."""

    total_periods: int = 0
    distinct_subjects: int = 0
    distinct_classes: int = 0
    active_days: list[int] = field(default_factory=list)


@dataclass
class TeacherSchedule:
    """Wochenplan einer Lehrkraft (über alle Klassen)."""

    teacher_id: str
    entries: list[TimetableEntry]
    by_day: dict[int, list[TimetableEntry]]
    summary: TeacherScheduleSummary

    def grid(self, period_count: Optional[int] = None):
        return build_grid(self.entries, period_count)


def _subject_key(e: TimetableEntry) -> Optional[str]:
    return e.subject_id or e.subject_name


def _class_key(e: TimetableEntry) -> Optional[str]:
    """Klasse über Name+Abschnitt (z.B. "10-A"); ohne Namen über die ID."""
    if e.class_name:
        return f"{e.class_name}-{e.section or ''}"
    return e.class_id


def build_class_schedule(class_id: str, entries: Iterable[TimetableEntry]) -> ClassSchedule:
    items = [e for e in entries if e.class_id == class_id]
    return ClassSchedule(class_id=class_id, entries=items, by_day=group_by_day(items))


def build_teacher_schedule(teacher_id: str,
                           entries: Iterable[TimetableEntry]) -> TeacherSchedule:
    items = [e for e in entries if e.teacher_id == teacher_id]
    by_day = group_by_day(items)
    subjects = {k for k in map(_subject_key, items) if k}
    classes = {k for k in map(_class_key, items) if k}
    summary = TeacherScheduleSummary(
        total_periods=len(items),
        distinct_subjects=len(subjects),
        distinct_classes=len(classes),
        active_days=list(by_day),
    )
    return TeacherSchedule(teacher_id=teacher_id, entries=items,
                           by_day=by_day, summary=summary)


# ─── Lesezugriff ──────────────────────────────────────────────────────────────

class ScheduleView:
    """Liest gespeicherte Einträge und projiziert sie nach Klasse/Lehrkraft."""

    def __init__(self, api: "TimetableApi") -> None:
        self.api = api

    async def by_class(self, class_id: str) -> ClassSchedule:
        entries = await self.api.get_timetable(class_id=class_id)
        return build_class_schedule(class_id, entries)

    async def by_teacher(self, teacher_id: str) -> TeacherSchedule:
        entries = await self.api.get_timetable(teacher_id=teacher_id)
        return build_teacher_schedule(teacher_id, entries)
