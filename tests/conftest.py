"""Gemeinsame Test-Hilfen: In-Memory-Datenquelle für Editor und Lesesichten."""

import asyncio
from typing import Iterable, Optional

import pytest

from api.client import ApiError
from models.catalog import SchoolClassRef, SubjectRef, TeacherRef
from models.slot import Slot, TimetableEntry


class FakeTimetableApi:
    """Datenquelle im Speicher mit steuerbaren Fehlern.

    ``fail_*`` enthält eine Exception, die beim jeweiligen Aufruf ausgelöst
    wird. ``save_gate`` hält bulk_save_timetable an, bis das Event gesetzt ist.
    """

    def __init__(self, timetable: Iterable[TimetableEntry] = ()) -> None:
        self.classes = [
            SchoolClassRef(id="C10A", name="10", section="A"),
            SchoolClassRef(id="C10B", name="10", section="B"),
        ]
        self.subjects = [
            SubjectRef(id="S-M", name="Mathematik", code="M"),
            SubjectRef(id="S-D", name="Deutsch", code="D"),
        ]
        self.teachers = [
            TeacherRef(id="T01", name="Anna Müller"),
            TeacherRef(id="T02", name="Jürgen Koch"),
        ]
        self.timetable: list[TimetableEntry] = list(timetable)

        self.fail_subjects: Optional[Exception] = None
        self.fail_teachers: Optional[Exception] = None
        self.fail_timetable: Optional[Exception] = None
        self.fail_save: Optional[Exception] = None
        self.save_gate: Optional[asyncio.Event] = None

        self.saved: list[tuple[str, list[Slot]]] = []
        self.calls: list[str] = []

    async def get_classes(self) -> list[SchoolClassRef]:
        self.calls.append("classes")
        return list(self.classes)

    async def get_subjects_by_class(self, class_id: str) -> list[SubjectRef]:
        self.calls.append("subjects")
        await asyncio.sleep(0)
        if self.fail_subjects:
            raise self.fail_subjects
        return list(self.subjects)

    async def get_teachers(self) -> list[TeacherRef]:
        self.calls.append("teachers")
        await asyncio.sleep(0)
        if self.fail_teachers:
            raise self.fail_teachers
        return list(self.teachers)

    async def get_timetable(self, class_id: Optional[str] = None,
                            teacher_id: Optional[str] = None) -> list[TimetableEntry]:
        self.calls.append("timetable")
        if self.fail_timetable:
            raise self.fail_timetable
        return [
            e for e in self.timetable
            if (class_id is None or e.class_id == class_id)
            and (teacher_id is None or e.teacher_id == teacher_id)
        ]

    async def bulk_save_timetable(self, class_id: str, slots: Iterable[Slot]) -> int:
        slots = list(slots)
        self.calls.append("bulk_save")
        if self.save_gate is not None:
            await self.save_gate.wait()
        if self.fail_save:
            raise self.fail_save
        self.saved.append((class_id, slots))
        self.timetable = [e for e in self.timetable if e.class_id != class_id] + [
            TimetableEntry(
                id=f"{class_id}-{s.day_of_week}-{s.period_number}",
                class_id=class_id, **s.to_payload(),
            )
            for s in slots
        ]
        return len(slots)


def entry(class_id: str = "C10A", day: int = 0, period: int = 1,
          subject_id: Optional[str] = "S-M", **kwargs) -> TimetableEntry:
    """Kurzform für einen gespeicherten Eintrag."""
    return TimetableEntry(
        class_id=class_id, day_of_week=day, period_number=period,
        subject_id=subject_id, **kwargs,
    )


@pytest.fixture
def fake_api() -> FakeTimetableApi:
    return FakeTimetableApi()


@pytest.fixture
def make_entry():
    return entry


@pytest.fixture
def api_error():
    return ApiError("Interner Serverfehler", status=500, code="SERVER_ERROR")
