"""Lokale Datenquelle: Stammdaten und Stundenplan in einer YAML-Datei.

Implementiert dieselbe Schnittstelle wie ``api.client.HttpTimetableApi`` und
dient für Offline-Betrieb, Demo-Daten und Tests.

Dateiaufbau::

    classes:   [{id, name, section}]
    subjects:  [{id, name, code, class_ids: [...]}]   # leere class_ids = alle Klassen
    teachers:  [{id, name, subject_specialization, email}]
    timetable: [{id, class_id, subject_id, teacher_id, day_of_week,
                 period_number, start_time, end_time, room}]

``bulk_save_timetable`` ersetzt alle Einträge der Klasse in einem Schritt;
die Datei wird über eine temporäre Datei + Umbenennen geschrieben.
"""

import logging
import uuid
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from api.client import TimetableApiError
from models.catalog import SchoolClassRef, SubjectRef, TeacherRef
from models.slot import Slot, TimetableEntry

logger = logging.getLogger(__name__)

yaml = YAML(typ="safe")
yaml.default_flow_style = False

_SECTIONS = ("classes", "subjects", "teachers", "timetable")


class StoreError(TimetableApiError):
    """Fehler beim Lesen oder Schreiben der lokalen Datendatei."""


class LocalTimetableStore:
    """YAML-Datei als Stundenplan-Datenquelle."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    # ─── Datei ───

    def read(self) -> dict:
        """Liest die Datei; fehlt sie, gilt ein leerer Datensatz."""
        if not self.path.exists():
            return {section: [] for section in _SECTIONS}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = yaml.load(f) or {}
        except (OSError, YAMLError) as e:
            raise StoreError(f"Datendatei nicht lesbar: {self.path}: {e}") from e
        return {section: list(raw.get(section) or []) for section in _SECTIONS}

    def write(self, data: dict) -> None:
        """Schreibt den kompletten Datensatz atomar (tmp-Datei + replace)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                yaml.dump({s: data.get(s, []) for s in _SECTIONS}, f)
            tmp.replace(self.path)
        except OSError as e:
            raise StoreError(f"Datendatei nicht schreibbar: {self.path}: {e}") from e

    def _parse(self, model, rows: list, section: str) -> list:
        try:
            return [model.model_validate(row) for row in rows]
        except ValidationError as e:
            raise StoreError(
                f"Ungültige Daten im Abschnitt '{section}' von {self.path}: {e}"
            ) from e

    # ─── Lesen ───

    async def get_classes(self) -> list[SchoolClassRef]:
        data = self.read()
        return self._parse(SchoolClassRef, data["classes"], "classes")

    async def get_subjects_by_class(self, class_id: str) -> list[SubjectRef]:
        data = self.read()
        subjects = []
        for s in data["subjects"]:
            class_ids = s.get("class_ids") or []
            if not class_ids or class_id in class_ids:
                subjects.append(SubjectRef(id=s["id"], name=s["name"], code=s.get("code")))
        return subjects

    async def get_teachers(self) -> list[TeacherRef]:
        data = self.read()
        return self._parse(TeacherRef, data["teachers"], "teachers")

    async def get_timetable(self, class_id: Optional[str] = None,
                            teacher_id: Optional[str] = None) -> list[TimetableEntry]:
        """Einträge (optional gefiltert) mit Anzeigenamen, sortiert nach Tag/Stunde."""
        data = self.read()
        classes = {c["id"]: c for c in data["classes"]}
        subjects = {s["id"]: s for s in data["subjects"]}
        teachers = {t["id"]: t for t in data["teachers"]}

        entries = []
        for row in data["timetable"]:
            if class_id not in (None, "", "all") and row.get("class_id") != class_id:
                continue
            if teacher_id not in (None, "", "all") and row.get("teacher_id") != teacher_id:
                continue
            cls = classes.get(row.get("class_id"), {})
            subj = subjects.get(row.get("subject_id"), {})
            teacher = teachers.get(row.get("teacher_id"), {})
            entries.append({
                **row,
                "subject_name": subj.get("name"),
                "teacher_name": teacher.get("name"),
                "class_name": cls.get("name"),
                "section": cls.get("section"),
            })
        entries = self._parse(TimetableEntry, entries, "timetable")
        entries.sort(key=lambda e: (e.day_of_week, e.period_number))
        return entries

    # ─── Schreiben ───

    async def bulk_save_timetable(self, class_id: str, slots: Iterable[Slot]) -> int:
        """Ersetzt alle Einträge der Klasse durch ``slots``."""
        data = self.read()
        if data["classes"] and class_id not in {c["id"] for c in data["classes"]}:
            raise StoreError(f"Klasse nicht gefunden: {class_id}")

        new_rows = []
        for slot in slots:
            if slot.class_id != class_id:
                raise StoreError(
                    f"Slot Tag {slot.day_of_week} Std.{slot.period_number} gehört zu "
                    f"Klasse {slot.class_id}, nicht {class_id}"
                )
            row = {"id": uuid.uuid4().hex, "class_id": class_id}
            row.update(slot.to_payload())
            new_rows.append(row)

        kept = [r for r in data["timetable"] if r.get("class_id") != class_id]
        data["timetable"] = kept + new_rows
        self.write(data)
        logger.info(
            f"Stundenplan {class_id} ersetzt: {len(new_rows)} Einträge "
            f"({self.path})"
        )
        return len(new_rows)
