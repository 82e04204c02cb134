"""Beispieldaten-Generator für den Stundenplan-Editor.

Erzeugt Klassen, Fächer, Lehrkräfte und einen teilweise gefüllten
Stundenplan und schreibt sie in eine ``LocalTimetableStore``-Datei.

Bewusst enthaltene Sonderfälle:
  1. Eine Klasse mit Stunden jenseits der Standard-Stundenzahl (9./10. Std.)
  2. Eine Klasse ganz ohne Einträge
  3. Einzelne Einträge ohne Lehrkraft bzw. ohne Raum
"""

import random
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box

from config.defaults import DEFAULT_PERIOD_COUNT, WEEKDAYS
from data.local_store import LocalTimetableStore

console = Console()

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Anna", "Birgit", "Christian", "Dieter", "Eva", "Franz", "Iris", "Jürgen",
    "Kathrin", "Lena", "Markus", "Norbert", "Petra", "Stefan", "Ulrike", "Yusuf",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Koch", "Richter",
]

# Fach → (Kürzel, Wochenstunden im Beispielplan)
_SUBJECTS: dict[str, tuple[str, int]] = {
    "Mathematik": ("M", 5),
    "Deutsch":    ("D", 4),
    "Englisch":   ("E", 4),
    "Physik":     ("PH", 2),
    "Biologie":   ("BI", 2),
    "Geschichte": ("GE", 2),
    "Erdkunde":   ("EK", 2),
    "Sport":      ("SP", 3),
    "Kunst":      ("KU", 2),
    "Informatik": ("IF", 2),
}

# Beginn der Stunden 1..10 (45 Minuten, 5 Minuten Wechsel)
_PERIOD_TIMES = [
    ("08:00", "08:45"), ("08:50", "09:35"), ("09:40", "10:25"),
    ("10:45", "11:30"), ("11:35", "12:20"), ("13:00", "13:45"),
    ("13:50", "14:35"), ("14:40", "15:25"), ("15:30", "16:15"),
    ("16:20", "17:05"),
]


class SampleDataGenerator:
    """Erzeugt reproduzierbare Beispieldaten (Seed)."""

    def __init__(self, seed: int = 42, grades: Optional[list[int]] = None,
                 sections: str = "AB") -> None:
        self.rng = random.Random(seed)
        self.grades = grades or [9, 10]
        self.sections = sections

    def generate(self) -> dict:
        """Gibt den vollständigen Datensatz im Format der lokalen Datendatei zurück."""
        classes = [
            {"id": f"C{g}{s}", "name": str(g), "section": s}
            for g in self.grades for s in self.sections
        ]
        subjects = [
            {"id": f"S-{short}", "name": name, "code": short, "class_ids": []}
            for name, (short, _) in _SUBJECTS.items()
        ]
        teachers = self._generate_teachers()

        timetable = []
        # letzte Klasse bleibt leer, die erste bekommt Randstunden 9/10
        for idx, cls in enumerate(classes[:-1]):
            max_period = DEFAULT_PERIOD_COUNT + (2 if idx == 0 else 0)
            timetable.extend(self._generate_class_timetable(cls["id"], teachers, max_period))

        return {
            "classes": classes,
            "subjects": subjects,
            "teachers": teachers,
            "timetable": timetable,
        }

    def write(self, store: LocalTimetableStore) -> dict:
        data = self.generate()
        store.write(data)
        return data

    # ─── intern ───

    def _generate_teachers(self) -> list[dict]:
        teachers = []
        names = self.rng.sample(
            [f"{f} {l}" for f in _FIRST_NAMES for l in _LAST_NAMES], len(_SUBJECTS)
        )
        for i, (subject, (short, _)) in enumerate(_SUBJECTS.items()):
            first, last = names[i].split(" ", 1)
            teachers.append({
                "id": f"T{i + 1:02d}",
                "name": names[i],
                "subject_specialization": subject,
                "email": f"{first[0].lower()}.{last.lower()}@schule.example",
            })
        return teachers

    def _generate_class_timetable(self, class_id: str, teachers: list[dict],
                                  max_period: int) -> list[dict]:
        teacher_by_subject = {t["subject_specialization"]: t["id"] for t in teachers}
        lessons = [name for name, (_, hours) in _SUBJECTS.items() for _ in range(hours)]
        self.rng.shuffle(lessons)

        cells = [(d, p) for d in WEEKDAYS for p in range(1, max_period + 1)]
        self.rng.shuffle(cells)
        if max_period > DEFAULT_PERIOD_COUNT:
            # mindestens eine Randstunde belegen
            cells.remove((0, max_period))
            cells.insert(0, (0, max_period))
        rows = []
        for subject, (day, period) in zip(lessons, cells):
            start, end = _PERIOD_TIMES[period - 1]
            short = _SUBJECTS[subject][0]
            row = {
                "id": f"{class_id}-{day}-{period}",
                "class_id": class_id,
                "subject_id": f"S-{short}",
                "day_of_week": day,
                "period_number": period,
                "start_time": start,
                "end_time": end,
            }
            if self.rng.random() > 0.1:
                row["teacher_id"] = teacher_by_subject[subject]
            if self.rng.random() > 0.2:
                row["room"] = "Sporthalle" if subject == "Sport" else f"Raum {self.rng.randint(101, 120)}"
            rows.append(row)
        rows.sort(key=lambda r: (r["day_of_week"], r["period_number"]))
        return rows

    def print_summary(self, data: dict) -> None:
        """Gibt eine Übersicht der erzeugten Daten über Rich aus."""
        table = Table(title="Beispieldaten", box=box.ROUNDED)
        table.add_column("Klasse")
        table.add_column("Stunden/Woche", justify="right")
        for cls in data["classes"]:
            count = sum(1 for r in data["timetable"] if r["class_id"] == cls["id"])
            table.add_row(f"{cls['name']}-{cls['section']}", str(count))
        console.print(table)
        console.print(
            f"[dim]{len(data['subjects'])} Fächer, {len(data['teachers'])} Lehrkräfte[/dim]"
        )
