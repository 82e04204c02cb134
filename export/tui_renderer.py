"""Gemeinsamer Renderer für Terminal-Stundenplan-Anzeige.

Wird von ``show`` (Lesesicht) und ``edit`` (Entwurf) verwendet. Alle
Funktionen geben Tabellenzeilen zurück: [Std., Mo, Di, Mi, Do, Fr, Sa].
Leere Zellen erscheinen als EMPTY_CELL.
"""

from typing import TYPE_CHECKING, Optional

from config.defaults import WEEKDAYS

if TYPE_CHECKING:
    from analysis.schedule_view import ClassSchedule, TeacherSchedule
    from editor.session import ScheduleEditingSession
    from models.slot import Slot, TimetableEntry

EMPTY_CELL = "—"


def short_time(value: Optional[str]) -> str:
    """Kürzt "09:00:00" auf "09:00"."""
    return value[:5] if value else ""


def time_range_label(start: Optional[str], end: Optional[str]) -> str:
    if not start and not end:
        return ""
    return f"{short_time(start)}–{short_time(end)}"


def _cell_text(title: str, subtitle: str, slot: "Slot") -> str:
    lines = [title, subtitle]
    extra = " ".join(
        x for x in (time_range_label(slot.start_time, slot.end_time), slot.room) if x
    )
    if extra:
        lines.append(extra)
    return "\n".join(lines)


def render_class_rows(schedule: "ClassSchedule",
                      period_count: Optional[int] = None) -> list[list[str]]:
    """Tabellenzeilen für den Klassen-Stundenplan (Fach / Lehrkraft)."""
    rows: list[list[str]] = []
    for period, cells in enumerate(schedule.grid(period_count), start=1):
        row = [str(period)]
        for entry in cells:
            if entry is None:
                row.append(EMPTY_CELL)
            else:
                row.append(_cell_text(
                    entry.subject_name or entry.subject_id or "Unbekanntes Fach",
                    entry.teacher_name or entry.teacher_id or "Keine Lehrkraft",
                    entry,
                ))
        rows.append(row)
    return rows


def render_teacher_rows(schedule: "TeacherSchedule",
                        period_count: Optional[int] = None) -> list[list[str]]:
    """Tabellenzeilen für den Lehrer-Stundenplan (Fach / Klasse)."""
    rows: list[list[str]] = []
    for period, cells in enumerate(schedule.grid(period_count), start=1):
        row = [str(period)]
        for entry in cells:
            if entry is None:
                row.append(EMPTY_CELL)
            else:
                row.append(_cell_text(
                    entry.subject_name or entry.subject_id or "Unbekanntes Fach",
                    _class_label(entry),
                    entry,
                ))
        rows.append(row)
    return rows


def render_draft_rows(session: "ScheduleEditingSession") -> list[list[str]]:
    """Tabellenzeilen für den Entwurf einer Bearbeitungssitzung.

    Zeigt nur die sichtbaren Stunden laut LayoutConfig; ausgeblendete,
    belegte Stunden bleiben im Entwurf.
    """
    rows: list[list[str]] = []
    for period in session.layout.visible_periods():
        row = [str(period)]
        for day in WEEKDAYS:
            slot = session.grid.get_slot(day, period)
            if slot is None or not slot.subject_id:
                row.append(EMPTY_CELL)
                continue
            row.append(_cell_text(
                session.subject_name(slot.subject_id) or "Unbekanntes Fach",
                session.teacher_name(slot.teacher_id) or "Keine Lehrkraft",
                slot,
            ))
        rows.append(row)
    return rows


def _class_label(entry: "TimetableEntry") -> str:
    if entry.class_name:
        return f"{entry.class_name}-{entry.section}" if entry.section else entry.class_name
    return entry.class_id
