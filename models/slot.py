"""Datenmodell für einen Stundenplan-Eintrag (Pydantic v2).

Ein Slot ist die einzige persistierte Einheit des Stundenplans: genau eine
Zelle (Tag × Stunde) einer Klasse, optional mit Fach, Lehrkraft, Uhrzeit und
Raum. Erst ein gesetztes ``subject_id`` macht einen Slot "echt"; ohne Fach
entspricht er einer leeren Zelle und wird nie gespeichert.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.timeslot import TimeSlot

# HH:MM oder HH:MM:SS (24h)
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")


class SlotData(BaseModel):
    """Zellen-Felder wie gespeichert: Fach, Lehrkraft, Uhrzeit, Raum.

    Uhrzeiten sind rein beschreibend und werden beim Lesen nicht geprüft;
    das Format prüft erst der Zellen-Editor (``SlotFields``).
    """

    subject_id: Optional[str] = None
    teacher_id: Optional[str] = None
    start_time: Optional[str] = None   # "HH:MM[:SS]"
    end_time: Optional[str] = None
    room: Optional[str] = None         # Freitext, z.B. "Raum 101"

    @field_validator("subject_id", "teacher_id", "start_time", "end_time", "room",
                     mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def is_real(self) -> bool:
        """True wenn ein Fach gesetzt ist (nur solche Slots werden gespeichert)."""
        return bool(self.subject_id)

    def editable_fields(self) -> dict:
        """Nur die bearbeitbaren Felder als Dictionary."""
        return {name: getattr(self, name) for name in SlotData.model_fields}


class SlotFields(SlotData):
    """Bearbeitbare Felder einer Zelle (Kandidat im Zellen-Editor)."""

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_time_format(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _TIME_RE.match(v):
            raise ValueError(f"Uhrzeit '{v}' hat nicht das Format HH:MM[:SS]")
        return v


class Slot(SlotData):
    """Ein Eintrag im Wochenraster einer Klasse."""

    class_id: str
    day_of_week: int = Field(ge=0, le=5)    # 0=Mo .. 5=Sa
    period_number: int = Field(ge=1)        # 1-basiert

    @property
    def coordinate(self) -> TimeSlot:
        return TimeSlot(self.day_of_week, self.period_number)

    @classmethod
    def at(cls, class_id: str, day: int, period: int,
           data: Optional[SlotData] = None) -> "Slot":
        """Erzeugt einen Slot an einer Koordinate aus den Zellen-Feldern."""
        fields = data.editable_fields() if data is not None else {}
        return cls(class_id=class_id, day_of_week=day, period_number=period, **fields)

    def to_payload(self) -> dict:
        """Serialisierung für bulk_save_timetable (ohne None-Felder)."""
        payload = {
            "day_of_week": self.day_of_week,
            "period_number": self.period_number,
        }
        for name, value in self.editable_fields().items():
            if value is not None:
                payload[name] = value
        return payload


class TimetableEntry(Slot):
    """Persistierter Eintrag wie ihn die Lese-API liefert.

    Enthält zusätzlich die ID und die per Join ermittelten Anzeigenamen.
    Die Datenbank erlaubt day_of_week 0–6; Sonntag wird gelesen und beim
    Speichern unverändert mitgeschickt, aber weder dargestellt noch bearbeitet.
    """

    day_of_week: int = Field(ge=0, le=6)
    id: Optional[str] = None
    subject_name: Optional[str] = None
    teacher_name: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None

    @property
    def is_editable_day(self) -> bool:
        return self.day_of_week <= 5

    def to_slot(self) -> Slot:
        """Reduziert den Eintrag auf die Slot-Felder (nicht für Sonntag)."""
        return Slot(
            class_id=self.class_id,
            day_of_week=self.day_of_week,
            period_number=self.period_number,
            **self.editable_fields(),
        )
