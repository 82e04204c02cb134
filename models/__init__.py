from models.timeslot import TimeSlot
from models.slot import Slot, SlotData, SlotFields, TimetableEntry
from models.catalog import SchoolClassRef, SubjectRef, TeacherRef

__all__ = [
    "TimeSlot",
    "Slot",
    "SlotData",
    "SlotFields",
    "TimetableEntry",
    "SchoolClassRef",
    "SubjectRef",
    "TeacherRef",
]
