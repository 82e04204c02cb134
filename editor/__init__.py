"""Editor-Modul: Entwurf, Zellen-Editor, Rasterlayout und Speichern."""

from .grid_model import ScheduleGridModel
from .slot_editor import EditorOutcome, EditorState, EditorStateError, SlotEditor
from .layout import LayoutConfig
from .bulk_save import BulkPersistence, SaveInProgressError, SaveResult, filter_persistable
from .session import Notification, ScheduleEditingSession

__all__ = [
    "ScheduleGridModel",
    "SlotEditor",
    "EditorState",
    "EditorOutcome",
    "EditorStateError",
    "LayoutConfig",
    "BulkPersistence",
    "SaveInProgressError",
    "SaveResult",
    "filter_persistable",
    "Notification",
    "ScheduleEditingSession",
]
