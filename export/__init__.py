"""Export-Modul: Terminal-Darstellung des Stundenplans (Rich)."""

from export.tui_renderer import (
    render_class_rows,
    render_draft_rows,
    render_teacher_rows,
)

__all__ = ["render_class_rows", "render_draft_rows", "render_teacher_rows"]
