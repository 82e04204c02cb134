"""Interaktiver Stundenplan-Dialog im Terminal (Rich-Prompts).

Entspricht dem Verwaltungsdialog der Weboberfläche: Raster anzeigen, Zelle
öffnen, Fach/Lehrkraft/Zeit/Raum setzen, übernehmen/leeren/abbrechen,
Stundenzahl anpassen, Änderungen ansehen, speichern.
"""

from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box

from analysis.diff import diff_draft
from config.defaults import DAY_NAMES, DAY_NAMES_LONG
from editor.session import ScheduleEditingSession
from export.tui_renderer import EMPTY_CELL, render_draft_rows

_LEVEL_STYLES = {
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "red",
}


class TimetableEditorConsole:
    """Menügeführte Bearbeitung einer ScheduleEditingSession."""

    def __init__(self, session: ScheduleEditingSession,
                 console: Optional[Console] = None) -> None:
        self.session = session
        self.console = console or Console()

    async def run(self) -> bool:
        """Startet den Dialog. Gibt True zurück wenn gespeichert wurde."""
        session = self.session
        with self.console.status("Stammdaten werden geladen..."):
            await session.open()
        self._print_notifications()

        while session.is_open:
            self.show_grid()
            self.console.print("  [bold]1.[/bold] Zelle bearbeiten")
            self.console.print("  [bold]2.[/bold] Stunde hinzufügen (+)")
            self.console.print("  [bold]3.[/bold] Stunde entfernen (−)")
            self.console.print("  [bold]4.[/bold] Änderungen anzeigen")
            self.console.print("  [bold]5.[/bold] Speichern")
            self.console.print("  [bold]0.[/bold] Beenden")

            choice = Prompt.ask("\nAuswahl", default="0")

            if choice == "1":
                self._edit_cell()
            elif choice == "2":
                session.layout.increment()
            elif choice == "3":
                session.layout.decrement()
            elif choice == "4":
                self.show_changes()
            elif choice == "5":
                self.show_changes()
                with self.console.status("Stundenplan wird gespeichert..."):
                    result = await session.save()
                self._print_notifications()
                if result.ok:
                    return True
            elif choice == "0":
                if self._has_changes() and not Confirm.ask(
                    "Ungespeicherte Änderungen verwerfen?", default=False
                ):
                    continue
                session.close()
            else:
                self.console.print("[yellow]Ungültige Auswahl.[/yellow]")
        return False

    # ─── Anzeige ───

    def show_grid(self) -> None:
        session = self.session
        table = Table(
            title=f"Stundenplan {session.class_name} "
                  f"({session.layout.period_count} Stunden)",
            box=box.ROUNDED, show_lines=True,
        )
        table.add_column("Std.", justify="right")
        for name in DAY_NAMES:
            table.add_column(name)
        for row in render_draft_rows(session):
            table.add_row(*row)
        self.console.print(table)

        hidden = session.layout.hidden_periods(session.grid)
        if hidden:
            self.console.print(
                f"[dim]Ausgeblendet, aber belegt: Stunden "
                f"{', '.join(map(str, hidden))}[/dim]"
            )

    def show_changes(self) -> None:
        diff = diff_draft(self.session.persisted, self.session.grid.slots())
        if diff.is_empty():
            self.console.print("[dim]Keine Änderungen.[/dim]")
            return
        lines = []
        for s in diff.added:
            lines.append(f"[green]+ {s.coordinate}: {self._subject_label(s.subject_id)}[/green]")
        for c in diff.changed:
            lines.append(
                f"[yellow]~ {c.coordinate}: "
                f"{self._subject_label(c.old['subject_id'])} → "
                f"{self._subject_label(c.new['subject_id'])}[/yellow]"
            )
        for s in diff.removed:
            lines.append(f"[red]− {s.coordinate}: {self._subject_label(s.subject_id)}[/red]")
        self.console.print(Panel("\n".join(lines), title="Änderungen", border_style="cyan"))

    # ─── Zelle bearbeiten ───

    def _edit_cell(self) -> None:
        session = self.session
        if not session.editing_enabled:
            self.console.print("[yellow]Stammdaten werden noch geladen.[/yellow]")
            return
        day_name = Prompt.ask("Tag", choices=DAY_NAMES, default=DAY_NAMES[0])
        day = DAY_NAMES.index(day_name)
        period = IntPrompt.ask("Stunde", default=1)
        try:
            session.editor.open(day, period)
        except ValueError as e:
            self.console.print(f"[red]{e}[/red]")
            return

        editor = session.editor
        while editor.is_open:
            self._show_candidate(day, period)
            commit_hint = "" if editor.can_commit else " [dim](Fach fehlt)[/dim]"
            self.console.print(
                "\n[1] Fach  [2] Lehrkraft  [3] Beginn  [4] Ende  [5] Raum\n"
                f"[s] In Entwurf übernehmen{commit_hint}  [l] Zelle leeren  [a] Abbrechen"
            )
            sub = Prompt.ask("Auswahl", default="a")
            try:
                if sub == "1":
                    editor.update(subject_id=self._choose(
                        "Fach", [(s.id, s.name) for s in session.subjects]))
                elif sub == "2":
                    editor.update(teacher_id=self._choose(
                        "Lehrkraft", [(t.id, t.name) for t in session.teachers]))
                elif sub == "3":
                    editor.update(start_time=Prompt.ask("Beginn (HH:MM)", default=""))
                elif sub == "4":
                    editor.update(end_time=Prompt.ask("Ende (HH:MM)", default=""))
                elif sub == "5":
                    editor.update(room=Prompt.ask("Raum", default=""))
                elif sub == "s":
                    if editor.can_commit:
                        editor.commit()
                    else:
                        self.console.print("[yellow]Bitte zuerst ein Fach wählen.[/yellow]")
                elif sub == "l":
                    editor.clear()
                elif sub == "a":
                    editor.cancel()
            except ValidationError as e:
                self.console.print(f"[red]Ungültige Eingabe: {e.errors()[0]['msg']}[/red]")

    def _show_candidate(self, day: int, period: int) -> None:
        c = self.session.editor.candidate
        table = Table(
            title=f"{period}. Stunde • {DAY_NAMES_LONG[day]}", box=box.SIMPLE,
        )
        table.add_column("Feld", style="bold")
        table.add_column("Wert")
        table.add_row("Fach *", self._subject_label(c.subject_id))
        table.add_row("Lehrkraft", self.session.teacher_name(c.teacher_id) or (c.teacher_id or EMPTY_CELL))
        table.add_row("Beginn", c.start_time or EMPTY_CELL)
        table.add_row("Ende", c.end_time or EMPTY_CELL)
        table.add_row("Raum", c.room or EMPTY_CELL)
        self.console.print(table)

    def _choose(self, label: str, options: list[tuple[str, str]]) -> Optional[str]:
        """Nummerierte Auswahl; 0 = keine Angabe."""
        if not options:
            self.console.print(f"[yellow]Keine Auswahl für {label} verfügbar.[/yellow]")
            return None
        for i, (_, name) in enumerate(options, start=1):
            self.console.print(f"  [bold]{i}.[/bold] {name}")
        self.console.print("  [bold]0.[/bold] Keine Angabe")
        idx = IntPrompt.ask(label, default=0)
        if 1 <= idx <= len(options):
            return options[idx - 1][0]
        return None

    # ─── intern ───

    def _subject_label(self, subject_id: Optional[str]) -> str:
        if not subject_id:
            return EMPTY_CELL
        return self.session.subject_name(subject_id) or subject_id

    def _has_changes(self) -> bool:
        return not diff_draft(self.session.persisted, self.session.grid.slots()).is_empty()

    def _print_notifications(self) -> None:
        for n in self.session.pop_notifications():
            style = _LEVEL_STYLES.get(n.level, "white")
            text = f"[bold {style}]{n.title}[/bold {style}]"
            if n.message:
                text += f"\n{n.message}"
            self.console.print(Panel(text, border_style=style))
