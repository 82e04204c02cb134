"""Stundenplan-Editor: Haupt-CLI.

Verwendung:
  python main.py setup                       Konfiguration anlegen
  python main.py config show                 Konfiguration anzeigen
  python main.py generate                    Beispieldaten in die lokale Datei schreiben
  python main.py classes                     Klassen auflisten
  python main.py show --class-id C10A        Stundenplan einer Klasse
  python main.py show --teacher-id T01       Stundenplan einer Lehrkraft
  python main.py edit C10A                   Stundenplan einer Klasse bearbeiten
"""

import asyncio
import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()
logger = logging.getLogger("stundenplan")


def _load_config_or_abort():
    """Lädt die Konfiguration oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[red]Keine Konfiguration gefunden.[/red]\n"
            "Führen Sie zunächst [bold]python main.py setup[/bold] aus."
        )
        sys.exit(1)
    try:
        config = mgr.load()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    _setup_logging(config)
    return mgr, config


def _setup_logging(config) -> None:
    """Konsole über Rich, optional zusätzlich in eine Datei."""
    handlers: list[logging.Handler] = [
        RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    ]
    if config.logging.file:
        log_path = Path(config.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        ))
        handlers.append(file_handler)
    logging.basicConfig(
        level=config.logging.level, format="%(message)s",
        handlers=handlers, force=True,
    )


@asynccontextmanager
async def _open_api(config):
    """Erzeugt die konfigurierte Datenquelle (lokal oder HTTP)."""
    from config.schema import BackendKind

    backend = config.backend
    if backend.kind == BackendKind.HTTP:
        from api.client import HttpTimetableApi
        api = HttpTimetableApi(
            backend.base_url,
            token=os.environ.get(backend.token_env),
            timeout=backend.timeout_seconds,
        )
        try:
            yield api
        finally:
            await api.aclose()
    else:
        from data.local_store import LocalTimetableStore
        yield LocalTimetableStore(Path(backend.data_file))


def _abort_on_api_error(e: Exception) -> None:
    logger.debug(f"Abbruch wegen Fehler der Datenquelle: {e!r}")
    console.print(f"[red bold]Fehler der Datenquelle:[/red bold] {e}")
    sys.exit(1)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.option("--school-name", default="Muster-Schule", help="Name der Schule.")
@click.option("--backend", "backend_kind", type=click.Choice(["local", "http"]),
              default="local", help="Datenquelle.")
@click.option("--base-url", default=None, help="Basis-URL der REST-API (backend=http).")
@click.option("--data-file", default=None, help="Lokale YAML-Datei (backend=local).")
@click.option("--force", is_flag=True, default=False,
              help="Vorhandene Konfiguration überschreiben.")
def cmd_setup(school_name: str, backend_kind: str, base_url: Optional[str],
              data_file: Optional[str], force: bool):
    """Legt die Konfiguration an."""
    from config.defaults import default_app_config
    from config.manager import ConfigManager
    from config.schema import BackendConfig, BackendKind

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Mit [bold]--force[/bold] neu anlegen."
        )
        return

    backend = BackendConfig(kind=BackendKind(backend_kind))
    if base_url:
        backend = backend.model_copy(update={"base_url": base_url})
    if data_file:
        backend = backend.model_copy(update={"data_file": data_file})

    config = default_app_config(school_name=school_name, backend=backend)
    mgr.save(config)
    console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
    if backend.kind == BackendKind.LOCAL:
        console.print("Führen Sie jetzt [bold]python main.py generate[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config_or_abort()

    console.print(Panel(
        f"[bold]{config.school_name}[/bold]  |  Datenquelle: {config.backend.kind.value}",
        title="Konfiguration",
        border_style="cyan",
    ))

    table = Table(title="Einstellungen", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    if config.backend.kind.value == "http":
        table.add_row("API-URL", config.backend.base_url)
        table.add_row("Timeout", f"{config.backend.timeout_seconds}s")
        table.add_row("Token-Variable", config.backend.token_env)
    else:
        table.add_row("Datendatei", config.backend.data_file)
    table.add_row("Stunden (Standard)", str(config.layout.default_period_count))
    table.add_row("Tage", ", ".join(config.layout.day_names))
    table.add_row("Log-Level", config.logging.level)
    console.print(table)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--force", is_flag=True, default=False,
              help="Vorhandene Datendatei überschreiben.")
def cmd_generate(seed: int, force: bool):
    """Schreibt Beispieldaten (Klassen, Fächer, Lehrkräfte, Stundenplan)."""
    mgr, config = _load_config_or_abort()
    from config.schema import BackendKind
    from data.local_store import LocalTimetableStore
    from data.sample_data import SampleDataGenerator

    if config.backend.kind != BackendKind.LOCAL:
        console.print("[red]Beispieldaten nur für die lokale Datenquelle.[/red]")
        sys.exit(1)

    store = LocalTimetableStore(Path(config.backend.data_file))
    if store.path.exists() and not force:
        if not click.confirm(f"{store.path} existiert bereits. Überschreiben?", default=False):
            return

    gen = SampleDataGenerator(seed=seed)
    data = gen.write(store)
    gen.print_summary(data)
    console.print(f"[green]✓[/green] Beispieldaten gespeichert: {store.path}")


# ─── CLASSES ──────────────────────────────────────────────────────────────────

@click.command("classes")
def cmd_classes():
    """Listet alle Klassen auf."""
    mgr, config = _load_config_or_abort()
    from api.client import TimetableApiError

    async def _run():
        async with _open_api(config) as api:
            return await api.get_classes()

    try:
        classes = asyncio.run(_run())
    except TimetableApiError as e:
        _abort_on_api_error(e)

    if not classes:
        console.print("[dim]Keine Klassen vorhanden.[/dim]")
        return
    table = Table(title="Klassen", box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Klasse")
    for c in classes:
        table.add_row(c.id, c.label)
    console.print(table)


# ─── SHOW ─────────────────────────────────────────────────────────────────────

@click.command("show")
@click.option("--class-id", default=None, help="Stundenplan einer Klasse.")
@click.option("--teacher-id", default=None, help="Stundenplan einer Lehrkraft.")
@click.option("--periods", type=click.IntRange(min=1), default=None,
              help="Anzahl angezeigter Stunden (Standard: aus den Daten).")
def cmd_show(class_id: Optional[str], teacher_id: Optional[str], periods: Optional[int]):
    """Zeigt den gespeicherten Stundenplan einer Klasse oder Lehrkraft."""
    if bool(class_id) == bool(teacher_id):
        raise click.UsageError("Genau eine der Optionen --class-id / --teacher-id angeben.")
    mgr, config = _load_config_or_abort()
    from analysis.schedule_view import ScheduleView
    from api.client import TimetableApiError
    from export.tui_renderer import render_class_rows, render_teacher_rows

    async def _run():
        async with _open_api(config) as api:
            view = ScheduleView(api)
            if class_id:
                return await view.by_class(class_id)
            return await view.by_teacher(teacher_id)

    try:
        schedule = asyncio.run(_run())
    except TimetableApiError as e:
        _abort_on_api_error(e)

    if not schedule.entries:
        console.print("[dim]Keine Stundenplan-Einträge gefunden.[/dim]")
        return

    if class_id:
        title = f"Stundenplan Klasse {class_id}"
        rows = render_class_rows(schedule, periods)
    else:
        title = f"Stundenplan Lehrkraft {teacher_id}"
        rows = render_teacher_rows(schedule, periods)

    table = Table(title=title, box=box.ROUNDED, show_lines=True)
    table.add_column("Std.", justify="right")
    for name in config.layout.day_names:
        table.add_column(name)
    for row in rows:
        table.add_row(*row)
    console.print(table)

    if teacher_id:
        s = schedule.summary
        console.print(
            f"[bold]Stunden/Woche:[/bold] {s.total_periods} | "
            f"[bold]Fächer:[/bold] {s.distinct_subjects} | "
            f"[bold]Klassen:[/bold] {s.distinct_classes}"
        )


# ─── EDIT ─────────────────────────────────────────────────────────────────────

@click.command("edit")
@click.argument("class_id")
def cmd_edit(class_id: str):
    """Bearbeitet den Stundenplan einer Klasse interaktiv."""
    mgr, config = _load_config_or_abort()
    from api.client import TimetableApiError
    from editor.console import TimetableEditorConsole
    from editor.session import ScheduleEditingSession

    async def _run():
        async with _open_api(config) as api:
            classes = await api.get_classes()
            cls = next((c for c in classes if c.id == class_id), None)
            if classes and cls is None:
                console.print(f"[red]Klasse nicht gefunden: {class_id}[/red]")
                return False
            entries = await api.get_timetable(class_id=class_id)
            session = ScheduleEditingSession(
                api, class_id,
                class_name=cls.label if cls else class_id,
                initial_entries=entries,
                default_period_count=config.layout.default_period_count,
            )
            return await TimetableEditorConsole(session, console).run()

    try:
        saved = asyncio.run(_run())
    except TimetableApiError as e:
        _abort_on_api_error(e)
    if not saved:
        console.print("[dim]Nicht gespeichert.[/dim]")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
def cli():
    """Stundenplan-Editor für den Wochenplan einer Schule.

    Starten Sie mit: python main.py setup
    """


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_classes)
cli.add_command(cmd_show)
cli.add_command(cmd_edit)


if __name__ == "__main__":
    main()
