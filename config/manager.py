"""Konfigurationsmanager des Stundenplan-Editors.

Liest und schreibt ``config/app_config.yaml`` (ruamel.yaml, mit
Abschnitts-Kommentaren) und validiert den Inhalt über ``AppConfig``.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

from config.schema import AppConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120

# Abschnitt → (Überschrift, Erläuterung)
_SECTION_COMMENTS = {
    "backend": (
        "Datenquelle",
        "kind: local = YAML-Datei, http = REST-API des Schulservers.\n"
        "Das API-Token wird aus der Umgebungsvariable token_env gelesen.",
    ),
    "layout": (
        "Wochenraster",
        "default_period_count bestimmt nur die angezeigten Zeilen, nicht die Daten.",
    ),
    "logging": ("Logging", None),
}


def _file_header(config: AppConfig) -> str:
    return (
        "# ============================================\n"
        f"# Stundenplan-Editor: {config.school_name}\n"
        f"# Stand: {date.today().isoformat()}\n"
        "# ============================================\n\n"
    )


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "app_config.yaml"

    def first_run_check(self) -> bool:
        """True solange noch keine Konfigurationsdatei angelegt wurde."""
        return not self.DEFAULT_CONFIG.exists()

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Liest die Konfiguration. Ungültige Inhalte lösen ValueError aus."""
        source = Path(path) if path else self.DEFAULT_CONFIG
        if not source.exists():
            raise FileNotFoundError(
                f"Keine Konfiguration unter {source}. "
                f"Bitte zuerst 'python main.py setup' ausführen."
            )
        try:
            with open(source, "r", encoding="utf-8") as f:
                content = yaml.load(f) or {}
            return AppConfig.model_validate(dict(content))
        except (YAMLError, ValidationError) as e:
            raise ValueError(f"Konfiguration {source} ist ungültig:\n{e}") from e

    def save(self, config: AppConfig, path: Optional[Path] = None) -> Path:
        """Schreibt die Konfiguration mit Abschnitts-Kommentaren."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        document = CommentedMap(json.loads(config.model_dump_json()))
        for key, (title, note) in _SECTION_COMMENTS.items():
            lines = [f"─── {title} ───"] + (note.splitlines() if note else [])
            document.yaml_set_comment_before_after_key(key, before="\n".join(lines))

        with open(target, "w", encoding="utf-8") as f:
            f.write(_file_header(config))
            yaml.dump(document, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")
        return target
