from pydantic import BaseModel, Field, field_validator
from typing import Optional
from enum import Enum


class BackendKind(str, Enum):
    LOCAL = "local"
    HTTP = "http"


# ─── DATENQUELLE ───

class BackendConfig(BaseModel):
    """Woher Stammdaten und Stundenplan gelesen bzw. wohin gespeichert wird.

    - local: YAML-Datei (Offline-Betrieb, Demo, Tests)
    - http:  REST-API des Schulverwaltungs-Servers
    """
    # Art der Datenquelle
    kind: BackendKind = Field(BackendKind.LOCAL,
        description="Datenquelle: local (YAML-Datei) oder http (REST-API)")
    # Pfad der lokalen Datendatei (nur für kind=local)
    data_file: str = Field("data/timetable.yaml",
        description="Pfad der lokalen YAML-Datendatei")
    # Basis-URL der REST-API (nur für kind=http)
    base_url: str = Field("http://localhost:3001/api",
        description="Basis-URL der REST-API")
    # Timeout pro Anfrage in Sekunden
    timeout_seconds: float = Field(10.0, gt=0, le=120,
        description="Timeout pro HTTP-Anfrage (Sekunden)")
    # Name der Umgebungsvariable mit dem Bearer-Token
    token_env: str = Field("TIMETABLE_API_TOKEN",
        description="Umgebungsvariable für das API-Token")


# ─── RASTER ───

class LayoutDefaults(BaseModel):
    """Anzeige-Defaults für das Wochenraster.

    Die Stundenzahl bestimmt nur die Anzahl angezeigter Zeilen, nicht welche
    Zellen Daten enthalten.
    """
    # Standard-Stundenzahl pro Tag (wird beim Laden ggf. vergrößert)
    default_period_count: int = Field(8, ge=1,
        description="Angezeigte Stunden pro Tag (Minimum beim Öffnen)")
    # Namen der Wochentage Mo–Sa
    day_names: list[str] = Field(
        default=["Mo", "Di", "Mi", "Do", "Fr", "Sa"],
        description="Namen der Wochentage (genau 6, Mo–Sa)")

    @field_validator("day_names")
    @classmethod
    def _six_days(cls, v: list[str]) -> list[str]:
        if len(v) != 6:
            raise ValueError(f"Es werden genau 6 Tagesnamen erwartet, nicht {len(v)}")
        return v


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    """Log-Ausgabe der CLI."""
    # Log-Level (DEBUG, INFO, WARNING, ERROR)
    level: str = Field("INFO", description="Log-Level")
    # Optionale Log-Datei zusätzlich zur Konsole
    file: Optional[str] = Field(None, description="Optionale Log-Datei")

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unbekanntes Log-Level: {v}")
        return v


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration des Stundenplan-Editors."""
    # Name der Schule (nur Anzeige)
    school_name: str = Field("Muster-Schule",
        description="Name der Schule")
    # Datenquelle
    backend: BackendConfig = Field(default_factory=BackendConfig)
    # Raster-Defaults
    layout: LayoutDefaults = Field(default_factory=LayoutDefaults)
    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
