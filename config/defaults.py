"""Konstanten des Wochenrasters und Default-Konfiguration."""

# Wochentage 0=Mo .. 5=Sa. Sonntag (6) wird nie dargestellt oder bearbeitet.
WEEKDAYS = range(6)

DAY_NAMES = ["Mo", "Di", "Mi", "Do", "Fr", "Sa"]

DAY_NAMES_LONG = [
    "Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag",
]

# Angezeigte Stunden pro Tag, falls die Daten nicht mehr verlangen
DEFAULT_PERIOD_COUNT = 8


def default_app_config(**overrides):
    """Default-Konfiguration (lokale YAML-Datenquelle, 8 Stunden, Mo–Sa)."""
    from config.schema import AppConfig, BackendConfig, LayoutDefaults

    config = AppConfig(
        school_name="Muster-Schule",
        backend=BackendConfig(),
        layout=LayoutDefaults(
            default_period_count=DEFAULT_PERIOD_COUNT,
            day_names=list(DAY_NAMES),
        ),
    )
    if overrides:
        config = config.model_copy(update=overrides)
    return config
