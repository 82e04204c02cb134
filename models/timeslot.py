"""Koordinate einer Zelle im Wochenraster (Tag × Stunde)."""

from dataclasses import dataclass

from config.defaults import DAY_NAMES, WEEKDAYS


@dataclass(frozen=True)
class TimeSlot:
    """Eine Zelle im Klassen-Wochenraster.

    Kombination aus Wochentag und Stundennummer.
    Immutable (frozen=True) damit es als Dict-Key / Set-Element nutzbar ist.
    """

    # Wochentag (0=Montag, ..., 5=Samstag). Sonntag wird nie dargestellt.
    day: int
    # Stundennummer (1-basiert, z.B. 1 = 1. Stunde)
    period: int

    def __post_init__(self) -> None:
        if self.day not in WEEKDAYS:
            raise ValueError(
                f"Ungültiger Wochentag {self.day} (erlaubt: 0=Mo bis 5=Sa)"
            )
        if self.period < 1:
            raise ValueError(f"Ungültige Stundennummer {self.period} (muss >= 1 sein)")

    @property
    def key(self) -> int:
        """Kompakter Schlüssel day*100+period (z.B. 203 für Mi 3. Stunde)."""
        return self.day * 100 + self.period

    @property
    def day_name(self) -> str:
        """Abgekürzter Tagesname."""
        return DAY_NAMES[self.day]

    def __repr__(self) -> str:
        return f"TimeSlot({self.day_name}, Std.{self.period})"

    def __str__(self) -> str:
        return f"{self.day_name} {self.period}."
