"""LayoutConfig – sichtbare Rastergröße einer Bearbeitungssitzung.

Reiner Anzeigezustand: Die Stundenzahl bestimmt nur, wie viele Zeilen
gezeigt werden. Ein Verkleinern blendet belegte Zeilen aus, löscht sie aber
nicht; sie bleiben im Entwurf und werden mitgespeichert.
"""

from typing import TYPE_CHECKING

from config.defaults import DEFAULT_PERIOD_COUNT, WEEKDAYS

if TYPE_CHECKING:
    from editor.grid_model import ScheduleGridModel


class LayoutConfig:
    """Sichtbare Tage (fest Mo–Sa) und Stundenzahl (veränderbar, min. 1)."""

    days = WEEKDAYS

    def __init__(self, period_count: int = DEFAULT_PERIOD_COUNT) -> None:
        if period_count < 1:
            raise ValueError(f"period_count muss >= 1 sein, nicht {period_count}")
        self.period_count = period_count

    @classmethod
    def for_grid(cls, grid: "ScheduleGridModel",
                 default: int = DEFAULT_PERIOD_COUNT) -> "LayoutConfig":
        """Startwert: das Größere aus default und der höchsten belegten Stunde."""
        return cls(max(default, grid.max_period()))

    def increment(self) -> int:
        self.period_count += 1
        return self.period_count

    def decrement(self) -> int:
        self.period_count = max(1, self.period_count - 1)
        return self.period_count

    def visible_periods(self) -> list[int]:
        return list(range(1, self.period_count + 1))

    def hidden_periods(self, grid: "ScheduleGridModel") -> list[int]:
        """Belegte Stunden, die aktuell ausgeblendet sind."""
        return sorted(p for p in grid.periods_with_data() if p > self.period_count)

    def __repr__(self) -> str:
        return f"LayoutConfig({len(self.days)} Tage × {self.period_count} Std.)"
