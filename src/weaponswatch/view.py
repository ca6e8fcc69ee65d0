"""Display model for the current weapons list."""

from __future__ import annotations

from collections.abc import Iterable

from rich.table import Table

from weaponswatch.weapons import Weapon


class WeaponsView:
    """Holds the weapons currently on display.

    Every update replaces the whole list. Callers running the monitor on a
    different thread are responsible for marshalling updates here.
    """

    def __init__(self, title: str = "Weapons") -> None:
        self.title = title
        self._weapons: list[Weapon] = []

    @property
    def weapons(self) -> list[Weapon]:
        """Weapons in display order (a copy)."""
        return list(self._weapons)

    def update_weapons(self, weapons: Iterable[Weapon]) -> None:
        """Clear the view and repopulate it with ``weapons``."""
        self.clear_weapons()
        self._weapons.extend(weapons)

    def clear_weapons(self) -> None:
        """Remove all weapons from the view."""
        self._weapons.clear()

    def render(self) -> Table:
        """Render the weapons as a rich table."""
        table = Table(title=self.title)
        table.add_column("Name", style="bold")
        table.add_column("Tech")
        table.add_column("Attacks/s", justify="right")

        for weapon in self._weapons:
            table.add_row(weapon.name, weapon.tech.value, f"{weapon.attacks_per_second:g}")

        return table
