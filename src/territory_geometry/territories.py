"""Territory records, the cell-set source contract and an in-memory store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Protocol

from territory_geometry.models import Cell


class TerritoryKind(str, Enum):
    NORMAL = "normal"
    WILDERNESS = "wilderness"
    SAFEZONE = "safezone"
    WARZONE = "warzone"


@dataclass(frozen=True, slots=True)
class Territory:
    """A named owner of claimed cells."""

    id: str
    name: str
    cells: frozenset[Cell] = field(default_factory=frozenset)
    display_name: str | None = None
    kind: TerritoryKind = TerritoryKind.NORMAL
    color: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.name


class CellSetSource(Protocol):
    """Supplies the claimed cells of each territory."""

    def cells_for(self, territory_id: str) -> frozenset[Cell]:
        """Return the cells owned by ``territory_id``; empty when unknown."""

    def territories(self) -> list[Territory]:
        """Return every known territory ordered by id."""


class TerritoryListener(Protocol):
    """Receives change notifications from a territory store."""

    def on_territory_updated(self, territory: Territory) -> None:
        ...

    def on_territory_removed(self, territory: Territory) -> None:
        ...

    def on_data_cleared(self) -> None:
        ...


class InMemoryTerritoryStore:
    """Process-local territory registry where each cell has at most one owner.

    Listener failures are logged and never interrupt the other listeners.
    """

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._territories: dict[str, Territory] = {}
        self._owners: dict[Cell, str] = {}
        self._listeners: list[TerritoryListener] = []
        self._logger = logger or logging.getLogger("territory_geometry.territories")

    def add_listener(self, listener: TerritoryListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: TerritoryListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get(self, territory_id: str) -> Territory | None:
        return self._territories.get(territory_id)

    def territories(self) -> list[Territory]:
        return [self._territories[key] for key in sorted(self._territories)]

    def cells_for(self, territory_id: str) -> frozenset[Cell]:
        territory = self._territories.get(territory_id)
        return territory.cells if territory else frozenset()

    def owner_of(self, cell: Cell) -> Territory | None:
        territory_id = self._owners.get(Cell(*cell))
        return self._territories.get(territory_id) if territory_id else None

    def upsert(self, territory: Territory) -> Territory:
        """Insert or replace ``territory``; cells it claims are taken from other owners."""
        territory = replace(territory, cells=frozenset(Cell(*cell) for cell in territory.cells))
        previous = self._territories.get(territory.id)
        if previous is not None:
            for cell in previous.cells - territory.cells:
                self._owners.pop(cell, None)

        losers: dict[str, set[Cell]] = {}
        for cell in territory.cells:
            owner = self._owners.get(cell)
            if owner is not None and owner != territory.id:
                losers.setdefault(owner, set()).add(cell)
            self._owners[cell] = territory.id

        self._territories[territory.id] = territory
        for owner, lost in sorted(losers.items()):
            shrunk = replace(self._territories[owner], cells=self._territories[owner].cells - lost)
            self._territories[owner] = shrunk
            self._notify("on_territory_updated", shrunk)

        self._logger.debug(
            "territory_upserted",
            extra={"territory_id": territory.id, "cell_count": len(territory.cells)},
        )
        self._notify("on_territory_updated", territory)
        return territory

    def remove(self, territory_id: str) -> Territory | None:
        territory = self._territories.pop(territory_id, None)
        if territory is None:
            return None
        for cell in territory.cells:
            if self._owners.get(cell) == territory_id:
                del self._owners[cell]
        self._logger.debug("territory_removed", extra={"territory_id": territory_id})
        self._notify("on_territory_removed", territory)
        return territory

    def claim_cell(self, cell: Cell, territory_id: str) -> None:
        """Move ``cell`` to ``territory_id``, notifying both the old and the new owner."""
        if territory_id not in self._territories:
            raise KeyError(f"Unknown territory: {territory_id}")
        cell = Cell(*cell)
        previous_id = self._owners.get(cell)
        if previous_id == territory_id:
            return
        if previous_id is not None:
            self._release(cell, previous_id)

        territory = self._territories[territory_id]
        territory = replace(territory, cells=territory.cells | {cell})
        self._territories[territory_id] = territory
        self._owners[cell] = territory_id
        self._notify("on_territory_updated", territory)

    def release_cell(self, cell: Cell) -> Territory | None:
        """Drop ``cell`` from its owner and return the updated owner, if any."""
        cell = Cell(*cell)
        owner_id = self._owners.get(cell)
        if owner_id is None:
            return None
        return self._release(cell, owner_id)

    def clear(self) -> None:
        self._territories.clear()
        self._owners.clear()
        self._logger.debug("territory_data_cleared")
        for listener in list(self._listeners):
            try:
                listener.on_data_cleared()
            except Exception:  # noqa: BLE001
                self._logger.exception("territory_listener_failed", extra={"event": "on_data_cleared"})

    def _release(self, cell: Cell, owner_id: str) -> Territory:
        del self._owners[cell]
        owner = self._territories[owner_id]
        owner = replace(owner, cells=owner.cells - {cell})
        self._territories[owner_id] = owner
        self._notify("on_territory_updated", owner)
        return owner

    def _notify(self, event: str, territory: Territory) -> None:
        for listener in list(self._listeners):
            try:
                getattr(listener, event)(territory)
            except Exception:  # noqa: BLE001
                self._logger.exception(
                    "territory_listener_failed",
                    extra={"event": event, "territory_id": territory.id},
                )
