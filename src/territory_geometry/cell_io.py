"""JSON loading of territory cell sets.

Two document shapes are accepted::

    {"alpha": [[0, 0], [1, 0]], "beta": [[5, 5]]}

    {"territories": [{"id": "alpha", "name": "Alpha", "cells": [[0, 0]]}]}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, StrictInt, ValidationError

from territory_geometry.errors import CellSetFormatError
from territory_geometry.grid import to_cells
from territory_geometry.territories import Territory, TerritoryKind


class TerritoryDocument(BaseModel):
    id: str = Field(min_length=1)
    name: str | None = None
    display_name: str | None = None
    kind: TerritoryKind = TerritoryKind.NORMAL
    color: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    cells: list[tuple[StrictInt, StrictInt]] = Field(default_factory=list)

    def to_territory(self) -> Territory:
        return Territory(
            id=self.id,
            name=self.name or self.id,
            display_name=self.display_name,
            kind=self.kind,
            color=self.color,
            cells=to_cells(self.cells),
        )


class TerritoriesDocument(BaseModel):
    territories: list[TerritoryDocument]


def parse_territories(payload: Any) -> list[Territory]:
    """Validate a decoded JSON payload and return territories ordered by id."""
    if not isinstance(payload, dict):
        raise CellSetFormatError("Territory document must be a JSON object")

    try:
        if "territories" in payload:
            documents = TerritoriesDocument.model_validate(payload).territories
        else:
            documents = [
                TerritoryDocument.model_validate({"id": territory_id, "cells": cells})
                for territory_id, cells in payload.items()
            ]
    except ValidationError as exc:
        raise CellSetFormatError(f"Invalid territory document: {_first_error(exc)}") from exc

    territories = [document.to_territory() for document in documents]
    seen: set[str] = set()
    for territory in territories:
        if territory.id in seen:
            raise CellSetFormatError(f"Duplicate territory id: {territory.id}")
        seen.add(territory.id)
    return sorted(territories, key=lambda territory: territory.id)


def load_territories(path: str | Path) -> list[Territory]:
    target = Path(path).expanduser()
    if not target.exists():
        raise FileNotFoundError(f"Territory file not found: {target}")
    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CellSetFormatError(f"{target} is not valid JSON: {exc.msg} (line {exc.lineno})") from exc
    return parse_territories(payload)


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}"
