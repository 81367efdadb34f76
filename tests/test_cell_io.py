import json
from pathlib import Path

import pytest

from territory_geometry.cell_io import load_territories, parse_territories
from territory_geometry.errors import CellSetFormatError
from territory_geometry.models import Cell
from territory_geometry.territories import TerritoryKind


def test_mapping_document_uses_ids_as_names() -> None:
    territories = parse_territories({"beta": [[5, 5]], "alpha": [[0, 0], [1, 0], [0, 0]]})

    assert [territory.id for territory in territories] == ["alpha", "beta"]
    assert territories[0].name == "alpha"
    assert territories[0].cells == frozenset({Cell(0, 0), Cell(1, 0)})


def test_territories_document_keeps_metadata() -> None:
    payload = {
        "territories": [
            {
                "id": "safe",
                "name": "Spawn",
                "display_name": "Spawn Safezone",
                "kind": "safezone",
                "color": "#00ff00",
                "cells": [[-1, -1]],
            }
        ]
    }

    [territory] = parse_territories(payload)

    assert territory.label == "Spawn Safezone"
    assert territory.kind is TerritoryKind.SAFEZONE
    assert territory.color == "#00ff00"
    assert territory.cells == frozenset({Cell(-1, -1)})


@pytest.mark.parametrize(
    "payload",
    [
        [[0, 0]],
        {"alpha": [[0, True]]},
        {"alpha": [[0.5, 0]]},
        {"alpha": [[0, 0, 0]]},
        {"alpha": "0,0"},
        {"territories": [{"id": "", "cells": []}]},
        {"territories": [{"id": "a", "color": "red"}]},
        {"territories": [{"id": "a"}, {"id": "a"}]},
    ],
)
def test_malformed_documents_are_rejected(payload: object) -> None:
    with pytest.raises(CellSetFormatError):
        parse_territories(payload)


def test_load_territories_reads_json_file(tmp_path: Path) -> None:
    path = tmp_path / "claims.json"
    path.write_text(json.dumps({"alpha": [[0, 0]]}), encoding="utf-8")

    [territory] = load_territories(path)

    assert territory.id == "alpha"


def test_load_territories_reports_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "claims.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(CellSetFormatError, match="not valid JSON"):
        load_territories(path)


def test_load_territories_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_territories(tmp_path / "missing.json")
