"""CLI entrypoint for the territory geometry engine."""

from __future__ import annotations

from pathlib import Path

import typer
from rich import print

from territory_geometry.cell_io import load_territories
from territory_geometry.config import settings
from territory_geometry.errors import CellSetFormatError
from territory_geometry.geometry import CellEdgePolygonBuilder, RegionPartitioner
from territory_geometry.models import AnchorStrategy, GeometryResult, Polygon
from territory_geometry.overlays import InMemoryOverlaySink, OverlayPlan, TerritoryOverlayManager
from territory_geometry.service import TerritoryGeometryService
from territory_geometry.telemetry import configure_logging
from territory_geometry.territories import InMemoryTerritoryStore, Territory

app = typer.Typer(help="Territory outlines and label anchors from claimed grid cells")


@app.callback()
def _setup() -> None:
    configure_logging(settings.log_level, debug=settings.debug)


def _load(path: Path) -> list[Territory]:
    try:
        return load_territories(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(str(exc), param_hint="FILE") from exc
    except CellSetFormatError as exc:
        raise typer.BadParameter(str(exc), param_hint="FILE") from exc


def _build_service(use_holes: bool) -> TerritoryGeometryService:
    hole_builder = CellEdgePolygonBuilder(cell_size=settings.cell_size) if use_holes else None
    return TerritoryGeometryService.from_settings(settings, hole_builder=hole_builder)


def _points(polygon: Polygon) -> list[list[float]]:
    return [[vertex.x, vertex.y, vertex.z] for vertex in polygon]


def _result_payload(result: GeometryResult) -> dict:
    return {
        "cluster_size": result.cluster_size,
        "anchor": list(result.anchor),
        "polygon": _points(result.polygon),
        "holes": [_points(hole) for hole in result.holes],
    }


def _plan_payload(plan: OverlayPlan) -> dict:
    payload = {
        "overlay_id": plan.overlay_id,
        "title": plan.title,
        "label": plan.label,
        "inline_label": plan.inline_label,
        "color": plan.color,
        "anchor": list(plan.anchor),
        "vertex_count": len(plan.polygon),
        "hole_count": len(plan.holes),
    }
    if plan.label_overlay_id:
        payload["label_overlay_id"] = plan.label_overlay_id
        payload["label_polygon"] = _points(plan.label_polygon)
    return payload


@app.command()
def config() -> None:
    """Show the effective settings."""
    print(settings.model_dump(mode="json"))


@app.command()
def partition(file: Path = typer.Argument(..., help="JSON file with territory cells")) -> None:
    """Print the 4-connected clusters of each territory, largest first."""
    partitioner = RegionPartitioner()
    for territory in _load(file):
        clusters = partitioner.partition(territory.cells)
        print(
            {
                "territory": territory.id,
                "cluster_count": len(clusters),
                "clusters": [sorted(list(cell) for cell in cluster) for cluster in clusters],
            }
        )


@app.command()
def geometry(
    file: Path = typer.Argument(..., help="JSON file with territory cells"),
    anchor: AnchorStrategy = typer.Option(settings.anchor_strategy, help="Label anchor strategy"),
    elevation: float = typer.Option(settings.elevation, help="Y value written on every vertex"),
    holes: bool = typer.Option(settings.hole_aware_polygons, "--holes/--no-holes", help="Keep holes in outlines"),
) -> None:
    """Print outline polygons and label anchors for each territory."""
    service = _build_service(holes)
    for territory in _load(file):
        results = service.compute_territory(territory, elevation=elevation, anchor_strategy=anchor)
        print({"territory": territory.id, "results": [_result_payload(result) for result in results]})


@app.command()
def overlays(
    file: Path = typer.Argument(..., help="JSON file with territory cells"),
    separate_labels: bool = typer.Option(
        settings.separate_label_overlay,
        "--separate-labels/--inline-labels",
        help="Publish labels as their own overlays",
    ),
    holes: bool = typer.Option(settings.hole_aware_polygons, "--holes/--no-holes", help="Keep holes in outlines"),
) -> None:
    """Print the overlays a map renderer would receive for each territory."""
    sink = InMemoryOverlaySink()
    manager = TerritoryOverlayManager(
        _build_service(holes),
        sink,
        elevation=settings.elevation,
        anchor_strategy=settings.anchor_strategy,
        separate_labels=separate_labels,
    )
    store = InMemoryTerritoryStore()
    store.add_listener(manager)
    territories = _load(file)
    for territory in territories:
        store.upsert(territory)

    for territory in territories:
        print(
            {
                "territory": territory.id,
                "overlays": [_plan_payload(plan) for plan in manager.plans_for(territory.id)],
            }
        )
    print({"shown_overlay_count": len(sink.shown)})


if __name__ == "__main__":
    app()
