"""Read models for the provenance timeline and the collection map."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Sequence

from .entities import Event
from .enums import EventKind

# Viewport used when a batch has no collection points (central Karnataka)
DEFAULT_CENTER = (15.3173, 75.7139)
DEFAULT_ZOOM = 6
SINGLE_MARKER_ZOOM = 10
BOUNDS_PADDING = 0.1


@dataclass(frozen=True)
class TimelineEntry:
    event_id: str
    kind: EventKind
    timestamp: datetime
    title: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MapMarker:
    latitude: float
    longitude: float
    species: str
    location_name: str
    collector_name: str
    date: str
    appearance: str


@dataclass(frozen=True)
class MapView:
    markers: list[MapMarker]
    center: tuple[float, float]
    zoom: int | None = None
    # ((south, west), (north, east)) when several markers are shown
    bounds: tuple[tuple[float, float], tuple[float, float]] | None = None


def describe(event: Event) -> tuple[str, dict[str, Any]]:
    """Title and display details for one event."""
    if event.kind == EventKind.COLLECTION:
        loc = event.gps_location
        return f"Harvested by {event.collector_name}", {
            "location": event.location_name,
            "gps": f"{loc.latitude:.4f}, {loc.longitude:.4f}",
            "quality": event.quality_metrics.appearance,
            "moisture_pct": event.quality_metrics.moisture,
        }
    if event.kind == EventKind.PROCESSING:
        details: dict[str, Any] = {
            "process": event.step_type.value,
            "duration_hours": event.duration_hours,
            "notes": event.notes,
        }
        if event.temperature_c is not None:
            details["temperature_c"] = event.temperature_c
        return f"{event.step_type.value} by {event.processor_name}", details
    if event.kind == EventKind.QUALITY_TEST:
        r = event.result
        return f"{event.test_type.value} test by {event.lab_name}", {
            "test_type": event.test_type.value,
            "result": f"{r.value} {r.unit}",
            "standard": r.standard,
            "passed": r.passed,
        }
    if event.kind == EventKind.TRANSFER:
        return f"Transfer: {event.from_entity} → {event.to_entity}", {
            "quantity": f"{event.quantity} {event.unit}",
            "entity_type": event.entity_type.value,
        }
    raise ValueError(f"Unknown event kind: {event.kind!r}")


def build_timeline(events: Sequence[Event]) -> list[TimelineEntry]:
    entries = []
    for event in sorted(events, key=lambda e: e.timestamp):
        title, details = describe(event)
        entries.append(
            TimelineEntry(
                event_id=event.id,
                kind=event.kind,
                timestamp=event.timestamp,
                title=title,
                details=details,
            )
        )
    return entries


def build_map_view(events: Sequence[Event]) -> MapView:
    markers = [
        MapMarker(
            latitude=e.gps_location.latitude,
            longitude=e.gps_location.longitude,
            species=e.species,
            location_name=e.location_name,
            collector_name=e.collector_name,
            date=e.timestamp.date().isoformat(),
            appearance=e.quality_metrics.appearance,
        )
        for e in events
        if e.kind == EventKind.COLLECTION
    ]

    if not markers:
        return MapView(markers=[], center=DEFAULT_CENTER, zoom=DEFAULT_ZOOM)
    if len(markers) == 1:
        m = markers[0]
        return MapView(
            markers=markers, center=(m.latitude, m.longitude), zoom=SINGLE_MARKER_ZOOM
        )

    lats = [m.latitude for m in markers]
    lngs = [m.longitude for m in markers]
    pad_lat = (max(lats) - min(lats)) * BOUNDS_PADDING
    pad_lng = (max(lngs) - min(lngs)) * BOUNDS_PADDING
    south, north = min(lats) - pad_lat, max(lats) + pad_lat
    west, east = min(lngs) - pad_lng, max(lngs) + pad_lng
    return MapView(
        markers=markers,
        center=((south + north) / 2, (west + east) / 2),
        bounds=((south, west), (north, east)),
    )
