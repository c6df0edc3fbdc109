"""Unit tests for the timeline and map read models."""

from dataclasses import replace

import pytest

from src.domain.entities import GpsLocation
from src.domain.enums import EventKind
from src.domain.timeline import (
    DEFAULT_CENTER,
    DEFAULT_ZOOM,
    SINGLE_MARKER_ZOOM,
    build_map_view,
    build_timeline,
)
from tests.factories import TS, collection, processing, quality_test, transfer


class TestTimeline:
    def test_sorted_by_timestamp(self):
        events = [quality_test(), collection(), processing()]
        entries = build_timeline(events)
        assert [e.kind for e in entries] == [
            EventKind.COLLECTION,
            EventKind.PROCESSING,
            EventKind.QUALITY_TEST,
        ]

    def test_titles(self):
        titles = [e.title for e in build_timeline(
            [collection(), processing(), quality_test(), transfer()]
        )]
        assert titles == [
            "Harvested by Rajesh Kumar",
            "drying by Kerala Ayurveda Processing Co.",
            "moisture test by AYUSH Certified Testing Lab",
            "Transfer: AYUSH Certified Testing Lab → Himalaya Herbals",
        ]

    def test_collection_details(self):
        (entry,) = build_timeline([collection()])
        assert entry.details["gps"] == "10.8505, 76.2711"
        assert entry.details["location"] == "Munnar, Kerala"

    def test_processing_without_temperature_omits_it(self):
        event = replace(processing(), temperature_c=None)
        (entry,) = build_timeline([event])
        assert "temperature_c" not in entry.details

    def test_quality_test_details(self):
        (entry,) = build_timeline([quality_test(passed=False)])
        assert entry.details["passed"] is False
        assert entry.details["result"] == "8.2 %"


class TestMapView:
    def test_no_collection_points_uses_default_viewport(self):
        view = build_map_view([processing(), quality_test()])
        assert view.markers == []
        assert view.center == DEFAULT_CENTER
        assert view.zoom == DEFAULT_ZOOM

    def test_single_marker_centres_on_it(self):
        view = build_map_view([collection(), processing()])
        assert len(view.markers) == 1
        assert view.center == (10.8505, 76.2711)
        assert view.zoom == SINGLE_MARKER_ZOOM
        assert view.markers[0].date == TS.date().isoformat()

    def test_several_markers_use_padded_bounds(self):
        view = build_map_view([
            collection(location=GpsLocation(10.0, 76.0), n=1),
            collection(location=GpsLocation(12.0, 77.0), n=2),
        ])
        (south, west), (north, east) = view.bounds
        assert south == pytest.approx(9.8)
        assert north == pytest.approx(12.2)
        assert west == pytest.approx(75.9)
        assert east == pytest.approx(77.1)
        assert view.center == pytest.approx((11.0, 76.5))
        assert view.zoom is None
