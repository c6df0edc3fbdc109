"""
Compliance Checker  (deduction scoring + geofencing)
====================================================

Score = clamp(100 - sum(penalties), 0, 100)

Penalties
---------
* No collection event                          -20
* No quality test event                        -15
* Each collection point outside every zone     -25  (stacks per event)

A batch is ``valid`` iff it has no violations.  Approved zones are circles
(center + radius); membership uses haversine distance.

Complexity: O(E x Z) for E events and Z zones.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Sequence

from .distance import haversine_m
from .entities import Event, GpsLocation
from .enums import EventKind

MAX_SCORE = 100
MISSING_COLLECTION_PENALTY = 20
MISSING_QUALITY_TEST_PENALTY = 15
OUTSIDE_ZONE_PENALTY = 25

MISSING_COLLECTION = "Missing collection event"
MISSING_QUALITY_TEST = "Missing quality test certification"
OUTSIDE_APPROVED_ZONES = "Collection location outside approved zones"
BATCH_NOT_FOUND = "Batch not found"

AYUSH_THRESHOLD = 80
ORGANIC_THRESHOLD = 90
FAIR_TRADE_THRESHOLD = 85


@dataclass(frozen=True)
class ApprovedZone:
    name: str
    latitude: float
    longitude: float
    radius_m: float

    def distance_to(self, location: GpsLocation) -> float:
        return haversine_m(
            location.latitude, location.longitude, self.latitude, self.longitude
        )

    def contains(self, location: GpsLocation) -> bool:
        """Inside or on the boundary of the circle."""
        return self.distance_to(location) <= self.radius_m


APPROVED_ZONES: tuple[ApprovedZone, ...] = (
    ApprovedZone("Kerala Approved Zone", 10.8505, 76.2711, 200_000),
    ApprovedZone("Karnataka Approved Zone", 15.3173, 75.7139, 150_000),
)


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    violations: tuple[str, ...] = ()
    compliance_score: int = MAX_SCORE


NOT_FOUND_RESULT = VerificationResult(
    valid=False, violations=(BATCH_NOT_FOUND,), compliance_score=0
)


@dataclass(frozen=True)
class ComplianceReport:
    batch_id: str
    generated_at: datetime
    generated_by: str
    ayush_compliance: bool
    organic_certified: bool
    fair_trade: bool
    sustainability_score: int
    violations: list[str]


def in_approved_zone(
    location: GpsLocation, zones: Iterable[ApprovedZone] = APPROVED_ZONES
) -> bool:
    return any(zone.contains(location) for zone in zones)


def verify_events(
    events: Sequence[Event], zones: Sequence[ApprovedZone] = APPROVED_ZONES
) -> VerificationResult:
    """Run every rule over *events* and return the deduction-based result."""
    violations: list[str] = []
    score = MAX_SCORE

    kinds = {e.kind for e in events}
    if EventKind.COLLECTION not in kinds:
        violations.append(MISSING_COLLECTION)
        score -= MISSING_COLLECTION_PENALTY

    if EventKind.QUALITY_TEST not in kinds:
        violations.append(MISSING_QUALITY_TEST)
        score -= MISSING_QUALITY_TEST_PENALTY

    for event in events:
        if event.kind != EventKind.COLLECTION:
            continue
        if not in_approved_zone(event.gps_location, zones):
            violations.append(OUTSIDE_APPROVED_ZONES)
            score -= OUTSIDE_ZONE_PENALTY

    return VerificationResult(
        valid=not violations,
        violations=tuple(violations),
        compliance_score=max(0, score),
    )


def build_report(
    batch_id: str,
    result: VerificationResult,
    generated_by: str = "AYUSH Compliance System",
    generated_at: datetime | None = None,
) -> ComplianceReport:
    """Derive certification flags from a verification result."""
    score = result.compliance_score
    return ComplianceReport(
        batch_id=batch_id,
        generated_at=generated_at or datetime.now(timezone.utc),
        generated_by=generated_by,
        ayush_compliance=score >= AYUSH_THRESHOLD,
        organic_certified=score >= ORGANIC_THRESHOLD,
        fair_trade=score >= FAIR_TRADE_THRESHOLD,
        sustainability_score=score,
        violations=list(result.violations),
    )
