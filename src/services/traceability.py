"""
Traceability service
====================

Orchestrates the batch store, the ledger and the compliance checker.
Routes and the seed script call this class; nothing here knows about HTTP.

Flow for ``record_event``
-------------------------
1. Role check (``ROLE_EVENT_KINDS``), when a role is supplied.
2. Hold the store's append lock for the batch through steps 3-5.
3. Load the batch (``BatchNotFound`` if absent).
4. Seal the event onto the batch's hash chain.
5. Append through the store, which advances the batch status.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from src.config import Settings
from src.domain.compliance import (
    NOT_FOUND_RESULT,
    ComplianceReport,
    VerificationResult,
    build_report,
    verify_events,
)
from src.domain.entities import (
    Batch,
    BatchNotFound,
    Event,
    RoleNotPermitted,
    generate_batch_id,
)
from src.domain.enums import ROLE_EVENT_KINDS, BatchStatus, UserRole
from src.domain.ledger import seal, verify_chain
from src.domain.qr import parse_qr_payload, verify_url
from src.infrastructure.store import BatchStore

logger = logging.getLogger(__name__)

RECENT_BATCHES = 5


@dataclass(frozen=True)
class DashboardStats:
    total_batches: int
    active_batches: int
    compliance_rate: float
    recent_batches: list[Batch]


@dataclass(frozen=True)
class BatchVerification:
    batch_id: str
    batch: Optional[Batch]
    result: VerificationResult
    report: ComplianceReport
    chain_intact: bool


class TraceabilityService:
    """High-level API used by the routes and the seed script."""

    def __init__(self, store: BatchStore, settings: Settings):
        self.store = store
        self.settings = settings

    # ── Commands ──────────────────────────────────────────────────────

    async def create_batch(
        self,
        species: str,
        harvest_date: date,
        quantity: float,
        unit: Optional[str] = None,
    ) -> Batch:
        batch_id = generate_batch_id(self.settings.batch_id_prefix)
        batch = Batch(
            id=batch_id,
            species=species,
            harvest_date=harvest_date,
            total_quantity=quantity,
            unit=unit or self.settings.default_unit,
            status=BatchStatus.HARVESTED,
            qr_code=verify_url(self.settings.verify_base_url, batch_id),
        )
        await self.store.add_batch(batch)
        logger.info("Created batch %s (%s, %s %s)", batch_id, species, quantity, batch.unit)
        return batch

    async def record_event(
        self, event: Event, role: Optional[UserRole] = None
    ) -> Batch:
        if role is not None and event.kind not in ROLE_EVENT_KINDS[role]:
            raise RoleNotPermitted(
                f"Role '{role.value}' cannot record {event.kind.value} events"
            )

        async with self.store.append_lock(event.batch_id):
            batch = await self.store.get_batch(event.batch_id)
            if batch is None:
                raise BatchNotFound(event.batch_id)

            seal(event, batch.last_hash or None)
            batch = await self.store.append_event(event)
        logger.info(
            "Added %s event %s to batch %s (status=%s)",
            event.kind.value, event.id, batch.id, batch.status.value,
        )
        return batch

    # ── Queries ───────────────────────────────────────────────────────

    async def get_batch(self, batch_id: str) -> Batch:
        batch = await self.store.get_batch(batch_id)
        if batch is None:
            raise BatchNotFound(batch_id)
        return batch

    async def list_batches(self) -> list[Batch]:
        return await self.store.list_batches()

    async def verify(self, batch_id: str) -> BatchVerification:
        """Compliance result, report and chain state from one batch load.

        Unknown ids yield the fixed not-found result and ``batch=None``.
        """
        batch = await self.store.get_batch(batch_id)
        result = verify_events(batch.events) if batch else NOT_FOUND_RESULT
        return BatchVerification(
            batch_id=batch_id,
            batch=batch,
            result=result,
            report=build_report(
                batch_id, result, generated_by=self.settings.report_issuer
            ),
            chain_intact=batch is not None and verify_chain(batch.events),
        )

    async def verify_batch(self, batch_id: str) -> VerificationResult:
        return (await self.verify(batch_id)).result

    async def chain_intact(self, batch_id: str) -> bool:
        return (await self.verify(batch_id)).chain_intact

    async def compliance_report(self, batch_id: str) -> ComplianceReport:
        return (await self.verify(batch_id)).report

    async def dashboard_stats(self) -> DashboardStats:
        batches = await self.store.list_batches()
        active = [b for b in batches if b.status != BatchStatus.DISTRIBUTED]
        valid = sum(1 for b in batches if verify_events(b.events).valid)
        rate = round(100.0 * valid / len(batches), 1) if batches else 0.0
        return DashboardStats(
            total_batches=len(batches),
            active_batches=len(active),
            compliance_rate=rate,
            recent_batches=batches[-RECENT_BATCHES:],
        )

    def resolve_qr(self, payload: str) -> str:
        """Batch id encoded in a scanned QR payload (``ValueError`` if none)."""
        return parse_qr_payload(payload)

    def qr_payload(self, batch: Batch) -> str:
        return batch.qr_code or verify_url(self.settings.verify_base_url, batch.id)
