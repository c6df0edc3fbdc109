"""
Mock ledger: a SHA-256 hash chain over a batch's events.

Each event is sealed with ``prev_hash`` (the previous event's hash, or
``GENESIS`` for the first) and ``hash = sha256(canonical JSON of
{prev_hash, payload, timestamp})``.  Tampering with any sealed event breaks
every hash after it.  The chain says nothing about compliance; it is
reported alongside the score.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Sequence

from .entities import Event, event_to_payload

GENESIS = "GENESIS"


def block_payload(event: Event) -> dict[str, Any]:
    return {
        "id": event.id,
        "batch_id": event.batch_id,
        "kind": event.kind.value,
        **event_to_payload(event),
    }


def compute_hash(prev_hash: str, payload: dict[str, Any], timestamp: str) -> str:
    block = json.dumps(
        {"prev_hash": prev_hash, "payload": payload, "timestamp": timestamp},
        sort_keys=True,
    )
    return hashlib.sha256(block.encode("utf-8")).hexdigest()


def seal(event: Event, prev_hash: str | None) -> Event:
    """Set ``prev_hash`` / ``hash`` on *event* in place and return it."""
    event.prev_hash = prev_hash or GENESIS
    event.hash = compute_hash(
        event.prev_hash, block_payload(event), event.timestamp.isoformat()
    )
    return event


def verify_chain(events: Sequence[Event]) -> bool:
    prev = GENESIS
    for event in events:
        expected = compute_hash(
            prev, block_payload(event), event.timestamp.isoformat()
        )
        if event.prev_hash != prev or event.hash != expected:
            return False
        prev = event.hash
    return True
