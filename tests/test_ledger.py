"""Unit tests for the event hash chain."""

from dataclasses import replace

from src.domain.ledger import GENESIS, compute_hash, seal, verify_chain
from tests.factories import collection, processing, quality_test


def _sealed_chain():
    events = [collection(), processing(), quality_test()]
    prev = None
    for e in events:
        seal(e, prev)
        prev = e.hash
    return events


class TestHashChain:
    def test_first_event_links_to_genesis(self):
        events = _sealed_chain()
        assert events[0].prev_hash == GENESIS
        assert events[1].prev_hash == events[0].hash

    def test_hash_is_sha256_hex(self):
        h = compute_hash(GENESIS, {"a": 1}, "2024-01-15T06:30:00+00:00")
        assert len(h) == 64
        int(h, 16)

    def test_hash_independent_of_key_order(self):
        ts = "2024-01-15T06:30:00+00:00"
        assert compute_hash("x", {"a": 1, "b": 2}, ts) == compute_hash("x", {"b": 2, "a": 1}, ts)

    def test_intact_chain_verifies(self):
        assert verify_chain(_sealed_chain())

    def test_empty_chain_verifies(self):
        assert verify_chain([])

    def test_tampered_event_breaks_chain(self):
        events = _sealed_chain()
        events[1] = replace(events[1], processor_name="Someone Else")
        assert not verify_chain(events)

    def test_reordered_events_break_chain(self):
        events = _sealed_chain()
        events[0], events[1] = events[1], events[0]
        assert not verify_chain(events)

    def test_unsealed_events_fail(self):
        assert not verify_chain([collection()])
