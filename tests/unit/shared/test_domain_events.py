"""Unit tests for domain events registration on entities."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

import pytest

from modules.transactions.events import TransactionCreated, TransactionStatusChanged
from modules.transactions.models import Transaction
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


def test_transaction_registers_and_clears_domain_events():
    tx = Transaction(product_name="Tecno Spark 20", price=70_000)

    assert tx.domain_events == []

    event = TransactionCreated(aggregate_id=tx.id, seller_id="S1")
    tx.add_domain_event(event)

    assert tx.domain_events == [event]
    assert event.event_name == "TransactionCreated"

    tx.clear_domain_events()
    assert tx.domain_events == []


def test_payload_is_json_safe():
    aggregate_id = uuid4()
    event = TransactionStatusChanged(
        aggregate_id=aggregate_id, old_status="escrow_held", new_status="refunded"
    )
    payload = event.to_payload()

    assert payload["aggregate_id"] == str(aggregate_id)
    assert payload["event_name"] == "TransactionStatusChanged"
    datetime.fromisoformat(payload["occurred_on"])


class RecordingHandler:
    def __init__(self):
        self.seen = []

    def handle(self, event):
        self.seen.append(event)


class TestInMemoryEventBus:
    def test_publish_reaches_subscribers_of_that_type_only(self):
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(TransactionStatusChanged, handler)

        changed = TransactionStatusChanged(aggregate_id=uuid4())
        bus.publish(changed)
        bus.publish(TransactionCreated(aggregate_id=uuid4()))

        assert handler.seen == [changed]

    def test_subscribe_is_idempotent(self):
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(TransactionStatusChanged, handler)
        bus.subscribe(TransactionStatusChanged, handler)

        bus.publish(TransactionStatusChanged(aggregate_id=uuid4()))

        assert len(handler.seen) == 1

    def test_unsubscribe(self):
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(TransactionStatusChanged, handler)
        bus.unsubscribe(TransactionStatusChanged, handler)

        bus.publish(TransactionStatusChanged(aggregate_id=uuid4()))

        assert handler.seen == []

    def test_handler_errors_propagate(self):
        class Failing:
            def handle(self, event):
                raise RuntimeError("boom")

        bus = InMemoryEventBus()
        bus.subscribe(TransactionStatusChanged, Failing())
        with pytest.raises(RuntimeError):
            bus.publish(TransactionStatusChanged(aggregate_id=uuid4()))
