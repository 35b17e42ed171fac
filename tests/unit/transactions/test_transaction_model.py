"""Tests for database-level invariants of the Transaction model."""

from __future__ import annotations

import pytest
from django.db import IntegrityError, transaction

from modules.transactions.constants import (
    AGENT_REQUIRED_STATES,
    PRE_DELIVERY_STATES,
    SIDE_EXITS,
    TransactionStatus,
)

pytestmark = pytest.mark.unit


class TestAgentAssignmentConstraint:
    @pytest.mark.parametrize("status", sorted(PRE_DELIVERY_STATES))
    def test_agent_rejected_before_delivery(self, make_transaction, agent, status):
        with pytest.raises(IntegrityError), transaction.atomic():
            make_transaction(status, assigned_agent=agent)

    @pytest.mark.parametrize("status", sorted(AGENT_REQUIRED_STATES))
    def test_agent_required_from_out_for_delivery(self, make_transaction, status):
        with pytest.raises(IntegrityError), transaction.atomic():
            make_transaction(status, assigned_agent=None)

    @pytest.mark.parametrize("status", sorted(AGENT_REQUIRED_STATES))
    def test_assigned_agent_accepted(self, make_transaction, agent, status):
        tx = make_transaction(status)
        assert tx.assigned_agent_id == agent.id

    @pytest.mark.parametrize("status", sorted(SIDE_EXITS))
    def test_closed_transactions_unconstrained(self, make_transaction, agent, status):
        assert make_transaction(status).assigned_agent_id is None
        assert make_transaction(status, assigned_agent=agent).assigned_agent_id == agent.id

    def test_status_update_cannot_drop_agent(self, make_transaction):
        tx = make_transaction(TransactionStatus.OUT_FOR_DELIVERY)
        tx.assigned_agent = None
        with pytest.raises(IntegrityError), transaction.atomic():
            tx.save()
