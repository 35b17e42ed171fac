"""Tests for the authorization guard and the side-exit / payment policies."""

from __future__ import annotations

import pytest

from modules.accounts.constants import UserRole
from modules.transactions.actions import ActionType, get_available_action
from modules.transactions.constants import ROLE_TRANSITIONS, TransactionStatus
from modules.transactions.permissions import (
    allowed_targets,
    can_cancel,
    can_record_payment,
    can_refund,
    can_request_payment,
    can_transition,
    can_view_transaction,
)

from .stubs import (
    ADMIN,
    AGENT,
    BUYER,
    OTHER_AGENT,
    SELLER,
    STRANGER,
    StubTransaction,
    StubUser,
)

pytestmark = pytest.mark.unit


class TestCanTransition:
    def test_absent_user_is_denied(self):
        tx = StubTransaction(status="escrow_held")
        assert can_transition(None, tx, "in_transit_to_hub") is False

    def test_admin_receives_at_hub(self):
        tx = StubTransaction(status="in_transit_to_hub")
        assert can_transition(ADMIN, tx, "at_prolist_hub") is True

    def test_backward_table_entry_is_still_refused(self, monkeypatch):
        monkeypatch.setitem(
            ROLE_TRANSITIONS[UserRole.ADMIN],
            TransactionStatus.AT_PROLIST_HUB,
            frozenset({TransactionStatus.IN_TRANSIT_TO_HUB}),
        )
        tx = StubTransaction(status="at_prolist_hub")

        assert "in_transit_to_hub" in allowed_targets(ADMIN.role, tx.status)
        assert can_transition(ADMIN, tx, "in_transit_to_hub") is False

    def test_admin_cannot_jump_to_completed(self):
        tx = StubTransaction(status="in_transit_to_hub")
        assert can_transition(ADMIN, tx, "completed") is False

    def test_only_the_seller_ships(self):
        tx = StubTransaction(status="escrow_held")
        assert can_transition(SELLER, tx, "in_transit_to_hub") is True
        assert can_transition(BUYER, tx, "in_transit_to_hub") is False
        assert can_transition(STRANGER, tx, "in_transit_to_hub") is False

    def test_seller_cannot_ship_outside_escrow_held(self):
        for status in TransactionStatus.values:
            if status == TransactionStatus.ESCROW_HELD:
                continue
            tx = StubTransaction(status=status)
            assert can_transition(SELLER, tx, "in_transit_to_hub") is False

    def test_assigned_agent_delivers(self):
        tx = StubTransaction(status="out_for_delivery", assigned_agent_id="A1")
        assert can_transition(AGENT, tx, "delivered_awaiting_confirmation") is True

    def test_other_agent_cannot_deliver(self):
        tx = StubTransaction(status="out_for_delivery", assigned_agent_id="A1")
        assert can_transition(OTHER_AGENT, tx, "delivered_awaiting_confirmation") is False

    def test_unassigned_agent_never_passes_for_any_target(self):
        for status in TransactionStatus.values:
            tx = StubTransaction(status=status, assigned_agent_id="A1")
            for target in TransactionStatus.values:
                assert can_transition(OTHER_AGENT, tx, target) is False

    def test_buyer_confirms_by_id(self):
        tx = StubTransaction(status="delivered_awaiting_confirmation")
        assert can_transition(BUYER, tx, "completed") is True
        assert can_transition(SELLER, tx, "completed") is False

    def test_guest_buyer_confirms_by_phone(self):
        tx = StubTransaction(
            status="delivered_awaiting_confirmation",
            buyer_id=None,
            buyer_phone="+237 600 000 002",
        )
        guest = StubUser("G1", phone="600000002")
        assert can_transition(guest, tx, "completed") is True

    def test_seller_with_buyer_phone_cannot_confirm(self):
        tx = StubTransaction(
            status="delivered_awaiting_confirmation", buyer_phone="600000001"
        )
        seller = StubUser("S1", phone="+237 600 000 001")
        assert can_transition(seller, tx, "completed") is False
        assert get_available_action(seller, tx).type == ActionType.WAITING

    def test_empty_phones_never_match(self):
        tx = StubTransaction(
            status="delivered_awaiting_confirmation", buyer_id=None, buyer_phone=""
        )
        assert can_transition(StubUser("G1", phone=""), tx, "completed") is False

    def test_agent_role_never_confirms_receipt(self):
        tx = StubTransaction(
            status="delivered_awaiting_confirmation", assigned_agent_id="A1"
        )
        assert can_transition(AGENT, tx, "completed") is False


class TestPaymentPolicy:
    def test_buyer_requests_payment(self):
        tx = StubTransaction(status="pending_setup")
        assert can_request_payment(BUYER, tx) is True

    def test_seller_cannot_request_payment(self):
        tx = StubTransaction(status="pending_setup", buyer_id=None)
        assert can_request_payment(SELLER, tx) is False

    def test_unclaimed_request_can_be_claimed(self):
        tx = StubTransaction(status="pending_setup", buyer_id=None)
        assert can_request_payment(STRANGER, tx) is True

    def test_claimed_request_rejects_strangers(self):
        tx = StubTransaction(status="pending_setup")
        assert can_request_payment(STRANGER, tx) is False

    def test_request_only_from_pending_setup(self):
        tx = StubTransaction(status="awaiting_payment")
        assert can_request_payment(BUYER, tx) is False

    def test_buyer_or_admin_records_payment(self):
        tx = StubTransaction(status="awaiting_payment")
        assert can_record_payment(BUYER, tx) is True
        assert can_record_payment(ADMIN, tx) is True
        assert can_record_payment(SELLER, tx) is False
        assert can_record_payment(AGENT, tx) is False

    def test_payment_not_recorded_twice(self):
        tx = StubTransaction(status="escrow_held")
        assert can_record_payment(ADMIN, tx) is False


class TestSideExits:
    @pytest.mark.parametrize("status", ["pending_setup", "awaiting_payment"])
    def test_cancel_before_payment(self, status):
        tx = StubTransaction(status=status)
        assert can_cancel(ADMIN, tx) is True
        assert can_cancel(SELLER, tx) is True
        assert can_cancel(BUYER, tx) is True
        assert can_cancel(STRANGER, tx) is False
        assert can_cancel(AGENT, tx) is False

    def test_cancel_not_allowed_once_funded(self):
        tx = StubTransaction(status="escrow_held")
        assert can_cancel(ADMIN, tx) is False

    @pytest.mark.parametrize(
        "status",
        [
            "escrow_held",
            "in_transit_to_hub",
            "at_prolist_hub",
            "out_for_delivery",
            "delivered_awaiting_confirmation",
        ],
    )
    def test_refund_is_admin_only_while_funds_held(self, status):
        tx = StubTransaction(status=status, assigned_agent_id="A1")
        assert can_refund(ADMIN, tx) is True
        assert can_refund(SELLER, tx) is False
        assert can_refund(BUYER, tx) is False
        assert can_refund(AGENT, tx) is False

    def test_no_refund_before_payment_or_after_completion(self):
        assert can_refund(ADMIN, StubTransaction(status="awaiting_payment")) is False
        assert can_refund(ADMIN, StubTransaction(status="completed")) is False


class TestVisibility:
    def test_admin_sees_everything(self):
        assert can_view_transaction(ADMIN, StubTransaction()) is True

    def test_parties_see_their_transaction(self):
        tx = StubTransaction()
        assert can_view_transaction(SELLER, tx) is True
        assert can_view_transaction(BUYER, tx) is True
        assert can_view_transaction(STRANGER, tx) is False

    def test_agent_sees_only_assigned(self):
        tx = StubTransaction(status="out_for_delivery", assigned_agent_id="A1")
        assert can_view_transaction(AGENT, tx) is True
        assert can_view_transaction(OTHER_AGENT, tx) is False

    def test_anonymous_sees_nothing(self):
        assert can_view_transaction(None, StubTransaction()) is False
