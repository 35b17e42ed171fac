"""Tests for the next-step resolver and its consistency with the guard."""

from __future__ import annotations

import pytest

from modules.accounts.constants import UserRole
from modules.transactions.actions import (
    ACTION_TARGETS,
    ActionType,
    Party,
    get_available_action,
)
from modules.transactions.constants import TransactionStatus
from modules.transactions.permissions import allowed_targets, can_transition

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

ALL_USERS = [SELLER, BUYER, STRANGER, ADMIN, AGENT, OTHER_AGENT]


class TestResolverScenarios:
    def test_seller_ships_when_escrow_held(self):
        tx = StubTransaction(status="escrow_held", seller_id="S1")
        action = get_available_action(StubUser("S1"), tx)
        assert action.type == ActionType.SELLER_SHIP
        assert action.label == "Mark In Transit"
        assert action.target_status == TransactionStatus.IN_TRANSIT_TO_HUB

    def test_buyer_waits_for_seller_when_escrow_held(self):
        tx = StubTransaction(status="escrow_held", seller_id="S1")
        action = get_available_action(StubUser("B1"), tx)
        assert action.type == ActionType.WAITING
        assert action.waiting_for == "seller"
        assert action.is_waiting

    @pytest.mark.parametrize("status", ["pending_setup", "awaiting_payment"])
    def test_everyone_waits_for_the_buyer_to_pay(self, status):
        tx = StubTransaction(status=status)
        for user in ALL_USERS:
            action = get_available_action(user, tx)
            assert action.type == ActionType.WAITING
            assert action.waiting_for == Party.BUYER

    def test_admin_receives_and_assigns(self):
        assert (
            get_available_action(ADMIN, StubTransaction(status="in_transit_to_hub")).type
            == ActionType.ADMIN_RECEIVE
        )
        assert (
            get_available_action(ADMIN, StubTransaction(status="at_prolist_hub")).type
            == ActionType.ADMIN_ASSIGN
        )

    def test_only_assigned_agent_delivers(self):
        tx = StubTransaction(status="out_for_delivery", assigned_agent_id="A1")
        assert get_available_action(AGENT, tx).type == ActionType.AGENT_DELIVER
        other = get_available_action(OTHER_AGENT, tx)
        assert other.type == ActionType.WAITING
        assert other.waiting_for == Party.AGENT

    def test_buyer_confirms_delivery(self):
        tx = StubTransaction(status="delivered_awaiting_confirmation")
        assert get_available_action(BUYER, tx).type == ActionType.BUYER_CONFIRM
        assert get_available_action(SELLER, tx).waiting_for == Party.BUYER

    def test_absent_user_gets_nothing(self):
        assert get_available_action(None, StubTransaction(status="escrow_held")) is None


class TestTerminalStates:
    @pytest.mark.parametrize("status", ["completed", "refunded", "cancelled"])
    def test_no_action_for_anyone(self, status):
        tx = StubTransaction(status=status, assigned_agent_id="A1")
        for user in ALL_USERS:
            assert get_available_action(user, tx) is None


class TestConsistencyWithTable:
    def test_every_status_resolves_without_error(self):
        for status in TransactionStatus.values:
            tx = StubTransaction(status=status, assigned_agent_id="A1")
            for user in ALL_USERS:
                get_available_action(user, tx)

    def test_each_actionable_type_maps_to_one_target(self):
        actionable = set(ActionType.values) - {ActionType.WAITING}
        assert set(ACTION_TARGETS) == actionable
        assert len(set(ACTION_TARGETS.values())) == len(ACTION_TARGETS)

    def test_concrete_action_implies_table_entry_and_guard(self):
        for status in TransactionStatus.values:
            tx = StubTransaction(status=status, assigned_agent_id="A1")
            for user in ALL_USERS:
                action = get_available_action(user, tx)
                if action is None or action.is_waiting:
                    continue
                assert action.target_status in allowed_targets(user.role, status)
                assert can_transition(user, tx, action.target_status)

    def test_at_most_one_action_per_role_and_status(self):
        for status in TransactionStatus.values:
            tx = StubTransaction(status=status, assigned_agent_id="A1")
            for role in UserRole.values:
                actions = [
                    get_available_action(StubUser(user_id, role), tx)
                    for user_id in ("S1", "B1", "A1", "X1")
                ]
                types = {a.type for a in actions if a is not None and not a.is_waiting}
                assert len(types) <= 1, (status, role, types)
                if types:
                    assert allowed_targets(role, status)
