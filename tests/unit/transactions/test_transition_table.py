"""Tests for the per-role transition table and the canonical order."""

from __future__ import annotations

import pytest

from modules.accounts.constants import UserRole
from modules.transactions.constants import (
    ROLE_TRANSITIONS,
    SIDE_EXITS,
    STATUS_ORDER,
    TERMINAL_STATES,
    TransactionStatus,
    status_index,
)
from modules.transactions.permissions import (
    allowed_targets,
    can_cancel,
    can_refund,
    can_transition,
    is_forward_move,
)

from .stubs import ADMIN, AGENT, BUYER, SELLER, StubTransaction

pytestmark = pytest.mark.unit


class TestAllowedTargets:
    @pytest.mark.parametrize(
        "role, status, expected",
        [
            (UserRole.BUYER_SELLER, "escrow_held", {"in_transit_to_hub"}),
            (UserRole.BUYER_SELLER, "delivered_awaiting_confirmation", {"completed"}),
            (UserRole.ADMIN, "in_transit_to_hub", {"at_prolist_hub"}),
            (UserRole.ADMIN, "at_prolist_hub", {"out_for_delivery"}),
            (UserRole.AGENT, "out_for_delivery", {"delivered_awaiting_confirmation"}),
        ],
    )
    def test_listed_pairs(self, role, status, expected):
        assert allowed_targets(role, status) == expected

    def test_every_unlisted_pair_is_empty(self):
        for role in UserRole.values:
            for status in TransactionStatus.values:
                if status in ROLE_TRANSITIONS.get(role, {}):
                    continue
                assert allowed_targets(role, status) == frozenset()

    def test_unknown_role_allows_nothing(self):
        assert allowed_targets("SUPERVISOR", "escrow_held") == frozenset()
        assert allowed_targets(None, "escrow_held") == frozenset()

    def test_admin_cannot_skip_to_completed(self):
        assert "completed" not in allowed_targets(UserRole.ADMIN, "in_transit_to_hub")


class TestCanonicalOrder:
    def test_order_starts_and_ends_correctly(self):
        assert STATUS_ORDER[0] == TransactionStatus.PENDING_SETUP
        assert STATUS_ORDER[-1] == TransactionStatus.COMPLETED
        assert len(STATUS_ORDER) == 8

    def test_side_exits_have_no_position(self):
        for status in SIDE_EXITS:
            assert status_index(status) == -1

    def test_terminal_states(self):
        assert TERMINAL_STATES == {"completed", "refunded", "cancelled"}

    def test_every_table_move_is_one_step_forward(self):
        for by_status in ROLE_TRANSITIONS.values():
            for current, targets in by_status.items():
                for target in targets:
                    assert is_forward_move(current, target), (current, target)

    def test_backward_and_skipping_moves_are_not_forward(self):
        assert not is_forward_move("at_prolist_hub", "in_transit_to_hub")
        assert not is_forward_move("escrow_held", "at_prolist_hub")
        assert not is_forward_move("completed", "refunded")


class TestForwardOnlyWalk:
    """Applying only guard-approved moves never goes backwards."""

    def _approved_moves(self, tx):
        users = [SELLER, BUYER, ADMIN, AGENT]
        return [
            (user, target)
            for user in users
            for target in TransactionStatus.values
            if can_transition(user, tx, target)
        ]

    def test_walk_from_escrow_to_completed_is_monotonic(self):
        tx = StubTransaction(status="escrow_held", assigned_agent_id="A1")
        visited = [tx.status]
        while True:
            moves = self._approved_moves(tx)
            if not moves:
                break
            assert len(moves) == 1
            _, target = moves[0]
            assert status_index(target) > status_index(tx.status)
            tx.status = target
            visited.append(target)

        assert visited == list(STATUS_ORDER[2:])

    def test_side_exits_reachable_from_every_non_terminal_status(self):
        for status in STATUS_ORDER:
            if status in TERMINAL_STATES:
                continue
            tx = StubTransaction(status=status)
            assert can_cancel(ADMIN, tx) or can_refund(ADMIN, tx), status

    def test_no_side_exit_from_terminal_states(self):
        for status in TERMINAL_STATES:
            tx = StubTransaction(status=status)
            assert not can_cancel(ADMIN, tx)
            assert not can_refund(ADMIN, tx)
