"""Who a user is with respect to one transaction.

A buyer is identified either by account (``Authenticated``) or, for buyers
who paid without an account, by phone number (``Guest``).  All party
matching goes through this module.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Union

CAMEROON_COUNTRY_CODE = "237"
_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: Optional[str]) -> str:
    """Digits only, with a leading +237 country code dropped."""
    digits = _NON_DIGITS.sub("", phone or "")
    if len(digits) == 12 and digits.startswith(CAMEROON_COUNTRY_CODE):
        digits = digits[len(CAMEROON_COUNTRY_CODE):]
    return digits


def same_id(left: Any, right: Any) -> bool:
    """Ids match only when both are present and equal as strings."""
    if left is None or right is None:
        return False
    left, right = str(left), str(right)
    return bool(left) and left == right


@dataclass(frozen=True)
class Authenticated:
    user_id: str

    def matches(self, user: Any) -> bool:
        return same_id(self.user_id, getattr(user, "id", None))


@dataclass(frozen=True)
class Guest:
    phone: str

    def matches(self, user: Any) -> bool:
        expected = normalize_phone(self.phone)
        return bool(expected) and expected == normalize_phone(getattr(user, "phone", ""))


BuyerIdentity = Union[Authenticated, Guest]


def buyer_identities(transaction: Any) -> tuple[BuyerIdentity, ...]:
    identities: list[BuyerIdentity] = []
    buyer_id = getattr(transaction, "buyer_id", None)
    if buyer_id:
        identities.append(Authenticated(str(buyer_id)))
    buyer_phone = getattr(transaction, "buyer_phone", "")
    if normalize_phone(buyer_phone):
        identities.append(Guest(buyer_phone))
    return tuple(identities)


def is_buyer(user: Any, transaction: Any) -> bool:
    """The seller never counts as the buyer, whatever phone is on the request."""
    if is_seller(user, transaction):
        return False
    return any(identity.matches(user) for identity in buyer_identities(transaction))


def is_seller(user: Any, transaction: Any) -> bool:
    return same_id(getattr(transaction, "seller_id", None), getattr(user, "id", None))


def is_assigned_agent(user: Any, transaction: Any) -> bool:
    return same_id(
        getattr(transaction, "assigned_agent_id", None), getattr(user, "id", None)
    )
