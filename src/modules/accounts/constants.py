"""Account roles and verification states.

A profile may hold several ``Role`` values at once.  Authorization
decisions use a single ``UserRole`` derived from them: the highest
ranked role picks the acting role, and ordinary buyers and sellers
share the ``BUYER_SELLER`` role whose permissions are narrowed by
their relationship to each transaction.
"""

from __future__ import annotations

from typing import Iterable

from django.db import models


class Role(models.TextChoices):
    BUYER = "BUYER", "Buyer"
    SELLER = "SELLER", "Seller"
    AGENT = "AGENT", "Delivery agent"
    ADMIN = "ADMIN", "Administrator"


class UserRole(models.TextChoices):
    BUYER_SELLER = "BUYER_SELLER", "Buyer / seller"
    ADMIN = "ADMIN", "Administrator"
    AGENT = "AGENT", "Delivery agent"


class VerificationStatus(models.TextChoices):
    UNVERIFIED = "UNVERIFIED", "Unverified"
    PENDING = "PENDING", "Pending review"
    VERIFIED = "VERIFIED", "Verified"
    REJECTED = "REJECTED", "Rejected"


# Highest first.
ROLE_PRIORITY: tuple[str, ...] = (Role.ADMIN, Role.AGENT, Role.SELLER, Role.BUYER)

DEFAULT_ROLE = Role.BUYER

_ACTING_ROLE: dict[str, str] = {
    Role.ADMIN: UserRole.ADMIN,
    Role.AGENT: UserRole.AGENT,
    Role.SELLER: UserRole.BUYER_SELLER,
    Role.BUYER: UserRole.BUYER_SELLER,
}

# States from which a user may (re)submit identity documents.
SUBMITTABLE_VERIFICATION_STATES: frozenset[str] = frozenset(
    {VerificationStatus.UNVERIFIED, VerificationStatus.REJECTED}
)


def primary_role(roles: Iterable[str]) -> Role:
    """Return the highest ranked role held, or ``BUYER`` when none is held."""
    held = set(roles)
    for role in ROLE_PRIORITY:
        if role in held:
            return Role(role)
    return DEFAULT_ROLE


def acting_role(role: str) -> UserRole:
    """Map a rich role onto the role used by transaction authorization."""
    return UserRole(_ACTING_ROLE.get(role, UserRole.BUYER_SELLER))
