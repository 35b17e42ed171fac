"""Who may publish and manage listings."""

from __future__ import annotations

from typing import Any, Optional

from modules.accounts.constants import UserRole, VerificationStatus


def can_create_listing(user: Optional[Any]) -> bool:
    """Admins and agents always; buyer/sellers only once verified."""
    if user is None:
        return False
    if user.role in (UserRole.ADMIN, UserRole.AGENT):
        return True
    return (
        user.role == UserRole.BUYER_SELLER
        and user.verification_status == VerificationStatus.VERIFIED
    )


def can_manage_listing(user: Optional[Any], listing: Any) -> bool:
    if user is None:
        return False
    return user.role == UserRole.ADMIN or str(listing.seller_id) == str(user.id)
