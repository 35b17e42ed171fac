"""Account domain exceptions.

Raised by ``ProfileService``; the API layer translates them into
HTTP responses.
"""

from __future__ import annotations


class ProfileNotFound(Exception):
    """The requested profile does not exist."""


class VerificationStateError(Exception):
    """The verification workflow does not allow this step from the current state."""


class RoleChangeNotAllowed(Exception):
    """Only administrators may grant roles."""
