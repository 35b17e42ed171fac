"""Transaction domain exceptions.

Raised by the Service Layer and the repository; the API layer maps
them to HTTP responses.  Decision functions never raise.
"""

from __future__ import annotations

from modules.transactions.constants import PERMISSION_DENIED_MESSAGE, STALE_WRITE_MESSAGE


class TransactionNotFound(Exception):
    """The transaction does not exist or is not visible to the caller."""


class AgentNotFound(Exception):
    """The selected delivery agent does not exist or lacks the AGENT role."""


class InvoiceNotFound(Exception):
    """No invoice has been issued for this transaction yet."""


class TransitionDenied(Exception):
    """The guard rejected the attempted status change."""

    def __init__(self, message: str = PERMISSION_DENIED_MESSAGE) -> None:
        super().__init__(message)


class InvalidSelection(Exception):
    """A required input for the action is missing or invalid."""


class InvalidConfirmationCode(InvalidSelection):
    """The handoff code does not match the transaction's code."""


class StaleTransaction(Exception):
    """The status changed between read and conditional write."""

    def __init__(self, message: str = STALE_WRITE_MESSAGE) -> None:
        super().__init__(message)
