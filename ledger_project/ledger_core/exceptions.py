"""
Ledger error kinds.

Malformed input (bad amounts, foreign accounts, hierarchy cycles) is reported
with Django's own ValidationError; everything below is a posting-engine
outcome the caller is expected to tell apart.
"""


class LedgerError(Exception):
    """Base class for posting engine errors."""
    pass


class UnbalancedEntryError(LedgerError):
    """Raised when a JournalEntry fails the double-entry balance check."""
    pass


class PeriodNotFoundError(LedgerError):
    """Raised when no fiscal period covers the entry date."""
    pass


class PeriodClosedError(LedgerError):
    """Raised when the covering fiscal period is closed."""
    pass


class AlreadyClosedError(LedgerError):
    """Raised when closing a period that is already closed."""
    pass


class AlreadyReversedError(LedgerError):
    """Raised when reversing an entry a second time."""
    pass


class NotPostedError(LedgerError):
    """Raised when reversing an entry that is not a posted original."""
    pass


class InvalidTransitionError(LedgerError):
    """Raised when a status change is not allowed by the state machine."""
    pass


class AccountNotFoundError(LedgerError):
    """Raised when a required account is missing and auto-creation is off."""
    pass


class DuplicateReferenceError(LedgerError):
    """Raised when (tenant, reference_type, reference_id) already has an entry.

    Carries the existing entry so event handlers can treat it as done.
    """

    def __init__(self, message, entry=None):
        super().__init__(message)
        self.entry = entry
