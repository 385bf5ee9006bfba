"""Errors raised by the settlement engine."""


class MessLedgerError(Exception):
    """Base error for the mess ledger."""


class InvalidPeriodError(MessLedgerError, ValueError):
    """Raised when an explicit report period cannot be used."""


class MemberNotFoundError(MessLedgerError, LookupError):
    """Raised when a requesting identity does not match any member."""

    def __init__(self, member_id: object) -> None:
        super().__init__(f"Member {member_id} not found")
        self.member_id = member_id
