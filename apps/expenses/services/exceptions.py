"""
Domain exceptions for expenses app.

Split errors are raised by the allocator for input that cannot be turned
into a valid set of split lines. They are deterministic validation failures:
never retried, always shown to the user as-is.
"""


class ExpenseServiceError(Exception):
    """Base exception for expense service errors."""
    pass


class SplitError(ExpenseServiceError):
    """Base exception for split allocation failures."""
    pass


class NoParticipantsError(SplitError):
    """Raised when an equal split has nobody to split between."""

    def __init__(self, message='Please select at least one member to split between.'):
        super().__init__(message)


class InvalidShareError(SplitError):
    """Raised when a custom share is not a non-negative number."""

    def __init__(self, message='Custom amounts must be non-negative numbers.'):
        super().__init__(message)


class EmptyCustomSetError(SplitError):
    """Raised when no participant ends up with a positive custom share."""

    def __init__(self, message='Please enter at least one custom amount.'):
        super().__init__(message)


class TotalMismatchError(SplitError):
    """Raised when custom shares do not add up to the total."""

    def __init__(self, message='Custom amounts must add up exactly to the total amount.'):
        super().__init__(message)


class SameParticipantError(SplitError):
    """Raised when a credit's payer and recipient are the same person."""

    def __init__(self, message='Paid by and Paid to cannot be the same person.'):
        super().__init__(message)


class GroupNotFoundError(ExpenseServiceError):
    """Raised when the expense's group does not exist."""
    pass


class NotGroupMemberError(ExpenseServiceError):
    """Raised when the acting user is not a member of the group."""
    pass


class InvalidParticipantError(ExpenseServiceError):
    """Raised when a payer, recipient or selected member is not in the group."""
    pass


class ExpenseNotFoundError(ExpenseServiceError):
    """Raised when an expense does not exist or is inaccessible."""
    pass
