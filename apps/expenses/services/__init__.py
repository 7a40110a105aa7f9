"""
Expenses app services layer.

The allocator is pure and can be used without a database. Management
services persist its output inside transactions.
"""

from .exceptions import (
    ExpenseServiceError,
    SplitError,
    NoParticipantsError,
    InvalidShareError,
    EmptyCustomSetError,
    TotalMismatchError,
    SameParticipantError,
    GroupNotFoundError,
    NotGroupMemberError,
    InvalidParticipantError,
    ExpenseNotFoundError,
)

from .allocation import (
    SplitAllocator,
    SplitLine,
    to_minor_units,
    from_minor_units,
)

from .expense_management import (
    create_expense,
    create_credit,
    get_group_expenses,
    get_expense,
)


__all__ = [
    # Exceptions
    'ExpenseServiceError',
    'SplitError',
    'NoParticipantsError',
    'InvalidShareError',
    'EmptyCustomSetError',
    'TotalMismatchError',
    'SameParticipantError',
    'GroupNotFoundError',
    'NotGroupMemberError',
    'InvalidParticipantError',
    'ExpenseNotFoundError',

    # Allocation
    'SplitAllocator',
    'SplitLine',
    'to_minor_units',
    'from_minor_units',

    # Expense Management
    'create_expense',
    'create_credit',
    'get_group_expenses',
    'get_expense',
]
