"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class GroupsServiceError(Exception):
    """Base exception for all groups service errors."""
    pass


class GroupNotFoundError(GroupsServiceError):
    """Raised when a group does not exist or is inaccessible."""
    pass


class NotMemberError(GroupsServiceError):
    """Raised when a user tries to perform an action requiring membership."""
    pass


class AlreadyMemberError(GroupsServiceError):
    """Raised when the invited person is already in the group."""

    def __init__(self, message='This person is already in the group.'):
        super().__init__(message)


class SelfInviteError(GroupsServiceError):
    """Raised when a member tries to invite themselves."""

    def __init__(self, message='You cannot invite yourself to the group.'):
        super().__init__(message)


class InviteeNotFoundError(GroupsServiceError):
    """Raised when no account exists for the invited email."""

    def __init__(self, message='No account found with this email'):
        super().__init__(message)
