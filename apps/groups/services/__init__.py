"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    AlreadyMemberError,
    NotMemberError,
    SelfInviteError,
    InviteeNotFoundError,
)

from .group_management import (
    create_group,
    get_group_by_id,
    get_user_groups,
)

from .membership_management import (
    get_group_members,
    invite_member,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'AlreadyMemberError',
    'NotMemberError',
    'SelfInviteError',
    'InviteeNotFoundError',

    # Group Management
    'create_group',
    'get_group_by_id',
    'get_user_groups',

    # Membership Management
    'get_group_members',
    'invite_member',
]
