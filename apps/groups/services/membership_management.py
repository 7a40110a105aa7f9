"""
Membership management service.

Lists members and adds people to a group by email.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole

from .exceptions import (
    GroupNotFoundError,
    AlreadyMemberError,
    NotMemberError,
    SelfInviteError,
    InviteeNotFoundError,
)

logger = logging.getLogger(__name__)


def get_group_members(*, group_id: UUID, user: User) -> QuerySet[GroupMembership]:
    """
    Get all members of a group, oldest member first.

    Args:
        group_id: UUID of the group
        user: User asking (must be a member)

    Returns:
        QuerySet of GroupMembership instances

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.has_member(user):
        raise NotMemberError("You must be a member of this group")

    return (
        GroupMembership.objects
        .filter(group=group)
        .select_related('user')
        .order_by('joined_at', 'id')
    )


@transaction.atomic
def invite_member(
    *,
    group_id: UUID,
    email: str,
    invited_by: User
) -> GroupMembership:
    """
    Add an existing account to a group by email.

    The group row is locked so two invitations for the same person
    cannot race past the membership check.

    Args:
        group_id: UUID of the group
        email: Email of the person to add (trimmed, case-insensitive)
        invited_by: Member sending the invitation

    Returns:
        Created GroupMembership instance with role ``member``

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If invited_by is not a member
        SelfInviteError: If the email belongs to invited_by
        InviteeNotFoundError: If no account has this email
        AlreadyMemberError: If the person is already in the group
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.has_member(invited_by):
        raise NotMemberError("You must be a member of this group")

    email = User.objects.normalize_email(email)
    if invited_by.email.lower() == email:
        raise SelfInviteError()

    try:
        invitee = User.objects.get(email=email, is_active=True)
    except User.DoesNotExist:
        raise InviteeNotFoundError()

    if group.has_member(invitee):
        raise AlreadyMemberError()

    try:
        with transaction.atomic():
            membership = GroupMembership.objects.create(
                user=invitee,
                group=group,
                role=GroupRole.MEMBER
            )
    except IntegrityError:
        # Database constraint caught duplicate membership
        raise AlreadyMemberError()

    logger.info("User %s added %s to group %s", invited_by.id, invitee.id, group.id)
    return membership
