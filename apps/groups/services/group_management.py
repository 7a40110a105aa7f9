"""
Group management service.

Creates groups and reads them back for their members.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.db.models import Count, Prefetch, QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole

from .exceptions import GroupNotFoundError

logger = logging.getLogger(__name__)


@transaction.atomic
def create_group(
    *,
    name: str,
    owner: User,
    description: str = ''
) -> Group:
    """
    Create a new group and add the creator as owner.

    The group and the owner's membership are written in one transaction,
    so a group never exists without its creator as a member.

    Args:
        name: Validated group name
        owner: User who will own the group
        description: Optional group description

    Returns:
        Created Group instance
    """
    group = Group.objects.create(
        name=name,
        owner=owner,
        description=description,
    )

    GroupMembership.objects.create(
        user=owner,
        group=group,
        role=GroupRole.OWNER
    )

    logger.info("User %s created group %s", owner.id, group.id)
    return group


def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by ID with its owner and members loaded.

    Args:
        group_id: UUID of the group

    Returns:
        Group instance

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return (
            Group.objects
            .select_related('owner')
            .prefetch_related(
                Prefetch(
                    'memberships',
                    queryset=GroupMembership.objects.select_related('user')
                )
            )
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def get_user_groups(*, user: User) -> QuerySet[Group]:
    """Groups the user belongs to, newest first, annotated with ``member_count``."""
    group_ids = GroupMembership.objects.filter(user=user).values('group_id')
    return (
        Group.objects
        .filter(id__in=group_ids)
        .select_related('owner')
        .annotate(member_count=Count('memberships'))
        .order_by('-created_at')
    )
