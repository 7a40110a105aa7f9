"""
Expense management service.

Records expenses and credits in a group. Split amounts come from the pure
``SplitAllocator``; this module resolves who takes part, persists the
expense and writes one ``ExpenseSplit`` row per allocated line.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.expenses.choices import ExpenseType, SplitType
from apps.expenses.models import Expense, ExpenseSplit
from apps.groups.models import Group, GroupMembership

from .allocation import SplitAllocator, SplitLine
from .exceptions import (
    ExpenseNotFoundError,
    GroupNotFoundError,
    InvalidParticipantError,
    NotGroupMemberError,
    SplitError,
)

logger = logging.getLogger(__name__)


def _get_group(group_id: UUID) -> Group:
    try:
        return Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def _get_member_ids(group: Group) -> List[str]:
    """Return member user ids in listing order: oldest member first, then by id."""
    memberships = (
        GroupMembership.objects
        .filter(group=group)
        .order_by('joined_at', 'id')
        .values_list('user_id', flat=True)
    )
    return [str(user_id) for user_id in memberships]


def _normalize_user_id(value: Any) -> str:
    try:
        return str(UUID(str(value)))
    except (TypeError, ValueError):
        raise InvalidParticipantError(f"Invalid user ID: {value}")


def _resolve_participants(
    split_type: str,
    member_ids: List[str],
    selected_member_ids: Optional[Sequence[Any]],
) -> List[str]:
    """
    Pick the participants for a split, in the order that decides remainders.

    Equal-all and custom splits use every member in listing order. Equal
    selected splits use the selected ids in the order they were supplied.
    """
    if split_type != SplitType.EQUAL_SELECTED:
        return list(member_ids)

    participants = []
    for raw_id in selected_member_ids or []:
        user_id = _normalize_user_id(raw_id)
        if user_id not in member_ids:
            raise InvalidParticipantError("Selected members must belong to this group")
        if user_id not in participants:
            participants.append(user_id)
    return participants


def _normalize_custom_shares(
    custom_shares: Optional[Dict[Any, Any]],
    member_ids: List[str],
) -> Dict[str, Any]:
    normalized = {}
    for raw_id, value in (custom_shares or {}).items():
        user_id = _normalize_user_id(raw_id)
        if user_id not in member_ids:
            raise InvalidParticipantError("Custom amounts can only be given to group members")
        normalized[user_id] = value
    return normalized


def _create_splits(expense: Expense, lines: List[SplitLine]) -> List[ExpenseSplit]:
    splits = []
    for position, (user_id, amount) in enumerate(lines):
        splits.append(
            ExpenseSplit.objects.create(
                expense=expense,
                user_id=user_id,
                amount=amount,
                position=position,
            )
        )
    return splits


@transaction.atomic
def create_expense(
    *,
    group_id: UUID,
    created_by: User,
    description: str,
    amount: Decimal,
    paid_by_id: UUID,
    split_type: str = SplitType.EQUAL_ALL,
    expense_type: str = ExpenseType.EXPENSE,
    selected_member_ids: Optional[Sequence[Any]] = None,
    custom_shares: Optional[Dict[Any, Any]] = None
) -> Expense:
    """
    Record an expense and its splits.

    Args:
        group_id: UUID of the group
        created_by: User recording the expense (must be a member)
        description: Validated description
        amount: Validated positive total with at most two decimal places
        paid_by_id: UUID of the member who paid
        split_type: ``equal_all``, ``equal_selected`` or ``custom``
        expense_type: ``expense`` or ``credit``
        selected_member_ids: Members to split between (``equal_selected``)
        custom_shares: Mapping of member id to amount string (``custom``)

    Returns:
        Created Expense instance with its splits

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotGroupMemberError: If created_by is not a member
        InvalidParticipantError: If payer or a chosen participant is not a member
        SplitError: If the allocator rejects the split
    """
    group = _get_group(group_id)
    member_ids = _get_member_ids(group)

    if str(created_by.id) not in member_ids:
        raise NotGroupMemberError("You must be a member of this group")

    payer_id = _normalize_user_id(paid_by_id)
    if payer_id not in member_ids:
        raise InvalidParticipantError("Paid by must be a member of this group")

    participants = _resolve_participants(split_type, member_ids, selected_member_ids)
    shares = None
    if split_type == SplitType.CUSTOM:
        shares = _normalize_custom_shares(custom_shares, member_ids)

    try:
        lines = SplitAllocator.allocate(
            total=amount,
            strategy=split_type,
            participants=participants,
            custom_shares=shares,
        )
    except SplitError as e:
        logger.warning("Rejected %s split for group %s: %s", split_type, group.id, e)
        raise

    expense = Expense.objects.create(
        group=group,
        description=description,
        amount=amount,
        paid_by_id=payer_id,
        split_type=split_type,
        type=expense_type,
        created_by=created_by,
    )
    _create_splits(expense, lines)

    logger.info(
        "Recorded %s %s of %s in group %s split %s ways",
        expense_type, expense.id, amount, group.id, len(lines)
    )
    return expense


@transaction.atomic
def create_credit(
    *,
    group_id: UUID,
    created_by: User,
    description: str,
    amount: Decimal,
    paid_by_id: UUID,
    paid_to_id: UUID
) -> Expense:
    """
    Record a direct repayment between two members.

    The credit is stored as an expense of type ``credit`` with exactly two
    splits: the payer at ``-amount`` and the recipient at ``+amount``.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotGroupMemberError: If created_by is not a member
        InvalidParticipantError: If payer or recipient is not a member
        SameParticipantError: If payer and recipient are the same person
    """
    group = _get_group(group_id)
    member_ids = _get_member_ids(group)

    if str(created_by.id) not in member_ids:
        raise NotGroupMemberError("You must be a member of this group")

    payer_id = _normalize_user_id(paid_by_id)
    recipient_id = _normalize_user_id(paid_to_id)
    if payer_id not in member_ids or recipient_id not in member_ids:
        raise InvalidParticipantError("Paid by and Paid to must both be members of this group")

    try:
        lines = SplitAllocator.allocate_credit(
            total=amount,
            payer=payer_id,
            recipient=recipient_id,
        )
    except SplitError as e:
        logger.warning("Rejected credit for group %s: %s", group.id, e)
        raise

    expense = Expense.objects.create(
        group=group,
        description=description,
        amount=amount,
        paid_by_id=payer_id,
        split_type=SplitType.CUSTOM,
        type=ExpenseType.CREDIT,
        created_by=created_by,
    )
    _create_splits(expense, lines)

    logger.info("Recorded credit %s of %s in group %s", expense.id, amount, group.id)
    return expense


def get_group_expenses(*, group_id: UUID, user: User) -> QuerySet[Expense]:
    """
    Get a group's expenses, newest first, with splits prefetched.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotGroupMemberError: If user is not a member
    """
    group = _get_group(group_id)
    if not group.has_member(user):
        raise NotGroupMemberError("You must be a member of this group")

    return (
        Expense.objects
        .filter(group=group)
        .select_related('paid_by', 'created_by')
        .prefetch_related('splits__user')
    )


def get_expense(*, expense_id: UUID, user: User) -> Expense:
    """
    Get a single expense visible to ``user``.

    Raises:
        ExpenseNotFoundError: If the expense doesn't exist
        NotGroupMemberError: If user is not a member of its group
    """
    try:
        expense = (
            Expense.objects
            .select_related('group', 'paid_by', 'created_by')
            .prefetch_related('splits__user')
            .get(id=expense_id)
        )
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

    if not expense.group.has_member(user):
        raise NotGroupMemberError("You must be a member of this group")

    return expense
