"""
Service layer tests for groups.

Tests cover:
- Group creation with owner membership
- Listing a user's groups with member counts
- Member listing and access checks
- Adding members by email
"""

from uuid import uuid4

import pytest
from django.utils import timezone

from apps.groups.models import Group, GroupMembership, GroupRole
from apps.groups.services import (
    create_group,
    get_group_by_id,
    get_user_groups,
    get_group_members,
    invite_member,
    GroupNotFoundError,
    NotMemberError,
    AlreadyMemberError,
    SelfInviteError,
    InviteeNotFoundError,
)


@pytest.mark.django_db
class TestCreateGroup:

    def test_creator_becomes_owner(self, group_other_user):
        group = create_group(name='Goa Trip', owner=group_other_user, description='Beach week')

        assert group.owner == group_other_user
        assert group.description == 'Beach week'
        assert group.get_user_role(group_other_user) == GroupRole.OWNER
        assert group.memberships.count() == 1

    def test_get_group_by_id(self, group):
        fetched = get_group_by_id(group_id=group.id)

        assert fetched == group
        assert len(fetched.memberships.all()) == 2

    def test_get_group_by_id_not_found(self, db):
        with pytest.raises(GroupNotFoundError):
            get_group_by_id(group_id=uuid4())


@pytest.mark.django_db
class TestUserGroups:

    def test_only_member_groups(self, group, group_owner, group_other_user):
        create_group(name='Someone Else', owner=group_other_user)

        groups = list(get_user_groups(user=group_owner))

        assert groups == [group]
        assert groups[0].member_count == 2

    def test_newest_first(self, group, group_owner):
        newer = create_group(name='Newer', owner=group_owner)

        groups = list(get_user_groups(user=group_owner))

        assert [g.id for g in groups] == [newer.id, group.id]
        assert groups[0].member_count == 1

    def test_no_groups(self, group_other_user):
        assert not get_user_groups(user=group_other_user).exists()


@pytest.mark.django_db
class TestGroupMembers:

    def test_members_oldest_first(self, group, group_owner, member_user):
        memberships = list(get_group_members(group_id=group.id, user=member_user))

        assert [m.user for m in memberships] == [group_owner, member_user]
        assert [m.role for m in memberships] == [GroupRole.OWNER, GroupRole.MEMBER]

    def test_same_joined_at_ordered_by_id(self, group, member_user):
        GroupMembership.objects.filter(group=group).update(joined_at=timezone.now())

        memberships = list(get_group_members(group_id=group.id, user=member_user))

        assert [m.id for m in memberships] == sorted((m.id for m in memberships), key=lambda pk: pk.hex)

    def test_non_member_rejected(self, group, group_other_user):
        with pytest.raises(NotMemberError):
            get_group_members(group_id=group.id, user=group_other_user)

    def test_unknown_group(self, group_owner):
        with pytest.raises(GroupNotFoundError):
            get_group_members(group_id=uuid4(), user=group_owner)


@pytest.mark.django_db
class TestInviteMember:

    def test_invite_adds_member(self, group, member_user, group_other_user):
        membership = invite_member(
            group_id=group.id,
            email='other@example.com',
            invited_by=member_user,
        )

        assert membership.user == group_other_user
        assert membership.role == GroupRole.MEMBER
        assert group.has_member(group_other_user)

    def test_invite_email_is_case_insensitive(self, group, group_owner, group_other_user):
        membership = invite_member(
            group_id=group.id,
            email='  Other@Example.COM ',
            invited_by=group_owner,
        )

        assert membership.user == group_other_user

    def test_invitee_joins_after_existing_members(self, group, group_owner, member_user, group_other_user):
        invite_member(group_id=group.id, email=group_other_user.email, invited_by=group_owner)

        memberships = get_group_members(group_id=group.id, user=group_owner)
        assert [m.user for m in memberships] == [group_owner, member_user, group_other_user]

    def test_self_invite(self, group, group_owner):
        with pytest.raises(SelfInviteError):
            invite_member(group_id=group.id, email='OWNER@example.com', invited_by=group_owner)

    def test_unknown_email(self, group, group_owner):
        with pytest.raises(InviteeNotFoundError) as exc:
            invite_member(group_id=group.id, email='nobody@example.com', invited_by=group_owner)

        assert str(exc.value) == 'No account found with this email'

    def test_inactive_account_not_found(self, group, group_owner, inactive_user):
        with pytest.raises(InviteeNotFoundError):
            invite_member(group_id=group.id, email=inactive_user.email, invited_by=group_owner)

    def test_already_member(self, group, group_owner, member_user):
        with pytest.raises(AlreadyMemberError):
            invite_member(group_id=group.id, email=member_user.email, invited_by=group_owner)

        assert GroupMembership.objects.filter(group=group, user=member_user).count() == 1

    def test_inviter_must_be_member(self, group, group_other_user, member_user):
        with pytest.raises(NotMemberError):
            invite_member(group_id=group.id, email=member_user.email, invited_by=group_other_user)

    def test_unknown_group(self, group_owner, member_user):
        with pytest.raises(GroupNotFoundError):
            invite_member(group_id=uuid4(), email=member_user.email, invited_by=group_owner)

        assert not Group.objects.exists()
