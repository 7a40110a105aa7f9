import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole


def make_client(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def group_owner(db):
    """Create and return a test user (group owner)."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Group Owner',
    )


@pytest.fixture
def member_user(db):
    """Create and return a member user."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        display_name='Group Member',
    )


@pytest.fixture
def group_other_user(db):
    """Create and return a user not in any group."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other User',
    )


@pytest.fixture
def inactive_user(db):
    return User.objects.create_user(
        email='gone@example.com',
        password='TestPass123!',
        is_active=False,
    )


@pytest.fixture
def group(group_owner, member_user):
    """Group owned by group_owner with member_user as a member."""
    group = Group.objects.create(
        name='Flat Share',
        description='Rent and groceries',
        owner=group_owner,
    )
    GroupMembership.objects.create(user=group_owner, group=group, role=GroupRole.OWNER)
    GroupMembership.objects.create(user=member_user, group=group, role=GroupRole.MEMBER)
    return group


@pytest.fixture
def owner_client(group_owner):
    return make_client(group_owner)


@pytest.fixture
def member_client(member_user):
    return make_client(member_user)


@pytest.fixture
def other_client(group_other_user):
    return make_client(group_other_user)
