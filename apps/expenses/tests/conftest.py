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
def alice(db):
    return User.objects.create_user(email='alice@example.com', password='TestPass123!', display_name='Alice')


@pytest.fixture
def bob(db):
    return User.objects.create_user(email='bob@example.com', password='TestPass123!', display_name='Bob')


@pytest.fixture
def carol(db):
    return User.objects.create_user(email='carol@example.com', password='TestPass123!', display_name='Carol')


@pytest.fixture
def outsider(db):
    """User who is not in the trip group."""
    return User.objects.create_user(email='outsider@example.com', password='TestPass123!', display_name='Outsider')


@pytest.fixture
def trip(alice, bob, carol):
    """Group with members listed in the order alice, bob, carol."""
    group = Group.objects.create(name='Goa Trip', owner=alice)
    GroupMembership.objects.create(user=alice, group=group, role=GroupRole.OWNER)
    GroupMembership.objects.create(user=bob, group=group, role=GroupRole.MEMBER)
    GroupMembership.objects.create(user=carol, group=group, role=GroupRole.MEMBER)
    return group


@pytest.fixture
def alice_client(alice):
    return make_client(alice)


@pytest.fixture
def bob_client(bob):
    return make_client(bob)


@pytest.fixture
def outsider_client(outsider):
    return make_client(outsider)
