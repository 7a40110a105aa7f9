import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        email='otheruser@example.com',
        password='OtherPass123!',
        display_name='Other User',
    )


@pytest.fixture
def user_refresh(user):
    """Refresh token issued to the test user."""
    return RefreshToken.for_user(user)


@pytest.fixture
def authenticated_client(api_client, user_refresh):
    """Return an authenticated API client using JWT."""
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {user_refresh.access_token}')
    return api_client


@pytest.fixture
def session_events():
    """Record session change events for the duration of a test."""
    from apps.accounts.services import on_session_change

    events = []
    disconnect = on_session_change(lambda event, user: events.append((event, user.email)))
    yield events
    disconnect()
