import pytest
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new user."""
        url = reverse('users:register')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'display_name': 'New User',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['display_name'] == 'New User'
        assert User.objects.filter(email='newuser@example.com').exists()

    def test_register_without_display_name(self, api_client):
        """Register without display name (optional field)."""
        url = reverse('users:register')
        data = {
            'email': 'minimal@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.filter(email='minimal@example.com').exists()

    def test_register_stores_lowercase_email(self, api_client):
        url = reverse('users:register')
        data = {
            'email': 'Mixed.Case@Example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['email'] == 'mixed.case@example.com'

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email, regardless of case."""
        url = reverse('users:register')
        data = {
            'email': user.email.upper(),
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('users:register')
        data = {
            'email': 'mismatch@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['password_confirm'] == ['Passwords do not match.']

    def test_register_weak_password(self, api_client):
        """Registration fails with weak password."""
        url = reverse('users:register')
        data = {
            'email': 'weak@example.com',
            'password': '123',
            'password_confirm': '123',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data

    def test_register_invalid_email(self, api_client):
        """Registration fails with invalid email format."""
        url = reverse('users:register')
        data = {
            'email': 'not-an-email',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['email'] == ['Please enter a valid email address.']


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Successfully login with valid credentials."""
        url = reverse('users:login')
        data = {
            'email': user.email,
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['email'] == user.email

    def test_login_wrong_password(self, api_client, user):
        """Login fails with wrong password."""
        url = reverse('users:login')
        data = {
            'email': user.email,
            'password': 'WrongPassword123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid email or password'

    def test_login_nonexistent_user(self, api_client, db):
        """Login fails for non-existent user."""
        url = reverse('users:login')
        data = {
            'email': 'nonexistent@example.com',
            'password': 'SomePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, api_client, user_inactive):
        """Inactive accounts are rejected."""
        url = reverse('users:login')
        data = {
            'email': user_inactive.email,
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_missing_fields(self, api_client, db):
        url = reverse('users:login')
        response = api_client.post(url, {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data
        assert 'password' in response.data

    def test_login_updates_last_login(self, api_client, user):
        """Login updates last_login timestamp."""
        url = reverse('users:login')
        data = {
            'email': user.email,
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.last_login is not None


# =============================================================================
# Logout Tests
# =============================================================================

@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout/"""

    def test_logout_success(self, authenticated_client):
        """Logout without a refresh token."""
        url = reverse('users:logout')
        response = authenticated_client.post(url, {})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Logout successful'

    def test_logout_blacklists_refresh(self, authenticated_client, user_refresh):
        """A refresh token used to log out cannot be refreshed afterwards."""
        url = reverse('users:logout')
        response = authenticated_client.post(url, {'refresh': str(user_refresh)})
        assert response.status_code == status.HTTP_200_OK

        refresh_url = reverse('token_refresh')
        response = authenticated_client.post(refresh_url, {'refresh': str(user_refresh)})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_invalid_token(self, authenticated_client):
        url = reverse('users:logout')
        response = authenticated_client.post(url, {'refresh': 'garbage'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid token'

    def test_logout_unauthenticated(self, api_client):
        """Logout requires authentication."""
        url = reverse('users:logout')
        response = api_client.post(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Session Tests
# =============================================================================

@pytest.mark.django_db
class TestSession:
    """Tests for GET /api/auth/session/"""

    def test_session_authenticated(self, api_client, user, user_refresh):
        access = str(user_refresh.access_token)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')

        url = reverse('users:session')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['email'] == user.email
        assert response.data['tokens'] == {'refresh': None, 'access': access}

    def test_session_after_logout_gives_no_refresh(self, authenticated_client, user_refresh):
        """The access token left over after logout cannot reopen the session."""
        response = authenticated_client.post(reverse('users:logout'), {'refresh': str(user_refresh)})
        assert response.status_code == status.HTTP_200_OK

        response = authenticated_client.get(reverse('users:session'))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['tokens']['refresh'] is None

        response = authenticated_client.post(reverse('token_refresh'), {'refresh': str(user_refresh)})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_session_anonymous(self, api_client):
        url = reverse('users:session')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'user': None, 'tokens': None}


# =============================================================================
# Current User / Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestGetCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, authenticated_client, user):
        url = reverse('users:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['display_name'] == user.display_name

    def test_get_current_user_unauthenticated(self, api_client):
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestUpdateProfile:
    """Tests for PATCH /api/auth/user/update/"""

    def test_update_display_name(self, authenticated_client, user):
        url = reverse('users:update-profile')
        response = authenticated_client.patch(url, {'display_name': 'Renamed'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.display_name == 'Renamed'

    def test_cannot_update_email(self, authenticated_client, user):
        """Email is read-only."""
        url = reverse('users:update-profile')
        response = authenticated_client.patch(url, {'email': 'changed@example.com'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.email == 'testuser@example.com'

    def test_update_profile_unauthenticated(self, api_client):
        url = reverse('users:update-profile')
        response = api_client.patch(url, {'display_name': 'Nope'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
