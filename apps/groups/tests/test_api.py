import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.groups.models import Group, GroupMembership, GroupRole


# =============================================================================
# Group CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupList:
    """Tests for GET /api/groups/"""

    def test_list_groups_returns_user_groups(self, owner_client, group):
        """List returns only groups where user is a member."""
        url = reverse('groups:group-list')
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert 'results' in response.data
        assert len(response.data['results']) == 1
        assert response.data['results'][0]['name'] == group.name
        assert response.data['results'][0]['member_count'] == 2

    def test_list_groups_excludes_non_member_groups(self, other_client, group):
        """Non-members don't see group in list."""
        url = reverse('groups:group-list')
        response = other_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['results']) == 0

    def test_list_groups_unauthenticated(self, api_client):
        """Unauthenticated users cannot list groups."""
        url = reverse('groups:group-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_my_groups(self, member_client, group):
        url = reverse('groups:my-groups')
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [g['id'] for g in response.data] == [str(group.id)]
        assert response.data[0]['member_count'] == 2


@pytest.mark.django_db
class TestGroupCreate:
    """Tests for POST /api/groups/"""

    def test_create_group(self, other_client, group_other_user):
        """Create a new group."""
        url = reverse('groups:group-list')
        data = {
            'name': 'Goa Trip 2024',
            'description': '  Beach week  ',
        }
        response = other_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user_role'] == GroupRole.OWNER
        assert response.data['member_count'] == 1

        # Verify owner membership created
        group = Group.objects.get(name='Goa Trip 2024')
        assert group.owner == group_other_user
        assert group.description == 'Beach week'
        assert group.get_user_role(group_other_user) == GroupRole.OWNER

    def test_create_group_trims_name(self, other_client):
        url = reverse('groups:group-list')
        response = other_client.post(url, {'name': '  Flat 4B  '})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Flat 4B'

    @pytest.mark.parametrize('name', ['', '   '])
    def test_create_group_blank_name(self, other_client, name):
        url = reverse('groups:group-list')
        response = other_client.post(url, {'name': name})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['name'] == ['Please enter a group name.']

    @pytest.mark.parametrize('name', ['Trip!', 'Café', 'Rent & Bills'])
    def test_create_group_invalid_characters(self, other_client, name):
        url = reverse('groups:group-list')
        response = other_client.post(url, {'name': name})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['name'] == ['Group name can only contain letters, numbers, and spaces.']
        assert not Group.objects.exists()

    def test_create_group_unauthenticated(self, api_client):
        """Unauthenticated users cannot create groups."""
        url = reverse('groups:group-list')
        response = api_client.post(url, {'name': 'Unauthorized Group'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestGroupRetrieve:
    """Tests for GET /api/groups/{id}/"""

    def test_retrieve_group(self, member_client, group):
        url = reverse('groups:group-detail', args=[group.id])
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Flat Share'
        assert response.data['user_role'] == GroupRole.MEMBER
        assert response.data['member_count'] == 2

    def test_retrieve_group_non_member(self, other_client, group):
        """Groups are invisible to non-members."""
        url = reverse('groups:group-detail', args=[group.id])
        response = other_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == f"Group with ID {group.id} not found"

    def test_retrieve_unknown_group(self, owner_client):
        group_id = uuid4()
        url = reverse('groups:group-detail', args=[group_id])
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == f"Group with ID {group_id} not found"


# =============================================================================
# Membership Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupMembers:
    """Tests for GET /api/groups/{id}/members/"""

    def test_list_members(self, member_client, group, group_owner, member_user):
        url = reverse('groups:group-members', args=[group.id])
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [m['user']['email'] for m in response.data] == [group_owner.email, member_user.email]
        assert [m['role'] for m in response.data] == ['owner', 'member']

    def test_list_members_non_member(self, other_client, group):
        url = reverse('groups:group-members', args=[group.id])
        response = other_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error'] == 'You must be a member of this group'

    def test_list_members_unknown_group(self, owner_client):
        url = reverse('groups:group-members', args=[uuid4()])
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestInviteMember:
    """Tests for POST /api/groups/{id}/invite/"""

    def test_invite_member(self, member_client, group, group_other_user):
        url = reverse('groups:group-invite', args=[group.id])
        response = member_client.post(url, {'email': 'other@example.com'})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['id'] == str(group_other_user.id)
        assert response.data['role'] == GroupRole.MEMBER
        assert group.has_member(group_other_user)

    def test_invite_self(self, owner_client, group):
        url = reverse('groups:group-invite', args=[group.id])
        response = owner_client.post(url, {'email': 'owner@example.com'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'You cannot invite yourself to the group.'

    def test_invite_unknown_email(self, owner_client, group):
        url = reverse('groups:group-invite', args=[group.id])
        response = owner_client.post(url, {'email': 'nobody@example.com'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'No account found with this email'

    def test_invite_existing_member(self, owner_client, group, member_user):
        url = reverse('groups:group-invite', args=[group.id])
        response = owner_client.post(url, {'email': member_user.email})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'This person is already in the group.'
        assert GroupMembership.objects.filter(group=group).count() == 2

    @pytest.mark.parametrize('email,message', [
        ('', 'Please enter an email address.'),
        ('not-an-email', 'Please enter a valid email address.'),
    ])
    def test_invite_invalid_email(self, owner_client, group, email, message):
        url = reverse('groups:group-invite', args=[group.id])
        response = owner_client.post(url, {'email': email})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['email'] == [message]

    def test_invite_by_non_member(self, other_client, group, member_user):
        url = reverse('groups:group-invite', args=[group.id])
        response = other_client.post(url, {'email': member_user.email})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_invite_unknown_group(self, owner_client, member_user):
        url = reverse('groups:group-invite', args=[uuid4()])
        response = owner_client.post(url, {'email': member_user.email})

        assert response.status_code == status.HTTP_404_NOT_FOUND
