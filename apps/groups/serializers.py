import re

from rest_framework import serializers
from .models import Group, GroupMembership
from apps.accounts.models import User


GROUP_NAME_PATTERN = re.compile(r'^[A-Za-z0-9 ]+$')


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class GroupMemberSerializer(serializers.ModelSerializer):
    """Member information, listed oldest member first."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = GroupMembership
        fields = ['id', 'user', 'role', 'joined_at']
        read_only_fields = fields


class GroupSerializer(serializers.ModelSerializer):
    """Main serializer for groups."""

    owner = UserMinimalSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()
    user_role = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'owner',
            'member_count',
            'user_role',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_member_count(self, obj):
        """Use the queryset annotation when present."""
        count = getattr(obj, 'member_count', None)
        if count is None:
            count = obj.memberships.count()
        return count

    def get_user_role(self, obj):
        """Get current user's role in the group."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class GroupCreateSerializer(serializers.Serializer):
    """Validate input for creating a group."""

    name = serializers.CharField(
        max_length=100,
        error_messages={
            'required': 'Please enter a group name.',
            'blank': 'Please enter a group name.',
        }
    )
    description = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Please enter a group name.')
        if not GROUP_NAME_PATTERN.match(value):
            raise serializers.ValidationError(
                'Group name can only contain letters, numbers, and spaces.'
            )
        return value

    def validate_description(self, value):
        return value.strip()


class GroupListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    owner = UserMinimalSerializer(read_only=True)
    member_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'owner',
            'member_count',
            'created_at',
        ]
        read_only_fields = fields


class InviteMemberSerializer(serializers.Serializer):
    """Serializer for adding an existing account to a group by email."""

    email = serializers.EmailField(
        error_messages={
            'required': 'Please enter an email address.',
            'blank': 'Please enter an email address.',
            'invalid': 'Please enter a valid email address.',
        }
    )
