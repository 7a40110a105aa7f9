from rest_framework import mixins, viewsets, status
from rest_framework import serializers as drf_serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupListSerializer,
    GroupMemberSerializer,
    InviteMemberSerializer,
)

from apps.groups.services import (
    create_group,
    get_group_by_id,
    get_user_groups,
    get_group_members,
    invite_member,
    # Exceptions
    GroupNotFoundError,
    NotMemberError,
    AlreadyMemberError,
    SelfInviteError,
    InviteeNotFoundError,
)


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class GroupPagination(PageNumberPagination):
    """Custom pagination for groups."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class GroupViewSet(mixins.CreateModelMixin,
                   mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   viewsets.GenericViewSet):
    """
    ViewSet for groups.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get all groups the user is a member of
    create: Create a new group (creator becomes owner)
    retrieve: Get a specific group
    members: List members, oldest first
    invite: Add an existing account by email
    """

    serializer_class = GroupSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = GroupPagination
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_queryset(self):
        """Return only groups where user is a member."""
        return get_user_groups(user=self.request.user)

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return GroupListSerializer
        elif self.action == 'create':
            return GroupCreateSerializer
        elif self.action == 'invite':
            return InviteMemberSerializer
        elif self.action == 'members':
            return GroupMemberSerializer
        return GroupSerializer

    @extend_schema(request=GroupCreateSerializer, responses={201: GroupSerializer})
    def create(self, request, *args, **kwargs):
        """Create a new group."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = create_group(
            name=serializer.validated_data['name'],
            owner=request.user,
            description=serializer.validated_data.get('description', ''),
        )

        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: GroupSerializer, 404: ErrorResponseSerializer})
    def retrieve(self, request, *args, **kwargs):
        """Get a group the user belongs to. Other groups are reported as missing."""
        try:
            group = get_group_by_id(group_id=kwargs['pk'])
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        if not group.has_member(request.user):
            return Response(
                {'error': f"Group with ID {group.id} not found"},
                status=status.HTTP_404_NOT_FOUND
            )

        serializer = GroupSerializer(group, context={'request': request})
        return Response(serializer.data)

    @extend_schema(
        responses={
            200: GroupMemberSerializer(many=True),
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
    )
    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        """Get all members of the group."""
        try:
            memberships = get_group_members(group_id=pk, user=request.user)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = GroupMemberSerializer(memberships, many=True)
        return Response(serializer.data)

    @extend_schema(
        request=InviteMemberSerializer,
        responses={
            201: GroupMemberSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
    )
    @action(detail=True, methods=['post'])
    def invite(self, request, pk=None):
        """Add an existing account to the group by email."""
        serializer = InviteMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = invite_member(
                group_id=pk,
                email=serializer.validated_data['email'],
                invited_by=request.user
            )
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (SelfInviteError, InviteeNotFoundError, AlreadyMemberError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        output_serializer = GroupMemberSerializer(membership)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: GroupListSerializer(many=True)},
    description="Get all groups where the current user is a member, with member counts.",
    tags=['groups'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_groups(request):
    """Get all groups where user is a member."""
    groups = get_user_groups(user=request.user)
    serializer = GroupListSerializer(groups, many=True, context={'request': request})
    return Response(serializer.data)
