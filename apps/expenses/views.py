from rest_framework import status, serializers as drf_serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    ExpenseCreateSerializer,
    CreditCreateSerializer,
    ExpenseSerializer,
)
from .services import (
    create_expense,
    create_credit,
    get_group_expenses,
    get_expense,
    # Exceptions
    SplitError,
    GroupNotFoundError,
    NotGroupMemberError,
    InvalidParticipantError,
    ExpenseNotFoundError,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


def _error(exc, status_code):
    return Response({'error': str(exc)}, status=status_code)


@extend_schema(
    methods=['GET'],
    responses={
        200: ExpenseSerializer(many=True),
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="List a group's expenses and credits, newest first, with their splits.",
    tags=['expenses'],
)
@extend_schema(
    methods=['POST'],
    request=ExpenseCreateSerializer,
    responses={
        201: ExpenseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Record an expense split equally between all members, equally between "
                "selected members, or by custom amounts that add up to the total.",
    tags=['expenses'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def group_expenses(request, group_id):
    """List or record expenses in a group."""
    if request.method == 'GET':
        try:
            expenses = get_group_expenses(group_id=group_id, user=request.user)
        except GroupNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except NotGroupMemberError as e:
            return _error(e, status.HTTP_403_FORBIDDEN)
        return Response(ExpenseSerializer(expenses, many=True).data)

    serializer = ExpenseCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        expense = create_expense(
            group_id=group_id,
            created_by=request.user,
            description=data['description'],
            amount=data['amount'],
            paid_by_id=data.get('paid_by', request.user.id),
            split_type=data['split_type'],
            expense_type=data['type'],
            selected_member_ids=data['selected_member_ids'],
            custom_shares=data['custom_shares'],
        )
    except GroupNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)
    except NotGroupMemberError as e:
        return _error(e, status.HTTP_403_FORBIDDEN)
    except (SplitError, InvalidParticipantError) as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)

    return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=CreditCreateSerializer,
    responses={
        201: ExpenseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Record a direct repayment from one member to another.",
    tags=['expenses'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def group_credits(request, group_id):
    """Record a credit between two group members."""
    serializer = CreditCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        credit = create_credit(
            group_id=group_id,
            created_by=request.user,
            description=data['description'],
            amount=data['amount'],
            paid_by_id=data.get('paid_by', request.user.id),
            paid_to_id=data['paid_to'],
        )
    except GroupNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)
    except NotGroupMemberError as e:
        return _error(e, status.HTTP_403_FORBIDDEN)
    except (SplitError, InvalidParticipantError) as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)

    return Response(ExpenseSerializer(credit).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={
        200: ExpenseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Get a single expense or credit with its splits.",
    tags=['expenses'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def expense_detail(request, expense_id):
    """Get expense details."""
    try:
        expense = get_expense(expense_id=expense_id, user=request.user)
    except ExpenseNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)
    except NotGroupMemberError as e:
        return _error(e, status.HTTP_403_FORBIDDEN)

    return Response(ExpenseSerializer(expense).data)
