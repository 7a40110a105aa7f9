import re
from decimal import Decimal

from rest_framework import serializers

from apps.groups.serializers import UserMinimalSerializer
from .choices import ExpenseType, SplitType
from .models import Expense, ExpenseSplit


DESCRIPTION_PATTERN = re.compile(r"^[A-Za-z0-9 ,.!?'\"-]+$")


def validate_description_text(value):
    """Trim and check a description against the allowed character set."""
    value = value.strip()
    if not value:
        raise serializers.ValidationError('Please enter a description.')
    if not DESCRIPTION_PATTERN.match(value):
        raise serializers.ValidationError(
            'Description can only contain letters, numbers, spaces, and basic punctuation.'
        )
    return value


def amount_field(invalid_message):
    """Positive amount with at most two decimal places."""
    return serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01'),
        error_messages={
            'required': invalid_message,
            'null': invalid_message,
            'invalid': invalid_message,
            'min_value': invalid_message,
            'max_digits': 'Amount is too large.',
            'max_whole_digits': 'Amount is too large.',
            'max_decimal_places': 'Amount cannot have more than 2 decimal places.',
        },
    )


# =============================================================================
# Input Serializers
# =============================================================================

class ExpenseCreateSerializer(serializers.Serializer):
    """
    Validate input for recording an expense.

    Fields:
        description (str): Letters, numbers, spaces and basic punctuation
        amount (Decimal): Positive, at most two decimal places
        paid_by (UUID): Paying member, defaults to the current user
        type (str): ``expense`` or ``credit``
        split_type (str): ``equal_all``, ``equal_selected`` or ``custom``
        selected_member_ids (list[UUID]): Members for ``equal_selected``
        custom_shares (dict): Member id to amount string for ``custom``
    """

    description = serializers.CharField(
        max_length=200,
        trim_whitespace=False,
        error_messages={'blank': 'Please enter a description.', 'required': 'Please enter a description.'}
    )
    amount = amount_field('Please enter a valid positive amount.')
    paid_by = serializers.UUIDField(required=False)
    type = serializers.ChoiceField(choices=ExpenseType.choices, default=ExpenseType.EXPENSE)
    split_type = serializers.ChoiceField(choices=SplitType.choices, default=SplitType.EQUAL_ALL)
    selected_member_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        default=list,
        help_text="Members to split between when split_type is equal_selected, in order."
    )
    custom_shares = serializers.DictField(
        child=serializers.CharField(allow_blank=True, allow_null=True),
        required=False,
        default=dict,
        help_text="Exact amount per member id when split_type is custom. Blank means not participating."
    )

    def validate_description(self, value):
        return validate_description_text(value)


class CreditCreateSerializer(serializers.Serializer):
    """
    Validate input for recording a direct repayment.

    Fields:
        description (str): Letters, numbers, spaces and basic punctuation
        amount (Decimal): Positive, at most two decimal places
        paid_by (UUID): Member who paid, defaults to the current user
        paid_to (UUID): Member who received the money
    """

    description = serializers.CharField(
        max_length=200,
        trim_whitespace=False,
        error_messages={'blank': 'Please enter a description.', 'required': 'Please enter a description.'}
    )
    amount = amount_field('Amount must be greater than zero.')
    paid_by = serializers.UUIDField(required=False)
    paid_to = serializers.UUIDField(
        error_messages={'required': 'Please select both who paid and who received.'}
    )

    def validate_description(self, value):
        return validate_description_text(value)


# =============================================================================
# Output Serializers
# =============================================================================

class ExpenseSplitSerializer(serializers.ModelSerializer):
    """Serializer for expense splits."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = ExpenseSplit
        fields = ['id', 'user', 'amount']
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    """Main serializer for expenses, with their splits."""

    paid_by = UserMinimalSerializer(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)
    splits = ExpenseSplitSerializer(many=True, read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id',
            'group',
            'description',
            'amount',
            'currency',
            'paid_by',
            'split_type',
            'type',
            'created_by',
            'splits',
            'created_at',
        ]
        read_only_fields = fields
