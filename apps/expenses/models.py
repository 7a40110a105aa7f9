from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from decimal import Decimal
import uuid

from .choices import ExpenseType, SplitType


def default_currency():
    return getattr(settings, 'EXPENSE_CURRENCY', 'INR')


class Expense(models.Model):
    """Shared expense or direct credit recorded in a group."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='expenses'
    )
    description = models.CharField(max_length=200)

    # Financial details
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=3, default=default_currency)

    paid_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expenses_paid'
    )
    split_type = models.CharField(
        max_length=20,
        choices=SplitType.choices,
        default=SplitType.EQUAL_ALL
    )
    type = models.CharField(
        max_length=20,
        choices=ExpenseType.choices,
        default=ExpenseType.EXPENSE
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expenses_created'
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['group', 'created_at'], name='expenses_group_created_idx'),
            models.Index(fields=['paid_by', 'created_at'], name='expenses_payer_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.description} - {self.amount} {self.currency} ({self.type})"

    @property
    def is_credit(self):
        return self.type == ExpenseType.CREDIT

    def get_split_total(self):
        """Return the sum of all split amounts."""
        return self.splits.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')


class ExpenseSplit(models.Model):
    """One participant's signed share of an expense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    expense = models.ForeignKey(
        Expense,
        on_delete=models.CASCADE,
        related_name='splits'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expense_splits'
    )

    # Negative for the payer side of a credit
    amount = models.DecimalField(max_digits=10, decimal_places=2)

    # Allocation order; the first lines carry any leftover cent
    position = models.PositiveSmallIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'expense_splits'
        unique_together = [['expense', 'user']]
        indexes = [
            models.Index(fields=['user', 'created_at'], name='exp_splits_user_created_idx'),
        ]
        ordering = ['position']

    def __str__(self):
        return f"{self.user.get_display_name()}: {self.amount} ({self.expense.description})"
