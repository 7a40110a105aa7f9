from django.db import models


class SplitType(models.TextChoices):
    EQUAL_ALL = 'equal_all', 'Equal All'
    EQUAL_SELECTED = 'equal_selected', 'Equal Selected'
    CUSTOM = 'custom', 'Custom'


class ExpenseType(models.TextChoices):
    EXPENSE = 'expense', 'Expense'
    CREDIT = 'credit', 'Credit'
