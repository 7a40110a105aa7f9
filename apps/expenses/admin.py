from django.contrib import admin
from django.utils.html import format_html

from .choices import ExpenseType
from .models import Expense, ExpenseSplit


class ExpenseSplitInline(admin.TabularInline):
    """Inline admin for splits within an expense."""
    model = ExpenseSplit
    extra = 0
    fields = ['position', 'user', 'amount', 'created_at']
    readonly_fields = ['position', 'user', 'amount', 'created_at']
    ordering = ['position']

    def has_add_permission(self, request, obj=None):
        """Splits are created by the allocator, not by hand."""
        return False


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """Admin interface for expenses and credits."""

    list_display = [
        'description',
        'group',
        'amount',
        'currency',
        'paid_by',
        'split_type',
        'type_badge',
        'created_at',
    ]
    list_filter = ['type', 'split_type', 'created_at']
    search_fields = ['description', 'group__name', 'paid_by__email']
    readonly_fields = ['created_at', 'split_total']
    inlines = [ExpenseSplitInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def type_badge(self, obj):
        """Display expense type as colored badge."""
        color = '#1565C0' if obj.type == ExpenseType.CREDIT else '#6D4C41'
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            color, obj.get_type_display()
        )
    type_badge.short_description = 'Type'
    type_badge.admin_order_field = 'type'

    def split_total(self, obj):
        return obj.get_split_total()
    split_total.short_description = 'Sum of splits'

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('group', 'paid_by', 'created_by')
