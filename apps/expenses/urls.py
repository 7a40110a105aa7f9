from django.urls import path
from . import views

app_name = 'expenses'

urlpatterns = [
    # GET    /api/expenses/groups/{group_id}/          - List group expenses
    # POST   /api/expenses/groups/{group_id}/          - Record expense (with split)
    # POST   /api/expenses/groups/{group_id}/credits/  - Record credit
    # GET    /api/expenses/{id}/                       - Get expense details
    path('groups/<uuid:group_id>/', views.group_expenses, name='group-expenses'),
    path('groups/<uuid:group_id>/credits/', views.group_credits, name='group-credits'),
    path('<uuid:expense_id>/', views.expense_detail, name='expense-detail'),
]
