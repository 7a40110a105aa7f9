from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'groups'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # Group ViewSet routes
    # GET    /api/groups/              - List user's groups
    # POST   /api/groups/              - Create group
    # GET    /api/groups/{id}/         - Get group details

    # Custom group actions
    # GET    /api/groups/{id}/members/ - List members
    # POST   /api/groups/{id}/invite/  - Add member by email

    # Additional endpoints
    path('my/', views.my_groups, name='my-groups'),

    # Include router URLs
    path('', include(router.urls)),
]
