# branches/urls.py
from django.urls import path
from .views import (
    BranchListCreateView, BranchDetailView, BranchServicesView,
    ShareSettingsView, MigrateShareSettingsView,
)


app_name = 'branches'

urlpatterns = [
    path('', BranchListCreateView.as_view(), name='list_create'),
    path('migrate-share-settings/', MigrateShareSettingsView.as_view(), name='migrate_share_settings'),
    path('<int:branch_id>/', BranchDetailView.as_view(), name='detail'),
    path('<int:branch_id>/services/', BranchServicesView.as_view(), name='services'),
    path('<int:branch_id>/share-settings/', ShareSettingsView.as_view(), name='share_settings'),
]
