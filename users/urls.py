# users/urls.py
from django.urls import path
from .views import (
    RegisterView, LoginView, MeView,
    StaffListView, StaffDetailView, ReactivateUserView, SuspendUserView,
    WorkersListView,
)


app_name = 'users'

urlpatterns = [
    # ====== Authentication ======
    path('auth/register/', RegisterView.as_view(), name='register'),
    path('auth/login/', LoginView.as_view(), name='login'),
    path('auth/me/', MeView.as_view(), name='me'),

    # ====== Staff management (owner) ======
    path('users/', StaffListView.as_view(), name='staff_list'),
    path('users/<int:user_id>/', StaffDetailView.as_view(), name='staff_detail'),
    path('users/<int:user_id>/reactivate/', ReactivateUserView.as_view(), name='reactivate'),
    path('users/<int:user_id>/suspend/', SuspendUserView.as_view(), name='suspend'),

    # ====== Workers picker ======
    path('workers/', WorkersListView.as_view(), name='workers'),
]
