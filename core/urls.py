from django.contrib import admin
from django.urls import path, include
from rest_framework_simplejwt.views import TokenRefreshView


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    path('api/', include('users.urls')),          # auth, staff
    path('api/', include('operations.urls')),     # lifecycle, recording, reports
    path('api/branches/', include('branches.urls')),
]
