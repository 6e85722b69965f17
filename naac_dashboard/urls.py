# naac_dashboard/urls.py
from django.urls import path, include
from django.views.generic import RedirectView

from monitoring.views import HealthCheckView

urlpatterns = [
    path('', RedirectView.as_view(pattern_name='dashboard:home', permanent=False)),
    path('', include('user_management.urls')),
    path('dashboard/', include('dashboard.urls')),
    path('health/', HealthCheckView.as_view(), name='health_check'),
]
