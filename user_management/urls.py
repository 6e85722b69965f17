# user_management/urls.py
from django.urls import path

from .views import LoginView, LogoutView

app_name = 'user_management'

urlpatterns = [
    path('login/', LoginView.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),
]
