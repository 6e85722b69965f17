# dashboard/urls.py
from django.urls import path

from . import views

app_name = 'dashboard'

urlpatterns = [
    path('', views.HomeView.as_view(), name='home'),
    path('submissions/', views.SubmissionListView.as_view(), name='submission-list'),
    path('submissions/<str:submission_id>/', views.SubmissionReviewView.as_view(), name='submission-review'),
    path('submissions/<str:submission_id>/export/', views.SubmissionExportView.as_view(), name='submission-export'),
    path('templates/', views.TemplateListView.as_view(), name='template-list'),
    path('templates/<str:action>/', views.TemplateFormView.as_view(), name='template-form'),
]
