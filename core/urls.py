# core/urls.py
from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # Programs
    path('programs/', views.program_list_view, name='program_list'),
    path('programs/<int:program_id>/', views.program_detail_view, name='program_detail'),

    # Organization
    path('organization/', views.current_organization_view, name='current_organization'),
    path('organization/settings/', views.organization_settings_view, name='organization_settings'),
]
