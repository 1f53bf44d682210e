# users/urls.py
from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # ============ CURRENT USER ============
    path('me/', views.me_view, name='me'),

    # ============ ROLE MANAGEMENT ============
    path('roles/', views.role_list_view, name='role_list'),
    path('roles/matrix/', views.permission_matrix_view, name='permission_matrix'),
]
