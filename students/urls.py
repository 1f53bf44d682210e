# students/urls.py
from django.urls import path
from . import views

app_name = 'students'

urlpatterns = [
    # ============ STUDENT DIRECTORY ============
    path('', views.student_list_view, name='student_list'),
    path('duplicates/', views.duplicate_check_view, name='duplicate_check'),
    path('<int:student_id>/', views.student_detail_view, name='student_detail'),

    # ============ LOGIN ACCESS ============
    path('<int:student_id>/access/student/', views.generate_student_access_view, name='generate_student_access'),
    path('<int:student_id>/access/parent/', views.generate_parent_access_view, name='generate_parent_access'),
]
