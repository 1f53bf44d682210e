# billing/urls.py
from django.urls import path
from . import views

app_name = 'billing'
urlpatterns = [
    # ===== PAYMENT RECORDER =====
    path('payments/', views.payment_list_view, name='payment_list'),
    path('payments/<int:payment_id>/', views.payment_detail_view, name='payment_detail'),
    path('payments/<int:payment_id>/status/', views.payment_status_view, name='payment_status'),

    # ===== LOOKUPS =====
    path('enrollments/search/', views.enrollment_search_view, name='enrollment_search'),
    path('students/<int:student_id>/payment-form/', views.default_payment_view, name='default_payment'),

    # ===== REPORTING =====
    path('summary/', views.finance_summary_view, name='finance_summary'),
]
