# admissions/urls.py
from django.urls import path
from . import views

app_name = 'admissions'
urlpatterns = [
    # ===== ENROLLMENT WIZARD =====
    path('wizard/', views.wizard_view, name='wizard'),
    path('wizard/start/', views.wizard_start_view, name='wizard_start'),
    path('wizard/student/', views.wizard_student_view, name='wizard_student'),
    path('wizard/program/', views.wizard_program_view, name='wizard_program'),
    path('wizard/price/', views.wizard_price_view, name='wizard_price'),
    path('wizard/next/', views.wizard_next_view, name='wizard_next'),
    path('wizard/back/', views.wizard_back_view, name='wizard_back'),
    path('wizard/payments/', views.wizard_add_payment_view, name='wizard_add_payment'),
    path('wizard/payments/<str:entry_id>/', views.wizard_remove_payment_view, name='wizard_remove_payment'),
    path('wizard/finish/', views.wizard_finish_view, name='wizard_finish'),

    # ===== PRICING =====
    path('quote/', views.quote_view, name='quote'),

    # ===== LEADS (CRM) =====
    path('leads/', views.lead_list_view, name='lead_list'),
    path('leads/<int:lead_id>/status/', views.lead_status_view, name='lead_status'),
]
