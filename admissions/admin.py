# admissions/admin.py
from django.contrib import admin

from billing.services import BalanceService

from .models import Enrollment, Lead


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ['name', 'parent_name', 'phone', 'source', 'status', 'program', 'organization', 'created_at']
    list_filter = ['status', 'source', 'organization']
    search_fields = ['name', 'parent_name', 'phone', 'email']
    raw_id_fields = ['program']


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = [
        'student_name', 'program_name', 'pack_name', 'group_name',
        'total_amount', 'paid_amount', 'balance', 'status', 'session',
    ]
    list_filter = ['status', 'session', 'payment_plan', 'organization']
    search_fields = ['student_name', 'program_name', 'group_name']
    raw_id_fields = ['student', 'program', 'lead', 'created_by']
    readonly_fields = ['paid_amount', 'balance', 'created_at', 'updated_at']

    fieldsets = (
        ('Student & Program', {
            'fields': ('organization', 'student', 'student_name', 'program', 'program_name', 'pack_name', 'lead')
        }),
        ('Groups', {
            'fields': (
                ('grade_id', 'grade_name'),
                ('group_id', 'group_name', 'group_time'),
                ('second_group_id', 'second_group_name', 'second_group_time'),
            )
        }),
        ('Finance', {
            'fields': ('payment_plan', 'total_amount', 'discount_amount', 'paid_amount', 'balance')
        }),
        ('Status', {
            'fields': ('status', 'start_date', 'session', 'created_by', 'created_at', 'updated_at')
        }),
    )

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        # total_amount may have changed; paid/balance follow cleared payments
        BalanceService.rebalance(obj)
