# billing/admin.py
from django.contrib import admin

from admissions.models import Enrollment

from .models import Payment
from .services import BalanceService


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['student_name', 'amount', 'method', 'status', 'date', 'session', 'organization']
    list_filter = ['method', 'status', 'session', 'organization']
    search_fields = ['student_name', 'check_number', 'bank_name']
    raw_id_fields = ['enrollment', 'recorded_by']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'date'

    fieldsets = (
        ('Payment', {
            'fields': ('organization', 'enrollment', 'student_name', 'amount', 'date', 'method', 'status', 'session')
        }),
        ('Check / Transfer', {
            'fields': ('check_number', 'bank_name', 'deposit_date', 'proof_url'),
            'classes': ('collapse',)
        }),
        ('Audit', {
            'fields': ('recorded_by', 'created_at', 'updated_at')
        }),
    )

    def save_model(self, request, obj, form, change):
        previous_enrollment_id = form.initial.get('enrollment') if change else None
        super().save_model(request, obj, form, change)

        BalanceService.rebalance(obj.enrollment)
        if previous_enrollment_id and previous_enrollment_id != obj.enrollment_id:
            _rebalance_enrollments([previous_enrollment_id])

    def delete_model(self, request, obj):
        enrollment_id = obj.enrollment_id
        super().delete_model(request, obj)
        _rebalance_enrollments([enrollment_id])

    def delete_queryset(self, request, queryset):
        enrollment_ids = set(queryset.values_list('enrollment_id', flat=True))
        super().delete_queryset(request, queryset)
        _rebalance_enrollments(enrollment_ids)


def _rebalance_enrollments(enrollment_ids):
    for enrollment in Enrollment.objects.filter(pk__in=[pk for pk in enrollment_ids if pk]):
        BalanceService.rebalance(enrollment)
