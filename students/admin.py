# students/admin.py
from django.contrib import admin

from .models import Student


# ===== STUDENT ADMIN =====
@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['name', 'parent_name', 'parent_phone', 'school', 'status', 'has_login_display', 'organization']
    list_filter = ['status', 'organization']
    search_fields = ['name', 'parent_name', 'parent_phone', 'email']
    readonly_fields = ['login_info', 'parent_login_info', 'created_at', 'updated_at']

    fieldsets = (
        ('Student', {
            'fields': ('organization', 'name', 'birth_date', 'school', 'address', 'medical_info', 'status')
        }),
        ('Parent', {
            'fields': ('parent_name', 'parent_phone', 'email')
        }),
        ('Logins', {
            'fields': ('login_info', 'parent_login_info'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )

    def has_login_display(self, obj):
        return obj.has_login
    has_login_display.boolean = True
    has_login_display.short_description = 'Login'
