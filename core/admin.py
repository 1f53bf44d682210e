# core/admin.py
from django.contrib import admin

from .models import Organization, OrganizationSettings, Program


class OrganizationSettingsInline(admin.StackedInline):
    model = OrganizationSettings
    can_delete = False


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ['name', 'id', 'owner_email', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['name', 'id', 'owner_email']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [OrganizationSettingsInline]


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'status', 'organization']
    list_filter = ['type', 'status', 'organization']
    search_fields = ['name', 'description']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        organization = getattr(request, 'organization', None)
        if request.user.is_superuser or organization is None:
            return qs
        return qs.filter(organization=organization)
