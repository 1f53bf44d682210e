# users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _

from .models import RoleDefinition, User, UserProfile


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    fk_name = 'user'
    fields = ('organization', 'email', 'name', 'role', 'status')


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    """Admin for the email-login User model."""
    list_display = ('email', 'username', 'first_name', 'last_name', 'is_staff', 'is_active')
    list_filter = ('is_staff', 'is_active', 'is_superuser')
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        (_('Personal info'), {'fields': ('username', 'first_name', 'last_name', 'phone_number')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        (_('Important dates'), {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2', 'is_staff', 'is_active')}
        ),
    )
    search_fields = ('email', 'username', 'first_name', 'last_name', 'phone_number')
    ordering = ('email',)
    filter_horizontal = ('groups', 'user_permissions',)
    inlines = [UserProfileInline]


@admin.register(RoleDefinition)
class RoleDefinitionAdmin(admin.ModelAdmin):
    list_display = ('label', 'role_id', 'organization', 'is_system')
    list_filter = ('is_system', 'organization')
    search_fields = ('label', 'role_id', 'organization__name')

    def get_readonly_fields(self, request, obj=None):
        """System roles keep their id."""
        if obj and obj.is_system:
            return ('role_id', 'is_system')
        return ()


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'role', 'status', 'organization')
    list_filter = ('role', 'status', 'organization')
    search_fields = ('email', 'name')
    raw_id_fields = ('user',)
