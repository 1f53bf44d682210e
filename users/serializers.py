# users/serializers.py
from rest_framework import serializers

from .models import RoleDefinition, UserProfile


class UserProfileSerializer(serializers.ModelSerializer):
    uid = serializers.IntegerField(read_only=True)
    organization_id = serializers.CharField(read_only=True)

    class Meta:
        model = UserProfile
        fields = ['uid', 'email', 'name', 'role', 'status', 'organization_id']
        read_only_fields = fields


class RoleDefinitionSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source='role_id', read_only=True)

    class Meta:
        model = RoleDefinition
        fields = ['id', 'label', 'description', 'permissions', 'is_system']
        read_only_fields = fields


class TogglePermissionSerializer(serializers.Serializer):
    role_id = serializers.CharField(max_length=50)
    permission = serializers.CharField(max_length=100)
