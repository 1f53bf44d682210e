# students/serializers.py
from rest_framework import serializers

from .models import Student


class StudentSerializer(serializers.ModelSerializer):
    has_login = serializers.BooleanField(read_only=True)
    has_parent_login = serializers.BooleanField(read_only=True)

    class Meta:
        model = Student
        fields = [
            'id', 'name', 'email', 'parent_phone', 'parent_name', 'address', 'school',
            'birth_date', 'medical_info', 'status', 'has_login', 'has_parent_login',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']


class StudentDetailSerializer(StudentSerializer):
    """Student profile with the credentials card."""
    login_info = serializers.JSONField(read_only=True)
    parent_login_info = serializers.JSONField(read_only=True)

    class Meta(StudentSerializer.Meta):
        fields = StudentSerializer.Meta.fields + ['login_info', 'parent_login_info']


class StudentInputSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True)
    parent_phone = serializers.CharField(required=False, allow_blank=True, max_length=30)
    parent_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    address = serializers.CharField(required=False, allow_blank=True, max_length=500)
    school = serializers.CharField(required=False, allow_blank=True, max_length=255)
    birth_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    medical_info = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=[c[0] for c in Student.STATUS_CHOICES], required=False)
