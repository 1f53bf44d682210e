# core/serializers.py
from rest_framework import serializers

from .models import Organization, OrganizationSettings, Program


class ProgramSerializer(serializers.ModelSerializer):
    class Meta:
        model = Program
        fields = ['id', 'name', 'type', 'description', 'status', 'packs', 'grades']


class OrganizationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Organization
        fields = ['id', 'name', 'slug', 'status', 'modules']


class OrganizationSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrganizationSettings
        fields = ['academy_name', 'academic_year', 'login_domain', 'language',
                  'receipt_contact', 'receipt_footer']
