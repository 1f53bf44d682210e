# admissions/serializers.py
from rest_framework import serializers

from billing.methods import parse_method
from core.exceptions import ValidationError as AcademyValidationError
from .models import Enrollment, Lead
from . import wizard


# ============ WIZARD INPUT ============

class WizardStartSerializer(serializers.Serializer):
    """How the wizard is opened: blank, quick-enroll, from a lead or a group."""
    student_id = serializers.IntegerField(required=False, allow_null=True)
    lead_id = serializers.IntegerField(required=False, allow_null=True)
    program_id = serializers.IntegerField(required=False, allow_null=True)
    grade_id = serializers.CharField(required=False, allow_blank=True)
    group_id = serializers.CharField(required=False, allow_blank=True)


class StudentFormSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    parent_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    parent_phone = serializers.CharField(required=False, allow_blank=True, max_length=30)
    email = serializers.EmailField(required=False, allow_blank=True)
    birth_date = serializers.CharField(required=False, allow_blank=True, max_length=30)
    school = serializers.CharField(required=False, allow_blank=True, max_length=255)
    address = serializers.CharField(required=False, allow_blank=True, max_length=500)


class ProgramFormSerializer(serializers.Serializer):
    program_id = serializers.IntegerField(required=False, allow_null=True)
    pack_name = serializers.CharField(required=False, allow_blank=True, max_length=100)
    grade_id = serializers.CharField(required=False, allow_blank=True, max_length=100)
    group_id = serializers.CharField(required=False, allow_blank=True, max_length=100)
    second_group_id = serializers.CharField(required=False, allow_blank=True, max_length=100)
    payment_plan = serializers.ChoiceField(choices=[c[0] for c in Enrollment.PAYMENT_PLANS], required=False)


class NegotiatedPriceSerializer(serializers.Serializer):
    negotiated_price = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)


class PaymentEntrySerializer(serializers.Serializer):
    """One payment entry; method details use the same keys as the UI form."""
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    method = serializers.CharField(required=False, default='cash')
    date = serializers.DateField(required=False, allow_null=True)
    checkNumber = serializers.CharField(required=False, allow_blank=True)
    bankName = serializers.CharField(required=False, allow_blank=True)
    depositDate = serializers.CharField(required=False, allow_blank=True)
    proofUrl = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        try:
            attrs['payment_method'] = parse_method(attrs)
        except AcademyValidationError as e:
            raise serializers.ValidationError({'method': e.message})
        return attrs


class FinishSerializer(serializers.Serializer):
    confirm_duplicate = serializers.BooleanField(required=False, default=False)


# ============ OUTPUT ============

def wizard_payload(state, quote=None):
    data = wizard.to_dict(state)
    if quote is not None:
        data['quote'] = {key: str(value) for key, value in quote.to_dict().items()}
    return data


class EnrollmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Enrollment
        fields = [
            'id', 'student', 'student_name', 'program', 'program_name', 'pack_name',
            'grade_id', 'grade_name', 'group_id', 'group_name', 'group_time',
            'second_group_id', 'second_group_name', 'second_group_time',
            'payment_plan', 'total_amount', 'discount_amount', 'paid_amount', 'balance',
            'status', 'start_date', 'session', 'created_at',
        ]


class LeadSerializer(serializers.ModelSerializer):
    program_id = serializers.IntegerField(required=False, allow_null=True)

    class Meta:
        model = Lead
        fields = [
            'id', 'name', 'parent_name', 'phone', 'email', 'source', 'status', 'notes',
            'program_id', 'selected_pack', 'selected_slot', 'created_at',
        ]
        read_only_fields = ['id', 'created_at']


class LeadStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Lead.STATUS_CHOICES])
