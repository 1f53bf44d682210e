# billing/serializers.py
from rest_framework import serializers

from core.exceptions import ValidationError as AcademyValidationError
from .methods import parse_method
from .models import Payment


class RecordPaymentSerializer(serializers.Serializer):
    """Payment recorder form."""
    enrollment_id = serializers.IntegerField(required=False, allow_null=True)
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


class PaymentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Payment.STATUS_CHOICES])


class PaymentAmountSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class PaymentSerializer(serializers.ModelSerializer):
    enrollment_id = serializers.IntegerField(read_only=True)
    is_cleared = serializers.BooleanField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'enrollment_id', 'student_name', 'amount', 'date', 'method', 'status',
            'check_number', 'bank_name', 'deposit_date', 'proof_url', 'session',
            'is_cleared', 'created_at',
        ]
        read_only_fields = fields


class EnrollmentBalanceSerializer(serializers.Serializer):
    """Search result row of the payment recorder."""
    id = serializers.IntegerField()
    student_id = serializers.IntegerField()
    student_name = serializers.CharField()
    program_name = serializers.CharField()
    pack_name = serializers.CharField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
