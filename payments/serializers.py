from rest_framework import serializers
from core.constants import PaymentStatus
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    """Serializer for Payment"""
    student_index_number = serializers.CharField(source='application.student_index_number', read_only=True)
    user = serializers.IntegerField(source='application.user_id', read_only=True)
    room = serializers.IntegerField(source='application.room_id', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'application', 'student_index_number', 'user', 'room',
            'amount', 'period', 'status', 'due_date', 'paid_at', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    """Input for creating a payment"""
    application_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    period = serializers.RegexField(r'^\d{4}-(0[1-9]|1[0-2])$', max_length=7)
    due_date = serializers.DateField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class PaymentUpdateSerializer(serializers.Serializer):
    """Partial update input; omitted fields are left unchanged"""
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    period = serializers.RegexField(r'^\d{4}-(0[1-9]|1[0-2])$', max_length=7, required=False)
    status = serializers.ChoiceField(choices=PaymentStatus.CHOICES, required=False)
    due_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class MarkPaidSerializer(serializers.Serializer):
    paid_at = serializers.DateTimeField(required=False, allow_null=True)
