from rest_framework import serializers
from core.constants import Grade
from .models import Application


class ApplicationSerializer(serializers.ModelSerializer):
    """Serializer for Application"""
    room_number = serializers.CharField(source='room.number', read_only=True)
    dormitory_name = serializers.CharField(source='room.dormitory.name', read_only=True)

    class Meta:
        model = Application
        fields = [
            'id', 'user', 'room', 'room_number', 'dormitory_name',
            'student_index_number', 'average_grade', 'is_active',
            'deactivation_reason', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class ApplicationCreateSerializer(serializers.Serializer):
    """Input for filing an application"""
    room_id = serializers.IntegerField()
    student_index_number = serializers.CharField(max_length=50)
    average_grade = serializers.DecimalField(
        max_digits=4, decimal_places=2, min_value=Grade.MIN, max_value=Grade.MAX
    )


class ApplicationUpdateSerializer(serializers.Serializer):
    """Partial update input; omitted fields are left unchanged"""
    student_index_number = serializers.CharField(max_length=50, required=False)
    average_grade = serializers.DecimalField(
        max_digits=4, decimal_places=2, min_value=Grade.MIN, max_value=Grade.MAX, required=False
    )
    is_active = serializers.BooleanField(required=False)
