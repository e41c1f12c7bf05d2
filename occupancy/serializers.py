from rest_framework import serializers
from .models import AcceptedApplication


class AcceptedApplicationSerializer(serializers.ModelSerializer):
    """Serializer for AcceptedApplication (occupancy record)"""
    room_number = serializers.CharField(source='room.number', read_only=True)
    dormitory_name = serializers.CharField(source='room.dormitory.name', read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)

    class Meta:
        model = AcceptedApplication
        fields = [
            'id', 'application', 'user', 'username', 'room', 'room_number',
            'dormitory_name', 'student_index_number', 'average_grade',
            'academic_year', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class ApproveSerializer(serializers.Serializer):
    """Input for approving an application"""
    aplikacija_id = serializers.IntegerField()
    academic_year = serializers.CharField(max_length=9)


class EvictSerializer(serializers.Serializer):
    """Input for evicting a student"""
    user_id = serializers.IntegerField()
    reason = serializers.CharField(max_length=1000)
