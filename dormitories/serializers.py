from rest_framework import serializers
from .models import Dormitory, Room


class RoomSerializer(serializers.ModelSerializer):
    """Serializer for Room with live bed availability"""
    dormitory_name = serializers.CharField(source='dormitory.name', read_only=True)
    occupant_count = serializers.IntegerField(read_only=True)
    free_beds = serializers.IntegerField(read_only=True)

    class Meta:
        model = Room
        fields = [
            'id', 'dormitory', 'dormitory_name', 'number', 'capacity',
            'amenities', 'occupant_count', 'free_beds'
        ]
        read_only_fields = fields


class DormitorySerializer(serializers.ModelSerializer):
    """Serializer for Dormitory"""
    room_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Dormitory
        fields = ['id', 'name', 'address', 'telephone', 'email', 'room_count']
        read_only_fields = fields
