# branches/serializers.py
from django.db import transaction
from rest_framework import serializers
from .models import Branch, BranchService


class ShareSettingsSerializer(serializers.Serializer):
    """
    {barberShare, washerShare} in percent
    """
    barberShare = serializers.IntegerField(
        source='barber_share', min_value=0, max_value=100, allow_null=True, required=False,
        error_messages={
            'invalid': "Barber share must be a number between 0 and 100",
            'min_value': "Barber share must be a number between 0 and 100",
            'max_value': "Barber share must be a number between 0 and 100",
        }
    )
    washerShare = serializers.IntegerField(
        source='washer_share', min_value=0, max_value=100, allow_null=True, required=False,
        error_messages={
            'invalid': "Washer share must be a number between 0 and 100",
            'min_value': "Washer share must be a number between 0 and 100",
            'max_value': "Washer share must be a number between 0 and 100",
        }
    )


class BranchServiceSerializer(serializers.ModelSerializer):
    barberPrice = serializers.DecimalField(
        source='barber_price', max_digits=10, decimal_places=2,
        min_value=0, required=False, allow_null=True, coerce_to_string=False
    )
    washerPrice = serializers.DecimalField(
        source='washer_price', max_digits=10, decimal_places=2,
        min_value=0, required=False, allow_null=True, coerce_to_string=False
    )
    shareSettings = ShareSettingsSerializer(source='*', required=False)

    class Meta:
        model = BranchService
        fields = ['id', 'name', 'barberPrice', 'washerPrice', 'shareSettings']
        read_only_fields = ['id']


class BranchListItemSerializer(serializers.ModelSerializer):
    """Minimal shape for the login branch picker"""

    class Meta:
        model = Branch
        fields = ['id', 'name']


class BranchSerializer(serializers.ModelSerializer):
    ownerId = serializers.PrimaryKeyRelatedField(source='owner', read_only=True)
    services = BranchServiceSerializer(many=True, required=False)

    class Meta:
        model = Branch
        fields = ['id', 'name', 'ownerId', 'services', 'created_at', 'updated_at']
        read_only_fields = ['id', 'ownerId', 'created_at', 'updated_at']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['services'] = BranchServiceSerializer(instance.ordered_services(), many=True).data
        return data

    def _write_services(self, branch, services):
        for position, service in enumerate(services):
            BranchService.objects.create(branch=branch, position=position, **service)

    def create(self, validated_data):
        services = validated_data.pop('services', [])
        with transaction.atomic():
            branch = Branch.objects.create(**validated_data)
            self._write_services(branch, services)
        return branch

    def update(self, instance, validated_data):
        services = validated_data.pop('services', None)
        with transaction.atomic():
            for key, value in validated_data.items():
                setattr(instance, key, value)
            instance.save()
            if services is not None:
                instance.services.all().delete()
                self._write_services(instance, services)
        return instance


class ServiceUpdateSerializer(serializers.Serializer):
    """
    PUT /api/branches/<id>/services/
    """
    serviceIndex = serializers.IntegerField(
        min_value=0,
        error_messages={'required': "Service index is required", 'min_value': "Service index is required"}
    )
    service = BranchServiceSerializer()
