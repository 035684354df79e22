# staking/serializers.py
from decimal import Decimal

from rest_framework import serializers

from staking.models import StakingRecord


class StakeSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=20, decimal_places=8, min_value=Decimal('0.00000001'))


class StakingRecordSerializer(serializers.ModelSerializer):
    startDate = serializers.DateTimeField(source='start_date', read_only=True)
    endDate = serializers.DateTimeField(source='end_date', read_only=True)
    completedAt = serializers.DateTimeField(source='completed_at', read_only=True)

    class Meta:
        model = StakingRecord
        fields = ['id', 'amount', 'startDate', 'endDate', 'apy', 'rewards', 'status', 'completedAt']
        read_only_fields = fields


class AdminStakingRecordSerializer(StakingRecordSerializer):
    userEmail = serializers.EmailField(source='user.email', read_only=True)
    userName = serializers.CharField(source='user.name', read_only=True)

    class Meta(StakingRecordSerializer.Meta):
        fields = StakingRecordSerializer.Meta.fields + ['userEmail', 'userName']
        read_only_fields = fields
