# referrals/serializers.py
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import serializers

from referrals.models import CommissionSettings, ReferralCommission

User = get_user_model()


class CommissionSettingsSerializer(serializers.ModelSerializer):
    referralRate = serializers.DecimalField(
        source='referral_rate',
        max_digits=5,
        decimal_places=2,
        min_value=Decimal('0'),
        max_value=Decimal('100')
    )
    updatedBy = serializers.CharField(source='updated_by', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = CommissionSettings
        fields = ['referralRate', 'updatedBy', 'updatedAt']


class ReferralCommissionSerializer(serializers.ModelSerializer):
    referredUser = serializers.SerializerMethodField()
    tokenAmount = serializers.DecimalField(source='token_amount', max_digits=20, decimal_places=8, read_only=True)
    pricePerToken = serializers.DecimalField(source='price_per_token', max_digits=20, decimal_places=8, read_only=True)
    commissionPercentage = serializers.DecimalField(
        source='commission_percentage', max_digits=5, decimal_places=2, read_only=True
    )
    isPaid = serializers.BooleanField(source='is_paid', read_only=True)
    rejectionReason = serializers.CharField(source='rejection_reason', read_only=True)
    approvedAt = serializers.DateTimeField(source='approved_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = ReferralCommission
        fields = [
            'id', 'referredUser', 'month', 'year', 'amount', 'tokenAmount', 'pricePerToken',
            'commissionPercentage', 'status', 'isPaid', 'rejectionReason', 'approvedAt', 'createdAt'
        ]
        read_only_fields = fields

    def get_referredUser(self, obj):
        return {'id': str(obj.referred_user_id), 'name': obj.referred_user.name, 'email': obj.referred_user.email}


class AdminReferralCommissionSerializer(ReferralCommissionSerializer):
    referrer = serializers.SerializerMethodField()
    adminNotes = serializers.CharField(source='admin_notes', read_only=True)
    rejectedAt = serializers.DateTimeField(source='rejected_at', read_only=True)

    class Meta(ReferralCommissionSerializer.Meta):
        fields = ReferralCommissionSerializer.Meta.fields + ['referrer', 'adminNotes', 'rejectedAt']
        read_only_fields = fields

    def get_referrer(self, obj):
        return {'id': str(obj.referrer_id), 'name': obj.referrer.name, 'email': obj.referrer.email}


class CommissionApprovalSerializer(serializers.Serializer):
    commissionId = serializers.IntegerField(source='commission_id')
    action = serializers.ChoiceField(choices=['approve', 'reject'])
    adminNotes = serializers.CharField(source='admin_notes', required=False, allow_blank=True, default='')
    rejectionReason = serializers.CharField(
        source='rejection_reason', required=False, allow_blank=True, default=''
    )


class ReferredUserSerializer(serializers.ModelSerializer):
    totalTokens = serializers.DecimalField(source='total_tokens', max_digits=20, decimal_places=8, read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'country', 'totalTokens', 'isActive', 'createdAt']
        read_only_fields = fields
