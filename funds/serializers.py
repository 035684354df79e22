# funds/serializers.py
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import serializers

from funds.models import TokenPrice, Transaction, WithdrawalRequest

User = get_user_model()

POSITIVE = Decimal('0.01')
MIN_TOKEN_VALUE = Decimal('0.00000001')


class TransactionSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source='transaction_type', read_only=True)
    tokenAmount = serializers.DecimalField(source='token_amount', max_digits=20, decimal_places=8, read_only=True)
    pricePerToken = serializers.DecimalField(source='price_per_token', max_digits=20, decimal_places=8, read_only=True)
    paymentMethod = serializers.CharField(source='payment_method', read_only=True)
    processingFee = serializers.DecimalField(source='processing_fee', max_digits=20, decimal_places=2, read_only=True)
    walletAddress = serializers.CharField(source='wallet_address', read_only=True)
    referenceId = serializers.CharField(source='reference_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    completedAt = serializers.DateTimeField(source='completed_at', read_only=True)

    class Meta:
        model = Transaction
        fields = [
            'id', 'type', 'amount', 'tokenAmount', 'pricePerToken', 'status',
            'paymentMethod', 'processingFee', 'walletAddress', 'description',
            'referenceId', 'createdAt', 'completedAt'
        ]
        read_only_fields = fields


class AdminTransactionSerializer(TransactionSerializer):
    userEmail = serializers.EmailField(source='user.email', read_only=True)
    adminNotes = serializers.CharField(source='admin_notes', read_only=True)

    class Meta(TransactionSerializer.Meta):
        fields = TransactionSerializer.Meta.fields + ['userEmail', 'adminNotes']
        read_only_fields = fields


class TokenPriceSerializer(serializers.ModelSerializer):
    updatedBy = serializers.CharField(source='updated_by', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = TokenPrice
        fields = ['id', 'date', 'price', 'updatedBy', 'updatedAt']


class SetTokenPriceSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=20, decimal_places=8, min_value=MIN_TOKEN_VALUE)
    date = serializers.DateField(required=False)


class PurchaseSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=20, decimal_places=2, min_value=POSITIVE)
    tokenAmount = serializers.DecimalField(
        source='token_amount', max_digits=20, decimal_places=8, min_value=MIN_TOKEN_VALUE
    )
    paymentMethod = serializers.CharField(source='payment_method', max_length=50)
    currentPrice = serializers.DecimalField(
        source='current_price', max_digits=20, decimal_places=8, min_value=MIN_TOKEN_VALUE
    )


class PurchaseFromBalanceSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=20, decimal_places=2, min_value=POSITIVE)


class PaymentConfirmationSerializer(serializers.Serializer):
    transactionId = serializers.IntegerField(source='transaction_id')
    action = serializers.ChoiceField(choices=['confirm', 'reject'])
    adminNotes = serializers.CharField(source='admin_notes', required=False, allow_blank=True, default='')


class ManualDepositSerializer(serializers.Serializer):
    userId = serializers.UUIDField(source='user_id')
    amount = serializers.DecimalField(max_digits=20, decimal_places=2, min_value=POSITIVE)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class ConversionSerializer(serializers.Serializer):
    tokenAmount = serializers.DecimalField(source='token_amount', max_digits=20, decimal_places=8)


class UsdtWithdrawalSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=20, decimal_places=2, min_value=POSITIVE)
    walletAddress = serializers.CharField(source='wallet_address', max_length=100)


class TokenWithdrawalSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=20, decimal_places=2, min_value=POSITIVE)
    network = serializers.CharField(max_length=20)
    walletAddress = serializers.CharField(source='wallet_address', max_length=100)

    def validate_network(self, value):
        if value.upper() == WithdrawalRequest.USDT_NETWORK:
            raise serializers.ValidationError('Use the USDT withdrawal endpoint for USDT')
        return value


class WithdrawalRequestSerializer(serializers.ModelSerializer):
    userEmail = serializers.EmailField(source='user.email', read_only=True)
    tokenAmount = serializers.DecimalField(source='token_amount', max_digits=20, decimal_places=8, read_only=True)
    walletAddress = serializers.CharField(source='wallet_address', read_only=True)
    canWithdraw = serializers.BooleanField(source='can_withdraw', read_only=True)
    lockPeriodDays = serializers.IntegerField(source='lock_period_days', read_only=True)
    lockEndDate = serializers.DateTimeField(source='lock_end_date', read_only=True)
    transactionId = serializers.PrimaryKeyRelatedField(source='transaction', read_only=True)
    processedAt = serializers.DateTimeField(source='processed_at', read_only=True)
    rejectionReason = serializers.CharField(source='rejection_reason', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = WithdrawalRequest
        fields = [
            'id', 'userEmail', 'amount', 'tokenAmount', 'network', 'walletAddress',
            'status', 'canWithdraw', 'lockPeriodDays', 'lockEndDate', 'transactionId',
            'processedAt', 'rejectionReason', 'createdAt'
        ]
        read_only_fields = fields


class WithdrawalApprovalSerializer(serializers.Serializer):
    withdrawalId = serializers.IntegerField(source='withdrawal_id')
    action = serializers.ChoiceField(choices=['approve', 'reject'])
    reason = serializers.CharField(required=False, allow_blank=True, default='')
