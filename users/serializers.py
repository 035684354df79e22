# users/serializers.py
from django.contrib.auth import authenticate
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed

from users.models import User


class UserSerializer(serializers.ModelSerializer):
    """Account profile with ledger balances"""
    contactNumber = serializers.CharField(source='contact_number', read_only=True)
    referralCode = serializers.CharField(source='referral_code', read_only=True)
    referredBy = serializers.CharField(source='referred_by_code', read_only=True)
    totalTokens = serializers.DecimalField(source='total_tokens', max_digits=20, decimal_places=8, read_only=True)
    availableTokens = serializers.DecimalField(
        source='available_tokens', max_digits=20, decimal_places=8, read_only=True
    )
    stakedTokens = serializers.DecimalField(source='staked_tokens', max_digits=20, decimal_places=8, read_only=True)
    usdtBalance = serializers.DecimalField(source='usdt_balance', max_digits=20, decimal_places=2, read_only=True)
    totalEarnings = serializers.DecimalField(source='total_earnings', max_digits=20, decimal_places=2, read_only=True)
    referralEarnings = serializers.DecimalField(
        source='referral_earnings', max_digits=20, decimal_places=2, read_only=True
    )
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'email', 'contactNumber', 'country', 'state', 'role',
            'referralCode', 'referredBy', 'totalTokens', 'availableTokens',
            'stakedTokens', 'usdtBalance', 'totalEarnings', 'referralEarnings',
            'isActive', 'createdAt'
        ]
        read_only_fields = fields


class SignUpSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=150)
    email = serializers.EmailField()
    contactNumber = serializers.CharField(source='contact_number', min_length=10, max_length=20)
    country = serializers.CharField(min_length=2, max_length=100)
    state = serializers.CharField(min_length=2, max_length=100)
    password = serializers.CharField(min_length=6, write_only=True, style={'input_type': 'password'})
    referralCode = serializers.CharField(
        source='referral_code',
        required=False,
        allow_blank=True,
        write_only=True
    )

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('An account with this email already exists.')
        return value.lower()

    def validate_referralCode(self, value):
        return value.strip().upper()


class SignInSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get('request'),
            email=attrs['email'].lower(),
            password=attrs['password']
        )
        # ModelBackend also returns None for inactive accounts
        if user is None:
            raise AuthenticationFailed('Invalid email or password')

        attrs['user'] = user
        return attrs


class ProfileUpdateSerializer(serializers.ModelSerializer):
    contactNumber = serializers.CharField(
        source='contact_number', min_length=10, max_length=20, required=False
    )
    name = serializers.CharField(min_length=2, max_length=150, required=False)
    country = serializers.CharField(min_length=2, max_length=100, required=False)
    state = serializers.CharField(min_length=2, max_length=100, required=False)

    class Meta:
        model = User
        fields = ['name', 'contactNumber', 'country', 'state']


class AdminUserUpdateSerializer(serializers.Serializer):
    ACTIONS = ('toggleActive', 'updateRole')

    action = serializers.ChoiceField(choices=ACTIONS)
    value = serializers.JSONField(required=False)

    def validate(self, attrs):
        if attrs['action'] == 'updateRole' and attrs.get('value') not in User.Role.values:
            raise serializers.ValidationError({'value': [f'Role must be one of {", ".join(User.Role.values)}']})
        return attrs
