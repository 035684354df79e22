# users/models.py
import random
import string
import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


def generate_referral_code():
    """Generate a unique 8-character referral code"""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=8))
        if not User.objects.filter(referral_code=code).exists():
            return code


class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email).lower()
        extra_fields.setdefault('referral_code', generate_referral_code())
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', User.Role.SUPERADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Platform account; also carries the token and USDT ledger balances"""

    class Role(models.TextChoices):
        USER = 'USER', _('User')
        ADMIN = 'ADMIN', _('Admin')
        SUPERADMIN = 'SUPERADMIN', _('Super Admin')

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        unique=True
    )
    name = models.CharField(_('name'), max_length=150)
    email = models.EmailField(_('email address'), unique=True)
    contact_number = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.USER)

    referral_code = models.CharField(max_length=10, unique=True)
    referred_by = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='referrals'
    )

    # Ledger balances, mutated only through users.services.ledger
    total_tokens = models.DecimalField(
        max_digits=20, decimal_places=8, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    available_tokens = models.DecimalField(
        max_digits=20, decimal_places=8, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    staked_tokens = models.DecimalField(
        max_digits=20, decimal_places=8, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    usdt_balance = models.DecimalField(
        max_digits=20, decimal_places=2, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    total_earnings = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0'))
    referral_earnings = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(available_tokens__gte=0),
                name='user_available_tokens_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(staked_tokens__gte=0),
                name='user_staked_tokens_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(usdt_balance__gte=0),
                name='user_usdt_balance_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(total_tokens__gte=F('available_tokens') + F('staked_tokens')),
                name='user_token_balances_consistent',
            ),
        ]

    def __str__(self):
        return self.email

    @property
    def is_admin_role(self):
        return self.role in (self.Role.ADMIN, self.Role.SUPERADMIN)

    @property
    def is_superadmin(self):
        return self.role == self.Role.SUPERADMIN

    @property
    def referred_by_code(self):
        return self.referred_by.referral_code if self.referred_by_id else None
