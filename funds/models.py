# funds/models.py
import uuid
from datetime import timedelta
from decimal import Decimal

from django.db import models
from django.utils import timezone

from core.exceptions import ConflictError


class Transaction(models.Model):
    """Immutable record of one balance-affecting event"""

    class Type(models.TextChoices):
        PURCHASE = 'PURCHASE', 'Purchase'
        SALE = 'SALE', 'Sale'
        STAKE = 'STAKE', 'Stake'
        WITHDRAWAL = 'WITHDRAWAL', 'Withdrawal'
        DEPOSIT = 'DEPOSIT', 'Deposit'
        REFERRAL_COMMISSION = 'REFERRAL_COMMISSION', 'Referral Commission'

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        COMPLETED = 'COMPLETED', 'Completed'
        FAILED = 'FAILED', 'Failed'
        REJECTED = 'REJECTED', 'Rejected'

    TRANSITIONS = {
        Status.PENDING: {Status.COMPLETED, Status.FAILED, Status.REJECTED},
        Status.COMPLETED: set(),
        Status.FAILED: set(),
        Status.REJECTED: set(),
    }

    REFERENCE_PREFIXES = {
        Type.PURCHASE: 'PUR',
        Type.SALE: 'SAL',
        Type.STAKE: 'STK',
        Type.WITHDRAWAL: 'WDR',
        Type.DEPOSIT: 'DEP',
        Type.REFERRAL_COMMISSION: 'REF',
    }

    user = models.ForeignKey(
        'users.User',
        on_delete=models.PROTECT,
        related_name='transactions'
    )
    transaction_type = models.CharField(max_length=20, choices=Type.choices)
    amount = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0'))
    token_amount = models.DecimalField(max_digits=20, decimal_places=8, default=Decimal('0'))
    price_per_token = models.DecimalField(max_digits=20, decimal_places=8, default=Decimal('0'))
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_method = models.CharField(max_length=50, blank=True)
    processing_fee = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0'))
    wallet_address = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    admin_notes = models.TextField(blank=True)
    reference_id = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'transaction_type', 'status'], name='funds_tx_user_type_status'),
        ]

    def __str__(self):
        return f"{self.reference_id} ({self.transaction_type} {self.status})"

    def save(self, *args, **kwargs):
        if not self.reference_id:
            prefix = self.REFERENCE_PREFIXES.get(self.transaction_type, 'TX')
            self.reference_id = f'{prefix}-{uuid.uuid4().hex[:12].upper()}'
        if self.status == self.Status.COMPLETED and self.completed_at is None:
            self.completed_at = timezone.now()
        super().save(*args, **kwargs)

    def transition(self, new_status, admin_notes=None):
        """Move PENDING to a terminal status; terminal statuses never change"""
        if new_status not in self.TRANSITIONS[self.status]:
            raise ConflictError(f'Transaction is already {self.get_status_display().lower()}')

        self.status = new_status
        fields = ['status']
        if new_status == self.Status.COMPLETED:
            self.completed_at = timezone.now()
            fields.append('completed_at')
        if admin_notes is not None:
            self.admin_notes = admin_notes
            fields.append('admin_notes')
        self.save(update_fields=fields)


class TokenPrice(models.Model):
    """Daily DIT token price set by a superadmin"""
    date = models.DateField(unique=True)
    price = models.DecimalField(max_digits=20, decimal_places=8)
    updated_by = models.CharField(max_length=254, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date']

    def __str__(self):
        return f"{self.date}: ${self.price}"


class WithdrawalRequest(models.Model):
    """USDT or DIT withdrawal, gated by a lock period from creation"""

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        APPROVED = 'APPROVED', 'Approved'
        REJECTED = 'REJECTED', 'Rejected'

    USDT_NETWORK = 'USDT'

    user = models.ForeignKey(
        'users.User',
        on_delete=models.PROTECT,
        related_name='withdrawal_requests'
    )
    amount = models.DecimalField(max_digits=20, decimal_places=2)
    token_amount = models.DecimalField(max_digits=20, decimal_places=8, default=Decimal('0'))
    network = models.CharField(max_length=20)
    wallet_address = models.CharField(max_length=100)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    can_withdraw = models.BooleanField(default=False)
    lock_period_days = models.PositiveIntegerField(default=1095)
    transaction = models.OneToOneField(
        Transaction,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='withdrawal_request'
    )
    processed_at = models.DateTimeField(null=True, blank=True)
    processed_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='processed_withdrawals'
    )
    rejection_reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.email} - ${self.amount} {self.network} ({self.status})"

    @property
    def is_usdt(self):
        return self.network == self.USDT_NETWORK

    @property
    def lock_end_date(self):
        return self.created_at + timedelta(days=self.lock_period_days)

    def is_unlocked(self, now=None):
        return (now or timezone.now()) >= self.lock_end_date
