# referrals/models.py
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from core.exceptions import ConflictError


class CommissionSettings(models.Model):
    """Single-row table holding the global referral commission rate"""
    referral_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('5.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    updated_by = models.CharField(max_length=254, default='system')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Commission Settings'
        verbose_name_plural = 'Commission Settings'

    def __str__(self):
        return f"Referral rate {self.referral_rate}%"


class CommissionStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    APPROVED = 'APPROVED', 'Approved'
    REJECTED = 'REJECTED', 'Rejected'


# Allowed transitions; APPROVED and REJECTED are terminal
COMMISSION_TRANSITIONS = {
    CommissionStatus.PENDING: frozenset({CommissionStatus.APPROVED, CommissionStatus.REJECTED}),
    CommissionStatus.APPROVED: frozenset(),
    CommissionStatus.REJECTED: frozenset(),
}


class ReferralCommission(models.Model):
    """Monthly commission bucket per (referrer, referred user)"""
    referrer = models.ForeignKey(
        'users.User',
        on_delete=models.CASCADE,
        related_name='referral_commissions'
    )
    referred_user = models.ForeignKey(
        'users.User',
        on_delete=models.CASCADE,
        related_name='generated_commissions'
    )
    month = models.PositiveSmallIntegerField()
    year = models.PositiveSmallIntegerField()
    amount = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0'))
    token_amount = models.DecimalField(max_digits=20, decimal_places=8, default=Decimal('0'))
    price_per_token = models.DecimalField(max_digits=20, decimal_places=8, default=Decimal('0'))
    commission_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('5.00'))
    status = models.CharField(
        max_length=20,
        choices=CommissionStatus.choices,
        default=CommissionStatus.PENDING
    )
    is_paid = models.BooleanField(default=False)
    admin_notes = models.TextField(blank=True)
    rejection_reason = models.TextField(blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_commissions'
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rejected_commissions'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-year', '-month', '-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['referrer', 'referred_user', 'month', 'year'],
                name='referrer_referred_month_year',
            ),
        ]

    def __str__(self):
        return f"{self.referrer.email} <- {self.referred_user.email} {self.month:02d}/{self.year}"

    @property
    def is_pending(self):
        return self.status == CommissionStatus.PENDING

    def _transition(self, target):
        if target not in COMMISSION_TRANSITIONS[CommissionStatus(self.status)]:
            raise ConflictError(f'Commission is already {self.get_status_display().lower()}')
        self.status = target

    def approve(self, admin, admin_notes=''):
        self._transition(CommissionStatus.APPROVED)
        self.approved_at = timezone.now()
        self.approved_by = admin
        if admin_notes:
            self.admin_notes = admin_notes
        self.save(update_fields=['status', 'approved_at', 'approved_by', 'admin_notes', 'updated_at'])

    def reject(self, admin, reason=''):
        self._transition(CommissionStatus.REJECTED)
        self.rejected_at = timezone.now()
        self.rejected_by = admin
        self.rejection_reason = reason or 'Commission rejected by admin'
        self.save(update_fields=[
            'status', 'rejected_at', 'rejected_by', 'rejection_reason', 'admin_notes', 'updated_at'
        ])
