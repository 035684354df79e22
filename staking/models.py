# staking/models.py
from decimal import Decimal

from django.db import models


class StakingRecord(models.Model):
    """Tokens locked for a fixed term at a fixed APY"""

    class Status(models.TextChoices):
        ACTIVE = 'ACTIVE', 'Active'
        COMPLETED = 'COMPLETED', 'Completed'

    user = models.ForeignKey(
        'users.User',
        on_delete=models.PROTECT,
        related_name='staking_records'
    )
    amount = models.DecimalField(max_digits=20, decimal_places=8)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    apy = models.DecimalField(max_digits=5, decimal_places=2)
    rewards = models.DecimalField(max_digits=20, decimal_places=8, default=Decimal('0'))
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-start_date']
        indexes = [
            models.Index(fields=['status', 'end_date'], name='staking_status_end_date'),
        ]

    def __str__(self):
        return f"{self.user.email} - {self.amount} DIT ({self.status})"
