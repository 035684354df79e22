# notifications/models.py
from django.db import models


class Notification(models.Model):
    """User-facing notification feed entry; user=None means global"""

    class Type(models.TextChoices):
        TOKEN_PURCHASE = 'TOKEN_PURCHASE', 'Token Purchase'
        REFERRAL = 'REFERRAL', 'Referral'
        STAKING = 'STAKING', 'Staking'
        WITHDRAWAL = 'WITHDRAWAL', 'Withdrawal'
        CONVERSION = 'CONVERSION', 'Conversion'
        DEPOSIT = 'DEPOSIT', 'Deposit'
        SYSTEM = 'SYSTEM', 'System'
        ADMIN_MESSAGE = 'ADMIN_MESSAGE', 'Admin Message'
        SECURITY = 'SECURITY', 'Security'

    user = models.ForeignKey(
        'users.User',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='notifications'
    )
    notification_type = models.CharField(max_length=20, choices=Type.choices)
    title = models.CharField(max_length=200)
    message = models.TextField()
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notification_user_is_read'),
        ]

    def __str__(self):
        target = self.user.email if self.user_id else 'all users'
        return f"{self.title} -> {target}"
