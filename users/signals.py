# users/signals.py
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from notifications.services.notification_service import notification_service

User = get_user_model()


@receiver(post_save, sender=User)
def send_welcome_notifications(sender, instance, created, raw=False, **kwargs):
    """Welcome the new user and alert admins once the account row is committed"""
    if not created or raw:
        return
    transaction.on_commit(lambda: notification_service.on_user_registered(instance))
