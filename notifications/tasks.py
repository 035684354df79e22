# notifications/tasks.py
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


@shared_task
def send_email_notification(subject, message, recipient_list):
    """Send a transactional email through the configured SMTP backend"""
    if not recipient_list:
        return 'No recipients'

    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=recipient_list,
            fail_silently=False,
        )
        logger.info(f"Email '{subject}' sent to {', '.join(recipient_list)}")
        return 'sent'
    except Exception as e:
        logger.error(f"Failed to send email '{subject}' to {recipient_list}: {str(e)}")
        return f"Error: {e}"
