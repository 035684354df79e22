# notifications/services/notification_service.py
import logging

from django.conf import settings
from django.db import transaction

from notifications.models import Notification
from notifications.tasks import send_email_notification

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Write notification rows and dispatch transactional email.

    Everything here is best-effort: failures are logged and swallowed so a
    notification problem can never undo the operation that triggered it.
    Call these helpers after the ledger transaction has committed.
    """

    def notify(self, user, notification_type, title, message, data=None, email=False):
        notification = None
        try:
            with transaction.atomic():
                notification = Notification.objects.create(
                    user=user,
                    notification_type=notification_type,
                    title=title,
                    message=message,
                    data=data or {},
                )
        except Exception as e:
            logger.error(f"Failed to create notification '{title}': {str(e)}", exc_info=True)

        if email and user is not None:
            self.send_email([user.email], f'DiTokens - {title}', self._email_body(user, message))

        return notification

    def send_email(self, recipients, subject, message):
        try:
            send_email_notification.delay(subject, message, list(recipients))
        except Exception as e:
            logger.error(f"Failed to queue email '{subject}': {str(e)}", exc_info=True)

    def notify_admins(self, subject, message):
        recipients = settings.ADMIN_NOTIFICATION_EMAILS
        if not recipients:
            logger.info(f"No admin recipients configured for '{subject}'")
            return
        self.send_email(recipients, f'[DiTokens Admin] {subject}', message)

    def _email_body(self, user, message):
        return f"""
Hello {user.name or 'User'},

{message}

You can review your account at {settings.FRONTEND_URL}/dashboard

Best regards,
DiTokens Team
"""

    # Event helpers

    def on_user_registered(self, user):
        self.notify(
            user,
            Notification.Type.SYSTEM,
            'Welcome to DiTokens',
            f'Your account has been created. Your referral code is {user.referral_code}.',
            data={'referral_code': user.referral_code},
            email=True,
        )
        self.notify_admins(
            'New user registration',
            f"""
A new user has registered.

Name: {user.name}
Email: {user.email}
Contact number: {user.contact_number or 'Not provided'}
Country: {user.country or 'Not provided'}
State: {user.state or 'Not provided'}
Referral code: {user.referral_code}
Referred by: {user.referred_by_code or 'None'}
""",
        )

    def on_token_purchase_pending(self, purchase):
        self.notify(
            purchase.user,
            Notification.Type.TOKEN_PURCHASE,
            'Token Purchase Pending',
            f'Your purchase of {purchase.token_amount:f} DIT tokens for ${purchase.amount:.2f} '
            f'is pending payment confirmation. Send USDT to {purchase.wallet_address}. '
            f'Reference: {purchase.reference_id}',
            data={'transaction_id': purchase.id, 'type': 'purchase_pending'},
            email=True,
        )
        self.notify_admins(
            'Purchase awaiting payment confirmation',
            f'{purchase.user.email} requested {purchase.token_amount:f} DIT for '
            f'${purchase.amount:.2f} via {purchase.payment_method} ({purchase.reference_id}).',
        )

    def on_token_purchase(self, purchase):
        self.notify(
            purchase.user,
            Notification.Type.TOKEN_PURCHASE,
            'Token Purchase Successful',
            f'You have successfully purchased {purchase.token_amount:f} DIT tokens '
            f'for ${purchase.amount:.2f}',
            data={'transaction_id': purchase.id, 'type': 'purchase'},
            email=True,
        )

    def on_token_purchase_rejected(self, purchase, reason):
        self.notify(
            purchase.user,
            Notification.Type.TOKEN_PURCHASE,
            'Token Purchase Rejected',
            f'Your purchase of {purchase.token_amount:f} DIT tokens for ${purchase.amount:.2f} '
            f'was rejected. Reason: {reason}',
            data={'transaction_id': purchase.id, 'type': 'purchase_rejected'},
            email=True,
        )

    def on_referral_commission(self, commission):
        self.notify(
            commission.referrer,
            Notification.Type.REFERRAL,
            'Referral Commission Earned',
            f'You earned ${commission.amount:.2f} commission from '
            f"{commission.referred_user.name or 'User'}'s token purchases",
            data={'commission_id': commission.id, 'type': 'commission'},
            email=True,
        )

    def on_referral_commission_rejected(self, commission):
        self.notify(
            commission.referrer,
            Notification.Type.REFERRAL,
            'Referral Commission Rejected',
            f'Your referral commission of ${commission.amount:.2f} for '
            f'{commission.month:02d}/{commission.year} was rejected. '
            f'Reason: {commission.rejection_reason}',
            data={'commission_id': commission.id, 'type': 'commission_rejected'},
        )

    def on_stake(self, record):
        self.notify(
            record.user,
            Notification.Type.STAKING,
            'Tokens Staked',
            f'You staked {record.amount:f} DIT tokens at {record.apy}% APY until '
            f'{record.end_date:%Y-%m-%d}.',
            data={'staking_id': record.id, 'type': 'stake'},
            email=True,
        )

    def on_stake_completed(self, record):
        self.notify(
            record.user,
            Notification.Type.STAKING,
            'Staking Period Completed',
            f'Your stake of {record.amount:f} DIT tokens has matured and is available again.',
            data={'staking_id': record.id, 'type': 'stake_completed'},
        )

    def on_conversion(self, sale):
        self.notify(
            sale.user,
            Notification.Type.CONVERSION,
            'DIT Converted to USDT',
            f'{sale.token_amount:f} DIT converted to ${sale.amount:.2f} USDT '
            f'at ${sale.price_per_token:.2f} per token.',
            data={'transaction_id': sale.id, 'type': 'conversion'},
            email=True,
        )

    def on_deposit(self, deposit):
        self.notify(
            deposit.user,
            Notification.Type.DEPOSIT,
            'USDT Deposit Credited',
            f'${deposit.amount:.2f} USDT has been credited to your balance.',
            data={'transaction_id': deposit.id, 'type': 'deposit'},
            email=True,
        )

    def on_withdrawal_requested(self, withdrawal):
        self.notify(
            withdrawal.user,
            Notification.Type.WITHDRAWAL,
            'Withdrawal Requested',
            f'Your withdrawal request of ${withdrawal.amount:.2f} to '
            f'{withdrawal.wallet_address} is being processed.',
            data={'withdrawal_id': withdrawal.id, 'type': 'withdrawal_requested'},
            email=True,
        )
        self.notify_admins(
            'New withdrawal request',
            f'{withdrawal.user.email} requested a {withdrawal.network} withdrawal of '
            f'${withdrawal.amount:.2f} to {withdrawal.wallet_address}.',
        )

    def on_withdrawal_processed(self, withdrawal):
        if withdrawal.status == withdrawal.Status.APPROVED:
            title = 'Withdrawal Approved'
            message = (
                f'Your withdrawal request for ${withdrawal.amount:.2f} has been '
                'approved and processed.'
            )
        else:
            title = 'Withdrawal Rejected'
            message = (
                f'Your withdrawal request for ${withdrawal.amount:.2f} has been rejected. '
                f"Reason: {withdrawal.rejection_reason or 'No reason provided'}"
            )
        self.notify(
            withdrawal.user,
            Notification.Type.WITHDRAWAL,
            title,
            message,
            data={'withdrawal_id': withdrawal.id, 'status': withdrawal.status},
            email=True,
        )


notification_service = NotificationService()
