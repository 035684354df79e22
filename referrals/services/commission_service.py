# referrals/services/commission_service.py
"""
Referral commission engine.

Commissions are two-phase: recording only accumulates into the monthly
bucket (status PENDING, no balance effect); the referrer is credited when an
admin approves the bucket.
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.shortcuts import get_object_or_404
from django.utils import timezone

from core.exceptions import ConflictError
from core.utils import quantize_tokens, quantize_usd, to_decimal
from funds.models import Transaction
from notifications.services.notification_service import notification_service
from referrals.models import CommissionSettings, CommissionStatus, ReferralCommission
from users.services.ledger import apply_ledger_delta

logger = logging.getLogger(__name__)


def get_commission_settings(updated_by='system'):
    """Return the settings row, creating it with the default rate if missing"""
    commission_settings = CommissionSettings.objects.order_by('id').first()
    if commission_settings is None:
        commission_settings = CommissionSettings.objects.create(
            referral_rate=settings.DEFAULT_REFERRAL_RATE,
            updated_by=updated_by,
        )
    return commission_settings


def update_referral_rate(rate, updated_by):
    commission_settings = get_commission_settings(updated_by)
    commission_settings.referral_rate = rate
    commission_settings.updated_by = updated_by
    commission_settings.save()
    logger.info(f"{updated_by} set referral commission rate to {rate}%")
    return commission_settings


def get_referral_rate():
    return get_commission_settings().referral_rate


def _current_period():
    today = timezone.localdate()
    return today.month, today.year


def register_referral(referrer, referred_user):
    """Open the zero-amount PENDING bucket created at sign-up"""
    month, year = _current_period()
    commission, _ = ReferralCommission.objects.get_or_create(
        referrer=referrer,
        referred_user=referred_user,
        month=month,
        year=year,
        defaults={'commission_percentage': get_referral_rate()},
    )
    return commission


def record_commission(referrer_id, referred_user_id, purchase_amount, token_amount, price_per_token):
    """
    Add a purchase's commission into the current monthly bucket.

    Returns the bucket, or None when the bucket for this month has already
    been approved or rejected (it is never reopened).
    """
    rate = get_referral_rate()
    commission_amount = quantize_usd(to_decimal(purchase_amount) * rate / Decimal('100'))
    commission_tokens = quantize_tokens(to_decimal(token_amount) * rate / Decimal('100'))
    month, year = _current_period()

    with transaction.atomic():
        commission, created = ReferralCommission.objects.select_for_update().get_or_create(
            referrer_id=referrer_id,
            referred_user_id=referred_user_id,
            month=month,
            year=year,
            defaults={
                'amount': commission_amount,
                'token_amount': commission_tokens,
                'price_per_token': price_per_token,
                'commission_percentage': rate,
            },
        )
        if created:
            logger.info(f"Opened commission {commission.id}: ${commission_amount} for referrer {referrer_id}")
            return commission

        if not commission.is_pending:
            logger.warning(
                f"Commission bucket {commission.id} is already {commission.status}; "
                f"${commission_amount} from user {referred_user_id} not recorded"
            )
            return None

        ReferralCommission.objects.filter(pk=commission.pk).update(
            amount=F('amount') + commission_amount,
            token_amount=F('token_amount') + commission_tokens,
            price_per_token=price_per_token,
            commission_percentage=rate,
            updated_at=timezone.now(),
        )
        commission.refresh_from_db()

    logger.info(f"Added ${commission_amount} to commission {commission.id} (total ${commission.amount})")
    return commission


def record_purchase_commission(purchase):
    """Record commission for a completed purchase if the buyer was referred"""
    buyer = purchase.user
    if not buyer.referred_by_id:
        return None

    return record_commission(
        referrer_id=buyer.referred_by_id,
        referred_user_id=buyer.id,
        purchase_amount=purchase.amount,
        token_amount=purchase.token_amount,
        price_per_token=purchase.price_per_token,
    )


def process_commission(commission_id, action, admin, admin_notes='', rejection_reason=''):
    """Approve or reject a PENDING commission bucket"""
    with transaction.atomic():
        commission = get_object_or_404(
            ReferralCommission.objects
            .select_for_update()
            .select_related('referrer', 'referred_user'),
            pk=commission_id,
        )

        if action == 'approve':
            if commission.is_pending and commission.amount <= 0:
                # An empty bucket stays open so later purchases keep accumulating
                raise ConflictError('Commission has nothing to approve yet')
            commission.approve(admin, admin_notes)

            apply_ledger_delta(
                commission.referrer_id,
                referral_earnings=commission.amount,
                total_earnings=commission.amount,
                usdt_balance=commission.amount,
            )
            Transaction.objects.create(
                user=commission.referrer,
                transaction_type=Transaction.Type.REFERRAL_COMMISSION,
                amount=commission.amount,
                token_amount=commission.token_amount,
                price_per_token=commission.price_per_token,
                payment_method='referral_bonus',
                status=Transaction.Status.COMPLETED,
                description=(
                    f'Referral commission approved: ${commission.amount:.2f} USDT '
                    f'from {commission.referred_user.email}'
                ),
            )
        else:
            commission.admin_notes = admin_notes
            commission.reject(admin, rejection_reason or admin_notes)

    logger.info(f"Admin {admin.email} {commission.status.lower()} commission {commission.id}")

    if commission.status == CommissionStatus.APPROVED:
        notification_service.on_referral_commission(commission)
    else:
        notification_service.on_referral_commission_rejected(commission)

    return commission
