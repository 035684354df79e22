# funds/services/withdrawal_service.py
import logging
import math

from django.conf import settings
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from core.exceptions import ConflictError, LockPeriodActive
from core.utils import quantize_tokens, quantize_usd
from funds.models import Transaction, WithdrawalRequest
from funds.services.price_service import get_current_price
from notifications.services.notification_service import notification_service
from users.services.ledger import apply_ledger_delta, lock_user

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


def _check_minimum_withdrawal(amount):
    if amount < settings.MIN_WITHDRAWAL_AMOUNT:
        raise ValidationError({'amount': [f'Minimum withdrawal amount is ${settings.MIN_WITHDRAWAL_AMOUNT}']})


def request_usdt_withdrawal(user_id, amount, wallet_address):
    """Reserve USDT from the balance and open a PENDING withdrawal"""
    amount = quantize_usd(amount)
    _check_minimum_withdrawal(amount)

    with transaction.atomic():
        user = apply_ledger_delta(user_id, usdt_balance=-amount)
        withdrawal_tx = Transaction.objects.create(
            user=user,
            transaction_type=Transaction.Type.WITHDRAWAL,
            amount=amount,
            status=Transaction.Status.PENDING,
            payment_method='usdt_withdrawal',
            wallet_address=wallet_address,
            description=f'USDT withdrawal of ${amount:.2f} to {wallet_address}',
        )
        withdrawal = WithdrawalRequest.objects.create(
            user=user,
            amount=amount,
            network=WithdrawalRequest.USDT_NETWORK,
            wallet_address=wallet_address,
            lock_period_days=settings.WITHDRAWAL_LOCK_DAYS,
            transaction=withdrawal_tx,
        )

    logger.info(f"{user.email} requested USDT withdrawal {withdrawal.id} for ${amount}")
    notification_service.on_withdrawal_requested(withdrawal)
    return withdrawal


def request_token_withdrawal(user_id, amount, network, wallet_address):
    """Reserve the DIT equivalent of a USD amount for an external withdrawal"""
    amount = quantize_usd(amount)
    _check_minimum_withdrawal(amount)

    price = get_current_price()
    token_amount = quantize_tokens(amount / price)

    with transaction.atomic():
        # Serialise the pending check and the insert on the user row
        lock_user(user_id)
        has_pending = WithdrawalRequest.objects.filter(
            user_id=user_id,
            status=WithdrawalRequest.Status.PENDING,
        ).exclude(network=WithdrawalRequest.USDT_NETWORK).exists()
        if has_pending:
            raise ConflictError('You already have a pending token withdrawal request')

        user = apply_ledger_delta(user_id, available_tokens=-token_amount)
        withdrawal_tx = Transaction.objects.create(
            user=user,
            transaction_type=Transaction.Type.WITHDRAWAL,
            amount=amount,
            token_amount=token_amount,
            price_per_token=price,
            status=Transaction.Status.PENDING,
            payment_method=network,
            wallet_address=wallet_address,
            description=f'Withdrawal of {token_amount:f} DIT to {network} wallet',
        )
        withdrawal = WithdrawalRequest.objects.create(
            user=user,
            amount=amount,
            token_amount=token_amount,
            network=network,
            wallet_address=wallet_address,
            lock_period_days=settings.WITHDRAWAL_LOCK_DAYS,
            transaction=withdrawal_tx,
        )

    logger.info(f"{user.email} requested token withdrawal {withdrawal.id}: {token_amount} DIT")
    notification_service.on_withdrawal_requested(withdrawal)
    return withdrawal


def check_lock_period(withdrawal, now=None):
    """Raise LockPeriodActive unless the withdrawal's lock period has ended"""
    now = now or timezone.now()
    lock_end = withdrawal.lock_end_date
    if now >= lock_end:
        return

    remaining_days = math.ceil((lock_end - now).total_seconds() / SECONDS_PER_DAY)
    raise LockPeriodActive(
        remaining_days=remaining_days,
        lock_end_date=lock_end,
        detail=(
            f'Withdrawal is locked for {remaining_days} more days. '
            f'Tokens can be withdrawn after {lock_end:%Y-%m-%d}.'
        ),
    )


def approve_withdrawal(withdrawal_id, action, admin, reason=''):
    """
    Approve or reject a PENDING withdrawal.

    Both outcomes require the lock period to have ended. Approval removes the
    reserved tokens from the user's holdings; rejection returns the reserved
    funds.
    """
    with transaction.atomic():
        withdrawal = get_object_or_404(
            WithdrawalRequest.objects.select_for_update(of=('self',)).select_related('user', 'transaction'),
            pk=withdrawal_id,
        )
        if withdrawal.status != WithdrawalRequest.Status.PENDING:
            raise ConflictError(f'Withdrawal is already {withdrawal.get_status_display().lower()}')

        check_lock_period(withdrawal)

        if action == 'approve':
            withdrawal.status = WithdrawalRequest.Status.APPROVED
            withdrawal.can_withdraw = True
            tx_status = Transaction.Status.COMPLETED
            # Reserved tokens leave the platform
            apply_ledger_delta(withdrawal.user_id, total_tokens=-withdrawal.token_amount)
        else:
            withdrawal.status = WithdrawalRequest.Status.REJECTED
            withdrawal.rejection_reason = reason or 'Rejected by admin'
            tx_status = Transaction.Status.FAILED
            apply_ledger_delta(
                withdrawal.user_id,
                available_tokens=withdrawal.token_amount,
                usdt_balance=withdrawal.amount if withdrawal.is_usdt else 0,
            )

        withdrawal.processed_at = timezone.now()
        withdrawal.processed_by = admin
        withdrawal.save()

        if withdrawal.transaction is not None:
            withdrawal.transaction.transition(tx_status, admin_notes=reason or None)

    logger.info(f"Admin {admin.email} {withdrawal.status.lower()} withdrawal {withdrawal.id}")
    notification_service.on_withdrawal_processed(withdrawal)
    return withdrawal


def refresh_withdrawal_eligibility(now=None):
    """Flag PENDING requests whose lock period has ended; returns the count"""
    now = now or timezone.now()
    updated = 0
    pending = WithdrawalRequest.objects.filter(
        status=WithdrawalRequest.Status.PENDING,
        can_withdraw=False,
    )
    for withdrawal in pending.iterator():
        if withdrawal.is_unlocked(now):
            WithdrawalRequest.objects.filter(pk=withdrawal.pk).update(can_withdraw=True)
            updated += 1
    return updated
