# funds/services/purchase_service.py
import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework.exceptions import ValidationError

from core.utils import quantize_tokens, quantize_usd, to_decimal
from funds.models import Transaction
from funds.services.price_service import get_current_price
from notifications.services.notification_service import notification_service
from referrals.services.commission_service import record_purchase_commission
from users.models import User
from users.services.ledger import apply_ledger_delta

logger = logging.getLogger(__name__)


def calculate_processing_fee(amount, payment_method):
    rate = settings.PROCESSING_FEE_RATES.get(payment_method, settings.DEFAULT_PROCESSING_FEE_RATE)
    return quantize_usd(to_decimal(amount) * to_decimal(rate) / Decimal('100'))


def _check_minimum_purchase(amount):
    if amount < settings.MIN_PURCHASE_AMOUNT:
        raise ValidationError({'amount': [f'Minimum purchase amount is ${settings.MIN_PURCHASE_AMOUNT}']})


def create_purchase(user, amount, token_amount, payment_method, current_price):
    """
    Open a PENDING purchase awaiting external payment.

    Tokens are credited only when an admin confirms the payment.
    """
    amount = quantize_usd(amount)
    _check_minimum_purchase(amount)

    purchase = Transaction.objects.create(
        user=user,
        transaction_type=Transaction.Type.PURCHASE,
        amount=amount,
        token_amount=quantize_tokens(token_amount),
        price_per_token=to_decimal(current_price),
        status=Transaction.Status.PENDING,
        payment_method=payment_method,
        processing_fee=calculate_processing_fee(amount, payment_method),
        wallet_address=settings.PAYMENT_WALLET_ADDRESS,
        description=f'Purchase of {quantize_tokens(token_amount):f} DIT tokens via {payment_method}',
    )
    logger.info(f"Purchase {purchase.reference_id} opened by {user.email} for ${amount}")

    notification_service.on_token_purchase_pending(purchase)
    return purchase


def confirm_payment(transaction_id, action, admin, admin_notes=''):
    """Confirm or reject a PENDING purchase; confirmation credits the tokens"""
    with transaction.atomic():
        purchase = get_object_or_404(
            Transaction.objects.select_for_update().select_related('user'),
            pk=transaction_id,
            transaction_type=Transaction.Type.PURCHASE,
        )

        if action == 'confirm':
            purchase.transition(Transaction.Status.COMPLETED, admin_notes=admin_notes)
            apply_ledger_delta(
                purchase.user_id,
                total_tokens=purchase.token_amount,
                available_tokens=purchase.token_amount,
            )
            record_purchase_commission(purchase)
        else:
            purchase.transition(Transaction.Status.FAILED, admin_notes=admin_notes)

    logger.info(f"Admin {admin.email} {action}ed payment {purchase.reference_id}")

    if purchase.status == Transaction.Status.COMPLETED:
        notification_service.on_token_purchase(purchase)
    else:
        notification_service.on_token_purchase_rejected(purchase, admin_notes or 'Payment not received')

    return purchase


def purchase_from_balance(user_id, amount):
    """Buy DIT with the user's USDT balance at the current price"""
    amount = quantize_usd(amount)
    _check_minimum_purchase(amount)

    price = get_current_price()
    token_amount = quantize_tokens(amount / price)

    with transaction.atomic():
        user = apply_ledger_delta(
            user_id,
            usdt_balance=-amount,
            total_tokens=token_amount,
            available_tokens=token_amount,
        )
        purchase = Transaction.objects.create(
            user=user,
            transaction_type=Transaction.Type.PURCHASE,
            amount=amount,
            token_amount=token_amount,
            price_per_token=price,
            status=Transaction.Status.COMPLETED,
            payment_method='usdt_balance',
            description=f'Purchase of {token_amount:f} DIT tokens from USDT balance',
        )
        record_purchase_commission(purchase)

    logger.info(f"{user.email} bought {token_amount} DIT from balance for ${amount}")
    notification_service.on_token_purchase(purchase)
    return purchase, user


def manual_deposit(user_id, amount, admin, notes=''):
    """Credit USDT to a user's balance by hand"""
    amount = quantize_usd(amount)
    if amount <= 0:
        raise ValidationError({'amount': ['Amount must be greater than zero']})

    with transaction.atomic():
        target = get_object_or_404(User, pk=user_id)
        user = apply_ledger_delta(target.pk, usdt_balance=amount)
        deposit = Transaction.objects.create(
            user=user,
            transaction_type=Transaction.Type.DEPOSIT,
            amount=amount,
            status=Transaction.Status.COMPLETED,
            payment_method='manual',
            description=notes or 'Manual USDT deposit',
            admin_notes=f'Credited by {admin.email}',
        )

    logger.info(f"Admin {admin.email} deposited ${amount} to {user.email}")
    notification_service.on_deposit(deposit)
    return deposit, user
