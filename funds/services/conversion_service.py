# funds/services/conversion_service.py
import logging

from django.conf import settings
from django.db import transaction
from rest_framework.exceptions import ValidationError

from core.utils import quantize_tokens, quantize_usd, to_decimal
from funds.models import Transaction
from funds.services.price_service import get_current_price
from notifications.services.notification_service import notification_service
from users.services.ledger import apply_ledger_delta

logger = logging.getLogger(__name__)


def convert(user_id, token_amount):
    """
    Sell available DIT for USDT at the current price.

    Returns (sale transaction, refreshed user).
    """
    token_amount = quantize_tokens(to_decimal(token_amount))
    if token_amount < settings.MIN_CONVERSION_TOKENS:
        raise ValidationError({
            'tokenAmount': [f'Minimum conversion is {settings.MIN_CONVERSION_TOKENS} DIT token']
        })

    price = get_current_price()
    usdt_amount = quantize_usd(token_amount * price)

    with transaction.atomic():
        user = apply_ledger_delta(
            user_id,
            total_tokens=-token_amount,
            available_tokens=-token_amount,
            usdt_balance=usdt_amount,
        )
        sale = Transaction.objects.create(
            user=user,
            transaction_type=Transaction.Type.SALE,
            amount=usdt_amount,
            token_amount=token_amount,
            price_per_token=price,
            status=Transaction.Status.COMPLETED,
            payment_method='internal_conversion',
            description=f'Converted {token_amount:f} DIT to {usdt_amount:.2f} USDT',
        )

    logger.info(f"{user.email} converted {token_amount} DIT to ${usdt_amount}")
    notification_service.on_conversion(sale)
    return sale, user
