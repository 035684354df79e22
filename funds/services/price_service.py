# funds/services/price_service.py
import logging

from django.conf import settings
from django.utils import timezone

from funds.models import TokenPrice

logger = logging.getLogger(__name__)


def get_price_quote():
    """
    Resolve the DIT price used for settlement.

    Order: today's recorded price, then the most recent recorded price,
    then the DIT_FALLBACK_PRICE constant.
    """
    today = timezone.localdate()

    todays_price = TokenPrice.objects.filter(date=today).first()
    if todays_price:
        return {'price': todays_price.price, 'date': todays_price.date, 'source': 'today'}

    latest_price = TokenPrice.objects.filter(date__lt=today).order_by('-date').first()
    if latest_price:
        return {'price': latest_price.price, 'date': latest_price.date, 'source': 'latest'}

    logger.warning(f"No token price recorded, using fallback ${settings.DIT_FALLBACK_PRICE}")
    return {'price': settings.DIT_FALLBACK_PRICE, 'date': None, 'source': 'fallback'}


def get_current_price():
    return get_price_quote()['price']


def set_token_price(price, date=None, updated_by=''):
    """Create or update the price for a calendar day; returns (price, created)"""
    target_date = date or timezone.localdate()
    token_price, created = TokenPrice.objects.update_or_create(
        date=target_date,
        defaults={'price': price, 'updated_by': updated_by},
    )
    action = 'created' if created else 'updated'
    logger.info(f"{updated_by or 'system'} {action} token price for {target_date}: ${price}")
    return token_price, created
