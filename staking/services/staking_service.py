# staking/services/staking_service.py
import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from core.utils import add_years, quantize_tokens, to_decimal
from funds.models import Transaction
from notifications.services.notification_service import notification_service
from staking.models import StakingRecord
from users.services.ledger import apply_ledger_delta

logger = logging.getLogger(__name__)


def create_stake(user_id, amount):
    """
    Move available tokens into a fixed-term stake.

    Returns the new StakingRecord; balances are unchanged if the user does
    not have enough available tokens.
    """
    amount = quantize_tokens(to_decimal(amount))
    if amount <= 0:
        raise ValidationError({'amount': ['Stake amount must be greater than zero']})

    start_date = timezone.now()
    end_date = add_years(start_date, settings.STAKING_TERM_YEARS)

    with transaction.atomic():
        user = apply_ledger_delta(
            user_id,
            available_tokens=-amount,
            staked_tokens=amount,
        )
        record = StakingRecord.objects.create(
            user=user,
            amount=amount,
            start_date=start_date,
            end_date=end_date,
            apy=settings.STAKING_APY,
        )
        Transaction.objects.create(
            user=user,
            transaction_type=Transaction.Type.STAKE,
            amount=0,
            token_amount=amount,
            status=Transaction.Status.COMPLETED,
            payment_method='staking',
            description=f'Staked {amount:f} DIT tokens for {settings.STAKING_TERM_YEARS} years',
        )

    logger.info(f"{user.email} staked {amount} DIT until {end_date:%Y-%m-%d}")
    notification_service.on_stake(record)
    return record


def complete_stake(record_id, now=None):
    """Release one matured stake back to available tokens"""
    now = now or timezone.now()

    with transaction.atomic():
        record = StakingRecord.objects.select_for_update().select_related('user').get(pk=record_id)
        if record.status != StakingRecord.Status.ACTIVE or record.end_date > now:
            return None

        apply_ledger_delta(
            record.user_id,
            staked_tokens=-record.amount,
            available_tokens=record.amount,
        )
        record.status = StakingRecord.Status.COMPLETED
        record.completed_at = now
        record.save(update_fields=['status', 'completed_at'])

    logger.info(f"Completed stake {record.id}: {record.amount} DIT released to {record.user.email}")
    notification_service.on_stake_completed(record)
    return record


def complete_matured_stakes(now=None):
    """Complete every ACTIVE stake whose end date has passed; returns the count"""
    now = now or timezone.now()
    matured_ids = list(
        StakingRecord.objects.filter(
            status=StakingRecord.Status.ACTIVE,
            end_date__lte=now,
        ).values_list('id', flat=True)
    )

    completed = 0
    for record_id in matured_ids:
        if complete_stake(record_id, now=now):
            completed += 1
    return completed
