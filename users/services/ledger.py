# users/services/ledger.py
"""
Account ledger mutations.

Every balance change in the platform goes through ``apply_ledger_delta``.
It locks the user row for the rest of the surrounding transaction, checks
the resulting balances against the locked snapshot and only then writes all
deltas in a single UPDATE. Two concurrent requests for the same user
therefore serialise on the row lock, and the second one re-validates against
the first one's result instead of a stale read.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.exceptions import InsufficientFunds
from core.utils import to_decimal
from users.models import User

logger = logging.getLogger(__name__)

LEDGER_FIELDS = (
    'total_tokens',
    'available_tokens',
    'staked_tokens',
    'usdt_balance',
    'total_earnings',
    'referral_earnings',
)

NON_NEGATIVE_FIELDS = ('total_tokens', 'available_tokens', 'staked_tokens', 'usdt_balance')

INSUFFICIENT_MESSAGES = {
    'total_tokens': 'Insufficient DIT tokens.',
    'available_tokens': 'Insufficient available DIT tokens.',
    'staked_tokens': 'Insufficient staked DIT tokens.',
    'usdt_balance': 'Insufficient USDT balance.',
}


def lock_user(user_id):
    """Fetch the user row with a row lock held until the transaction ends"""
    return User.objects.select_for_update().get(pk=user_id)


def apply_ledger_delta(user_id, **deltas):
    """
    Apply balance deltas to one user atomically.

    Keyword arguments are ledger field names (see LEDGER_FIELDS) mapped to
    signed amounts. Must run inside ``transaction.atomic()``. Raises
    InsufficientFunds before any write if a balance would go negative or the
    token balances would become inconsistent.
    """
    unknown = set(deltas) - set(LEDGER_FIELDS)
    if unknown:
        raise ValueError(f"Unknown ledger fields: {', '.join(sorted(unknown))}")

    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError('apply_ledger_delta must be called inside transaction.atomic()')

    changes = {
        field: to_decimal(amount)
        for field, amount in deltas.items()
        if to_decimal(amount) != Decimal('0')
    }

    user = lock_user(user_id)
    if not changes:
        return user

    resulting = {
        field: getattr(user, field) + changes.get(field, Decimal('0'))
        for field in LEDGER_FIELDS
    }

    for field in NON_NEGATIVE_FIELDS:
        if resulting[field] < 0:
            logger.info(
                f"Rejected ledger delta for user {user_id}: {field} would be {resulting[field]}"
            )
            raise InsufficientFunds(INSUFFICIENT_MESSAGES[field])

    if resulting['available_tokens'] + resulting['staked_tokens'] > resulting['total_tokens']:
        raise InsufficientFunds('Token balances would exceed total DIT tokens.')

    update = {field: F(field) + amount for field, amount in changes.items()}
    update['updated_at'] = timezone.now()
    User.objects.filter(pk=user_id).update(**update)

    user.refresh_from_db(fields=list(changes) + ['updated_at'])
    return user
