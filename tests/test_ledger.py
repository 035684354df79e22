"""Account ledger: atomic, validated balance deltas."""
from decimal import Decimal

import pytest
from django.db import transaction

from core.exceptions import InsufficientFunds
from users.services.ledger import apply_ledger_delta


@pytest.mark.django_db
class TestApplyLedgerDelta:

    def test_applies_all_deltas_in_one_update(self, user, fund):
        fund(user, total_tokens=Decimal('100'), available_tokens=Decimal('100'))

        with transaction.atomic():
            updated = apply_ledger_delta(
                user.id,
                available_tokens=Decimal('-40'),
                staked_tokens=Decimal('40'),
                usdt_balance=Decimal('12.50'),
            )

        assert updated.available_tokens == Decimal('60')
        assert updated.staked_tokens == Decimal('40')
        assert updated.total_tokens == Decimal('100')
        assert updated.usdt_balance == Decimal('12.50')

    def test_rejects_negative_result_before_any_write(self, user, fund):
        fund(user, total_tokens=Decimal('10'), available_tokens=Decimal('10'), usdt_balance=Decimal('5'))

        with pytest.raises(InsufficientFunds):
            with transaction.atomic():
                apply_ledger_delta(user.id, usdt_balance=Decimal('100'), available_tokens=Decimal('-11'))

        user.refresh_from_db()
        assert user.available_tokens == Decimal('10')
        assert user.usdt_balance == Decimal('5')

    def test_rejects_tokens_exceeding_total(self, user, fund):
        fund(user, total_tokens=Decimal('10'), available_tokens=Decimal('10'))

        with pytest.raises(InsufficientFunds):
            with transaction.atomic():
                apply_ledger_delta(user.id, staked_tokens=Decimal('1'))

    def test_unknown_field_is_a_programming_error(self, user):
        with pytest.raises(ValueError):
            with transaction.atomic():
                apply_ledger_delta(user.id, balance=Decimal('1'))

    def test_zero_deltas_leave_row_untouched(self, user):
        with transaction.atomic():
            unchanged = apply_ledger_delta(user.id, usdt_balance=0)

        assert unchanged.usdt_balance == Decimal('0')
