"""Staking: locking available tokens and releasing matured stakes."""
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.utils import timezone

from core.tasks import complete_matured_stakes
from core.utils import add_years
from funds.models import Transaction
from staking.models import StakingRecord
from staking.services.staking_service import create_stake

STAKE_URL = '/api/v1/tokens/stake/'


@pytest.fixture
def holder(user, fund):
    return fund(user, total_tokens=Decimal('100'), available_tokens=Decimal('100'))


class TestAddYears:

    def test_calendar_years(self):
        start = datetime(2024, 5, 17, 9, 30, tzinfo=dt_timezone.utc)
        assert add_years(start, 3) == datetime(2027, 5, 17, 9, 30, tzinfo=dt_timezone.utc)

    def test_leap_day_rolls_to_march_first(self):
        start = datetime(2024, 2, 29, tzinfo=dt_timezone.utc)
        assert add_years(start, 3) == datetime(2027, 3, 1, tzinfo=dt_timezone.utc)


@pytest.mark.django_db
class TestStake:

    def test_moves_available_to_staked(self, user_client, holder):
        response = user_client.post(STAKE_URL, {'amount': '40'}, format='json')

        assert response.status_code == 200
        assert response.data['apy'] == Decimal('12.5')
        holder.refresh_from_db()
        assert holder.available_tokens == Decimal('60')
        assert holder.staked_tokens == Decimal('40')
        assert holder.total_tokens == Decimal('100')

        record = StakingRecord.objects.get(pk=response.data['stakingId'])
        assert record.status == StakingRecord.Status.ACTIVE
        assert record.end_date == add_years(record.start_date, 3)

        stake_tx = Transaction.objects.get(user=holder, transaction_type=Transaction.Type.STAKE)
        assert stake_tx.amount == Decimal('0')
        assert stake_tx.token_amount == Decimal('40')
        assert stake_tx.status == Transaction.Status.COMPLETED

    def test_insufficient_available_tokens_changes_nothing(self, user_client, holder):
        response = user_client.post(STAKE_URL, {'amount': '100.00000001'}, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'insufficient_funds'
        holder.refresh_from_db()
        assert holder.available_tokens == Decimal('100')
        assert holder.staked_tokens == Decimal('0')
        assert not StakingRecord.objects.exists()

    def test_staking_records_are_paginated(self, user_client, holder):
        for _ in range(3):
            user_client.post(STAKE_URL, {'amount': '1'}, format='json')

        response = user_client.get('/api/v1/tokens/staking/', {'limit': 2})

        assert response.status_code == 200
        assert len(response.data['items']) == 2
        assert response.data['pagination'] == {'page': 1, 'limit': 2, 'total': 3, 'pages': 2}


@pytest.mark.django_db
class TestCompleteMaturedStakes:

    def test_matured_stake_returns_to_available(self, holder):
        record = create_stake(holder.id, Decimal('30'))
        StakingRecord.objects.filter(pk=record.pk).update(end_date=timezone.now() - timedelta(minutes=1))

        assert complete_matured_stakes.delay().get() == 1

        record.refresh_from_db()
        holder.refresh_from_db()
        assert record.status == StakingRecord.Status.COMPLETED
        assert record.completed_at is not None
        assert holder.staked_tokens == Decimal('0')
        assert holder.available_tokens == Decimal('100')

    def test_active_stake_is_left_alone(self, holder):
        create_stake(holder.id, Decimal('30'))

        assert complete_matured_stakes.delay().get() == 0

        holder.refresh_from_db()
        assert holder.staked_tokens == Decimal('30')
