"""Withdrawal requests and the lock-period approval gate."""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from core.exceptions import LockPeriodActive
from funds.models import Transaction, WithdrawalRequest
from funds.services import withdrawal_service
from funds.services.withdrawal_service import check_lock_period, refresh_withdrawal_eligibility

APPROVE_URL = '/api/v1/admin/withdrawals/approve/'


def age(withdrawal, days):
    """Backdate a request's creation time"""
    WithdrawalRequest.objects.filter(pk=withdrawal.pk).update(created_at=timezone.now() - timedelta(days=days))
    withdrawal.refresh_from_db()
    return withdrawal


@pytest.fixture
def usdt_holder(user, fund):
    return fund(user, usdt_balance=Decimal('100'))


@pytest.fixture
def usdt_withdrawal(user_client, usdt_holder):
    response = user_client.post(
        '/api/v1/usdt/withdraw/',
        {'amount': '40', 'walletAddress': 'TXyz123'},
        format='json'
    )
    return WithdrawalRequest.objects.get(pk=response.data['withdrawalRequest']['id'])


@pytest.mark.django_db
class TestUsdtWithdrawal:

    def test_reserves_usdt_and_opens_pending_request(self, usdt_withdrawal, usdt_holder):
        usdt_holder.refresh_from_db()
        assert usdt_holder.usdt_balance == Decimal('60.00')
        assert usdt_withdrawal.status == WithdrawalRequest.Status.PENDING
        assert usdt_withdrawal.network == 'USDT'
        assert usdt_withdrawal.lock_period_days == 1095
        assert usdt_withdrawal.transaction.status == Transaction.Status.PENDING
        assert usdt_withdrawal.transaction.reference_id.startswith('WDR-')

    def test_minimum_amount(self, user_client, usdt_holder):
        response = user_client.post('/api/v1/usdt/withdraw/', {'amount': '5', 'walletAddress': 'TXyz'}, format='json')
        assert response.status_code == 400

    def test_insufficient_balance(self, user_client, usdt_holder):
        response = user_client.post('/api/v1/usdt/withdraw/', {'amount': '500', 'walletAddress': 'TXyz'}, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'insufficient_funds'
        assert not WithdrawalRequest.objects.exists()

    def test_own_requests_listed(self, user_client, usdt_withdrawal):
        response = user_client.get('/api/v1/usdt/withdrawals/')

        assert response.status_code == 200
        assert [item['id'] for item in response.data['items']] == [usdt_withdrawal.id]


@pytest.mark.django_db
class TestLockGate:

    def test_remaining_days_rounds_up(self, usdt_withdrawal):
        now = usdt_withdrawal.created_at + timedelta(days=1094, hours=1)

        with pytest.raises(LockPeriodActive) as excinfo:
            check_lock_period(usdt_withdrawal, now=now)

        assert excinfo.value.remaining_days == 1
        assert excinfo.value.lock_end_date == usdt_withdrawal.created_at + timedelta(days=1095)

    def test_unlocks_exactly_at_lock_end(self, usdt_withdrawal):
        check_lock_period(usdt_withdrawal, now=usdt_withdrawal.created_at + timedelta(days=1095))

    def test_approval_during_lock_is_refused(self, admin_client, usdt_withdrawal):
        response = admin_client.post(APPROVE_URL, {'withdrawalId': usdt_withdrawal.id, 'action': 'approve'}, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'lock_period_active'
        assert response.data['remainingDays'] == 1095
        assert 'lockEndDate' in response.data
        usdt_withdrawal.refresh_from_db()
        assert usdt_withdrawal.status == WithdrawalRequest.Status.PENDING

    def test_approval_after_lock(self, admin_client, usdt_withdrawal):
        age(usdt_withdrawal, 1096)

        response = admin_client.post(APPROVE_URL, {'withdrawalId': usdt_withdrawal.id, 'action': 'approve'}, format='json')

        assert response.status_code == 200
        usdt_withdrawal.refresh_from_db()
        assert usdt_withdrawal.status == WithdrawalRequest.Status.APPROVED
        assert usdt_withdrawal.can_withdraw is True
        assert usdt_withdrawal.processed_at is not None
        assert usdt_withdrawal.transaction.status == Transaction.Status.COMPLETED

    def test_processed_request_conflicts_before_lock_check(self, admin_client, usdt_withdrawal):
        WithdrawalRequest.objects.filter(pk=usdt_withdrawal.pk).update(status=WithdrawalRequest.Status.REJECTED)

        response = admin_client.post(APPROVE_URL, {'withdrawalId': usdt_withdrawal.id, 'action': 'approve'}, format='json')

        assert response.status_code == 409

    def test_rejection_during_lock_is_refused(self, admin_client, usdt_withdrawal, usdt_holder):
        response = admin_client.post(APPROVE_URL, {'withdrawalId': usdt_withdrawal.id, 'action': 'reject'}, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'lock_period_active'
        usdt_withdrawal.refresh_from_db()
        assert usdt_withdrawal.status == WithdrawalRequest.Status.PENDING
        usdt_holder.refresh_from_db()
        assert usdt_holder.usdt_balance == Decimal('60.00')

    def test_rejection_restores_usdt(self, admin_client, usdt_withdrawal, usdt_holder):
        age(usdt_withdrawal, 1095)

        response = admin_client.post(
            APPROVE_URL,
            {'withdrawalId': usdt_withdrawal.id, 'action': 'reject', 'reason': 'Wrong network'},
            format='json'
        )

        assert response.status_code == 200
        usdt_holder.refresh_from_db()
        assert usdt_holder.usdt_balance == Decimal('100.00')
        usdt_withdrawal.refresh_from_db()
        assert usdt_withdrawal.rejection_reason == 'Wrong network'
        assert usdt_withdrawal.transaction.status == Transaction.Status.FAILED

    def test_eligibility_refresh_flags_unlocked_requests(self, usdt_withdrawal):
        assert refresh_withdrawal_eligibility() == 0

        age(usdt_withdrawal, 1095)

        assert refresh_withdrawal_eligibility() == 1
        usdt_withdrawal.refresh_from_db()
        assert usdt_withdrawal.can_withdraw is True


@pytest.mark.django_db
class TestTokenWithdrawal:

    @pytest.fixture
    def token_holder(self, user, fund):
        return fund(user, total_tokens=Decimal('100'), available_tokens=Decimal('100'))

    def request_withdrawal(self, client, amount='28'):
        return client.post(
            '/api/v1/tokens/withdraw/',
            {'amount': amount, 'network': 'BEP20', 'walletAddress': '0xabc'},
            format='json'
        )

    def test_reserves_token_equivalent(self, user_client, token_holder):
        response = self.request_withdrawal(user_client)

        assert response.status_code == 200
        assert Decimal(response.data['withdrawalRequest']['tokenAmount']) == Decimal('10')
        token_holder.refresh_from_db()
        assert token_holder.available_tokens == Decimal('90')
        assert token_holder.total_tokens == Decimal('100')

    def test_one_pending_token_withdrawal_at_a_time(self, user_client, token_holder):
        self.request_withdrawal(user_client)

        response = self.request_withdrawal(user_client)

        assert response.status_code == 409

    def test_checks_tokens_not_usd_amount(self, user_client, token_holder):
        # $280 at $2.80 needs exactly the 100 tokens held
        assert self.request_withdrawal(user_client, amount='280').status_code == 200

    def test_rejection_restores_tokens(self, user_client, admin_client, token_holder):
        withdrawal_id = self.request_withdrawal(user_client).data['withdrawalRequest']['id']
        age(WithdrawalRequest.objects.get(pk=withdrawal_id), 1095)

        admin_client.post(APPROVE_URL, {'withdrawalId': withdrawal_id, 'action': 'reject'}, format='json')

        token_holder.refresh_from_db()
        assert token_holder.available_tokens == Decimal('100')
        assert token_holder.total_tokens == Decimal('100')

    def test_approval_removes_tokens_from_holdings(self, user_client, admin_client, token_holder):
        withdrawal_id = self.request_withdrawal(user_client).data['withdrawalRequest']['id']
        age(WithdrawalRequest.objects.get(pk=withdrawal_id), 1095)

        response = admin_client.post(APPROVE_URL, {'withdrawalId': withdrawal_id, 'action': 'approve'}, format='json')

        assert response.status_code == 200
        token_holder.refresh_from_db()
        assert token_holder.available_tokens == Decimal('90')
        assert token_holder.total_tokens == Decimal('90')

    def test_pending_check_holds_the_user_row_lock(self, user_client, token_holder, monkeypatch):
        calls = []
        real_lock_user = withdrawal_service.lock_user

        def recording_lock_user(user_id):
            calls.append(WithdrawalRequest.objects.filter(user_id=user_id).count())
            return real_lock_user(user_id)

        monkeypatch.setattr(withdrawal_service, 'lock_user', recording_lock_user)

        self.request_withdrawal(user_client)

        # Locked before the pending lookup, while no request exists yet
        assert calls == [0]
