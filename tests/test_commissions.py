"""Referral commission engine and the admin approval state machine."""
from decimal import Decimal

import pytest
from django.utils import timezone

from funds.models import Transaction
from referrals.models import CommissionStatus, ReferralCommission
from referrals.services.commission_service import record_commission, register_referral, update_referral_rate

APPROVE_URL = '/api/v1/admin/commissions/approve/'


@pytest.fixture
def referral_pair(make_user):
    referrer = make_user(email='referrer@example.com', name='Referrer')
    referred = make_user(email='referred@example.com', name='Referred', referred_by=referrer)
    return referrer, referred


def record(referrer, referred, amount, tokens='10', price='2.80'):
    return record_commission(referrer.id, referred.id, Decimal(amount), Decimal(tokens), Decimal(price))


@pytest.mark.django_db
class TestRecordCommission:

    def test_five_percent_of_purchase_without_balance_effect(self, referral_pair):
        referrer, referred = referral_pair

        commission = record(referrer, referred, '100')

        assert commission.amount == Decimal('5.00')
        assert commission.token_amount == Decimal('0.5')
        assert commission.status == CommissionStatus.PENDING
        today = timezone.localdate()
        assert (commission.month, commission.year) == (today.month, today.year)
        referrer.refresh_from_db()
        assert referrer.usdt_balance == Decimal('0')
        assert referrer.referral_earnings == Decimal('0')

    def test_purchases_in_same_month_accumulate(self, referral_pair):
        referrer, referred = referral_pair

        record(referrer, referred, '100')
        record(referrer, referred, '100')
        commission = record(referrer, referred, '100')

        assert ReferralCommission.objects.count() == 1
        assert commission.amount == Decimal('15.00')

    def test_rate_comes_from_settings(self, referral_pair):
        referrer, referred = referral_pair
        update_referral_rate(Decimal('10'), 'root@ditokens.test')

        assert record(referrer, referred, '100').amount == Decimal('10.00')

    def test_closed_bucket_is_not_reopened(self, referral_pair, admin):
        referrer, referred = referral_pair
        commission = record(referrer, referred, '100')
        commission.approve(admin)

        assert record(referrer, referred, '100') is None
        commission.refresh_from_db()
        assert commission.amount == Decimal('5.00')


@pytest.mark.django_db
class TestCommissionApproval:

    def test_approval_credits_referrer_once(self, admin_client, referral_pair):
        referrer, referred = referral_pair
        commission = record(referrer, referred, '100')

        response = admin_client.post(APPROVE_URL, {'commissionId': commission.id, 'action': 'approve'}, format='json')

        assert response.status_code == 200
        referrer.refresh_from_db()
        assert referrer.referral_earnings == Decimal('5.00')
        assert referrer.total_earnings == Decimal('5.00')
        assert referrer.usdt_balance == Decimal('5.00')
        payout = Transaction.objects.get(user=referrer, transaction_type=Transaction.Type.REFERRAL_COMMISSION)
        assert payout.status == Transaction.Status.COMPLETED
        assert payout.amount == Decimal('5.00')

    def test_second_approval_conflicts_and_does_not_double_pay(self, admin_client, referral_pair):
        referrer, referred = referral_pair
        commission = record(referrer, referred, '100')
        admin_client.post(APPROVE_URL, {'commissionId': commission.id, 'action': 'approve'}, format='json')

        response = admin_client.post(APPROVE_URL, {'commissionId': commission.id, 'action': 'approve'}, format='json')

        assert response.status_code == 409
        assert response.data['error'] == 'Commission is already approved'
        referrer.refresh_from_db()
        assert referrer.usdt_balance == Decimal('5.00')
        assert Transaction.objects.filter(user=referrer).count() == 1

    def test_rejection_has_no_balance_effect(self, admin_client, referral_pair):
        referrer, referred = referral_pair
        commission = record(referrer, referred, '100')

        response = admin_client.post(
            APPROVE_URL,
            {'commissionId': commission.id, 'action': 'reject', 'rejectionReason': 'Self-referral'},
            format='json'
        )

        assert response.status_code == 200
        commission.refresh_from_db()
        assert commission.status == CommissionStatus.REJECTED
        assert commission.rejection_reason == 'Self-referral'
        assert commission.rejected_at is not None
        referrer.refresh_from_db()
        assert referrer.usdt_balance == Decimal('0')

    def test_rejected_commission_cannot_be_approved(self, admin_client, referral_pair):
        referrer, referred = referral_pair
        commission = record(referrer, referred, '100')
        admin_client.post(APPROVE_URL, {'commissionId': commission.id, 'action': 'reject'}, format='json')

        response = admin_client.post(APPROVE_URL, {'commissionId': commission.id, 'action': 'approve'}, format='json')

        assert response.status_code == 409

    def test_empty_bucket_cannot_be_approved(self, admin_client, referral_pair):
        referrer, referred = referral_pair
        bucket = register_referral(referrer, referred)

        response = admin_client.post(APPROVE_URL, {'commissionId': bucket.id, 'action': 'approve'}, format='json')

        assert response.status_code == 409
        assert not Transaction.objects.filter(user=referrer).exists()
        bucket.refresh_from_db()
        assert bucket.status == CommissionStatus.PENDING

    def test_empty_bucket_keeps_accumulating_after_refused_approval(self, admin_client, referral_pair):
        referrer, referred = referral_pair
        bucket = register_referral(referrer, referred)
        admin_client.post(APPROVE_URL, {'commissionId': bucket.id, 'action': 'approve'}, format='json')

        commission = record(referrer, referred, '100')

        assert commission.id == bucket.id
        assert commission.amount == Decimal('5.00')

    def test_unknown_commission_is_not_found(self, admin_client):
        response = admin_client.post(APPROVE_URL, {'commissionId': 999999, 'action': 'approve'}, format='json')

        assert response.status_code == 404

    def test_admin_queue_filters_by_status(self, admin_client, referral_pair):
        referrer, referred = referral_pair
        record(referrer, referred, '100')

        response = admin_client.get('/api/v1/admin/commissions/', {'status': 'PENDING'})

        assert response.status_code == 200
        assert response.data['pagination']['total'] == 1
        assert response.data['items'][0]['referrer']['email'] == referrer.email


@pytest.mark.django_db
class TestReferralStats:

    def test_stats_for_referrer(self, client_for, referral_pair):
        referrer, referred = referral_pair
        record(referrer, referred, '100')

        response = client_for(referrer).get('/api/v1/referrals/')

        assert response.status_code == 200
        assert response.data['referralCode'] == referrer.referral_code
        assert response.data['totalReferrals'] == 1
        assert response.data['pendingCommission'] == Decimal('5.00')
        assert response.data['approvedCommission'] == 0

    def test_referred_users_list(self, client_for, referral_pair):
        referrer, referred = referral_pair

        response = client_for(referrer).get('/api/v1/referrals/referred-users/')

        assert response.status_code == 200
        assert [item['email'] for item in response.data['items']] == [referred.email]


@pytest.mark.django_db
class TestCommissionSettings:

    def test_admin_reads_and_updates_rate(self, admin_client):
        assert admin_client.get('/api/v1/admin/commission-settings/').data['referralRate'] == '5.00'

        response = admin_client.put('/api/v1/admin/commission-settings/', {'referralRate': '7.5'}, format='json')

        assert response.status_code == 200
        assert response.data['referralRate'] == '7.50'
        assert response.data['updatedBy'] == 'admin@ditokens.test'

    def test_rate_above_100_is_rejected(self, admin_client):
        response = admin_client.put('/api/v1/admin/commission-settings/', {'referralRate': '150'}, format='json')
        assert response.status_code == 400
