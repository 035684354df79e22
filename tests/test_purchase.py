"""Token purchase, payment confirmation, purchase from balance and manual deposits."""
from decimal import Decimal

import pytest

from core.exceptions import ConflictError
from funds.models import Transaction
from funds.services.purchase_service import calculate_processing_fee
from referrals.models import ReferralCommission

PURCHASE_URL = '/api/v1/tokens/purchase/'
CONFIRM_URL = '/api/v1/admin/payments/confirm/'


def open_purchase(client, amount='100', token_amount='35.71428571', method='credit_card'):
    return client.post(PURCHASE_URL, {
        'amount': amount,
        'tokenAmount': token_amount,
        'paymentMethod': method,
        'currentPrice': '2.80',
    }, format='json')


class TestProcessingFee:

    @pytest.mark.parametrize('method, expected', [
        ('credit_card', Decimal('2.50')),
        ('bank_transfer', Decimal('0.50')),
        ('crypto', Decimal('1.00')),
        ('paypal', Decimal('3.00')),
        ('carrier_pigeon', Decimal('2.50')),
    ])
    def test_fee_rate_per_payment_method(self, method, expected):
        assert calculate_processing_fee(Decimal('100'), method) == expected


@pytest.mark.django_db
class TestPurchase:

    def test_creates_pending_purchase_without_crediting(self, user_client, user, settings):
        response = open_purchase(user_client)

        assert response.status_code == 200
        assert response.data['status'] == Transaction.Status.PENDING
        assert response.data['processingFee'] == Decimal('2.50')
        assert response.data['walletAddress'] == settings.PAYMENT_WALLET_ADDRESS

        purchase = Transaction.objects.get(pk=response.data['transactionId'])
        assert purchase.reference_id.startswith('PUR-')
        user.refresh_from_db()
        assert user.total_tokens == Decimal('0')

    def test_minimum_purchase_amount(self, user_client):
        response = open_purchase(user_client, amount='9.99', token_amount='3')

        assert response.status_code == 400
        assert 'amount' in response.data['details']

    def test_zero_token_amount_is_rejected(self, user_client):
        response = open_purchase(user_client, token_amount='0')

        assert response.status_code == 400
        assert 'tokenAmount' in response.data['details']
        assert not Transaction.objects.exists()

    def test_confirmation_credits_tokens(self, user_client, admin_client, user):
        purchase_id = open_purchase(user_client).data['transactionId']

        response = admin_client.post(CONFIRM_URL, {'transactionId': purchase_id, 'action': 'confirm'}, format='json')

        assert response.status_code == 200
        user.refresh_from_db()
        assert user.total_tokens == Decimal('35.71428571')
        assert user.available_tokens == Decimal('35.71428571')
        purchase = Transaction.objects.get(pk=purchase_id)
        assert purchase.status == Transaction.Status.COMPLETED
        assert purchase.completed_at is not None

    def test_rejection_marks_failed_without_credit(self, user_client, admin_client, user):
        purchase_id = open_purchase(user_client).data['transactionId']

        response = admin_client.post(
            CONFIRM_URL,
            {'transactionId': purchase_id, 'action': 'reject', 'adminNotes': 'No payment received'},
            format='json'
        )

        assert response.status_code == 200
        assert Transaction.objects.get(pk=purchase_id).status == Transaction.Status.FAILED
        user.refresh_from_db()
        assert user.total_tokens == Decimal('0')

    def test_processed_purchase_cannot_be_processed_again(self, user_client, admin_client, user):
        purchase_id = open_purchase(user_client).data['transactionId']
        admin_client.post(CONFIRM_URL, {'transactionId': purchase_id, 'action': 'confirm'}, format='json')

        response = admin_client.post(CONFIRM_URL, {'transactionId': purchase_id, 'action': 'confirm'}, format='json')

        assert response.status_code == 409
        assert response.data['code'] == 'conflict'
        user.refresh_from_db()
        assert user.total_tokens == Decimal('35.71428571')

    def test_confirmation_records_referral_commission(self, client_for, admin_client, make_user):
        referrer = make_user(email='ref@example.com')
        buyer = make_user(email='buyer@example.com', referred_by=referrer)
        purchase_id = open_purchase(client_for(buyer), amount='200', token_amount='71.42857142').data['transactionId']

        admin_client.post(CONFIRM_URL, {'transactionId': purchase_id, 'action': 'confirm'}, format='json')

        commission = ReferralCommission.objects.get(referrer=referrer, referred_user=buyer)
        assert commission.amount == Decimal('10.00')
        referrer.refresh_from_db()
        assert referrer.usdt_balance == Decimal('0')

    def test_users_cannot_confirm_payments(self, user_client):
        response = user_client.post(CONFIRM_URL, {'transactionId': 1, 'action': 'confirm'}, format='json')
        assert response.status_code == 403


@pytest.mark.django_db
class TestPurchaseFromBalance:

    def test_debits_usdt_and_credits_tokens_at_current_price(self, user_client, user, fund):
        fund(user, usdt_balance=Decimal('100'))

        response = user_client.post('/api/v1/tokens/purchase-from-balance/', {'amount': '28'}, format='json')

        assert response.status_code == 200
        user.refresh_from_db()
        assert user.usdt_balance == Decimal('72.00')
        assert user.total_tokens == Decimal('10')
        assert user.available_tokens == Decimal('10')
        assert response.data['transaction']['status'] == Transaction.Status.COMPLETED

    def test_insufficient_usdt(self, user_client, user, fund):
        fund(user, usdt_balance=Decimal('20'))

        response = user_client.post('/api/v1/tokens/purchase-from-balance/', {'amount': '28'}, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'insufficient_funds'
        assert not Transaction.objects.filter(user=user).exists()


@pytest.mark.django_db
class TestManualDeposit:

    def test_admin_credits_usdt_balance(self, admin_client, user):
        response = admin_client.post(
            '/api/v1/admin/deposits/manual/',
            {'userId': str(user.id), 'amount': '150.25', 'notes': 'Bank wire'},
            format='json'
        )

        assert response.status_code == 200
        user.refresh_from_db()
        assert user.usdt_balance == Decimal('150.25')
        deposit = Transaction.objects.get(user=user, transaction_type=Transaction.Type.DEPOSIT)
        assert deposit.status == Transaction.Status.COMPLETED
        assert deposit.reference_id.startswith('DEP-')

    def test_unknown_user_is_404(self, admin_client):
        response = admin_client.post(
            '/api/v1/admin/deposits/manual/',
            {'userId': '00000000-0000-0000-0000-000000000000', 'amount': '10'},
            format='json'
        )

        assert response.status_code == 404


@pytest.mark.django_db
class TestTransactionHistory:

    def test_own_transactions_filtered_by_type(self, user_client, user, make_user):
        other = make_user(email='other@example.com')
        Transaction.objects.create(user=user, transaction_type=Transaction.Type.DEPOSIT, amount=Decimal('10'))
        Transaction.objects.create(user=user, transaction_type=Transaction.Type.SALE, amount=Decimal('5'))
        Transaction.objects.create(user=other, transaction_type=Transaction.Type.DEPOSIT, amount=Decimal('7'))

        response = user_client.get('/api/v1/transactions/', {'transaction_type': 'DEPOSIT'})

        assert response.status_code == 200
        assert response.data['pagination']['total'] == 1
        assert response.data['items'][0]['type'] == Transaction.Type.DEPOSIT
        assert response.data['items'][0]['referenceId'].startswith('DEP-')

    def test_terminal_transaction_status_is_final(self, user):
        deposit = Transaction.objects.create(
            user=user,
            transaction_type=Transaction.Type.DEPOSIT,
            amount=Decimal('10'),
            status=Transaction.Status.COMPLETED,
        )

        with pytest.raises(ConflictError, match='Transaction is already completed'):
            deposit.transition(Transaction.Status.FAILED)
