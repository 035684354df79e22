# funds/views.py
import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsAdminRole, IsSuperAdmin
from funds.models import TokenPrice, Transaction, WithdrawalRequest
from funds.serializers import (
    AdminTransactionSerializer, ConversionSerializer, ManualDepositSerializer,
    PaymentConfirmationSerializer, PurchaseFromBalanceSerializer, PurchaseSerializer,
    SetTokenPriceSerializer, TokenPriceSerializer, TokenWithdrawalSerializer,
    TransactionSerializer, UsdtWithdrawalSerializer, WithdrawalApprovalSerializer,
    WithdrawalRequestSerializer
)
from funds.services import conversion_service, purchase_service, withdrawal_service
from funds.services.price_service import get_price_quote, set_token_price
from users.serializers import UserSerializer

logger = logging.getLogger(__name__)


class CurrentPriceView(APIView):
    """Current DIT price with the source it was resolved from"""
    permission_classes = [AllowAny]

    def get(self, request):
        quote = get_price_quote()
        return Response({
            'price': quote['price'],
            'source': quote['source'],
            'date': quote['date'],
        })


class AdminTokenPriceView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin]

    def get(self, request):
        prices = TokenPrice.objects.order_by('-date')[:100]
        return Response({'prices': TokenPriceSerializer(prices, many=True).data})

    def post(self, request):
        serializer = SetTokenPriceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        token_price, created = set_token_price(
            serializer.validated_data['price'],
            date=serializer.validated_data.get('date'),
            updated_by=request.user.email,
        )
        return Response(
            TokenPriceSerializer(token_price).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )


class PurchaseView(APIView):
    """Start a token purchase paid outside the platform"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = PurchaseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        purchase = purchase_service.create_purchase(request.user, **serializer.validated_data)

        return Response({
            'transactionId': purchase.id,
            'referenceId': purchase.reference_id,
            'amount': purchase.amount,
            'tokenAmount': purchase.token_amount,
            'processingFee': purchase.processing_fee,
            'walletAddress': purchase.wallet_address,
            'status': purchase.status,
        })


class PurchaseFromBalanceView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = PurchaseFromBalanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        purchase, user = purchase_service.purchase_from_balance(
            request.user.id,
            serializer.validated_data['amount']
        )

        return Response({
            'transaction': TransactionSerializer(purchase).data,
            'user': UserSerializer(user).data,
        })


class PaymentConfirmationView(APIView):
    """Admin confirmation or rejection of a pending purchase payment"""
    permission_classes = [IsAuthenticated, IsAdminRole]

    def post(self, request):
        serializer = PaymentConfirmationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        purchase = purchase_service.confirm_payment(
            serializer.validated_data['transaction_id'],
            serializer.validated_data['action'],
            request.user,
            serializer.validated_data['admin_notes'],
        )

        return Response({
            'message': f'Payment {serializer.validated_data["action"]}ed',
            'transaction': AdminTransactionSerializer(purchase).data,
        })


class ManualDepositView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def post(self, request):
        serializer = ManualDepositSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        deposit, user = purchase_service.manual_deposit(
            serializer.validated_data['user_id'],
            serializer.validated_data['amount'],
            request.user,
            serializer.validated_data['notes'],
        )

        return Response({
            'transaction': AdminTransactionSerializer(deposit).data,
            'usdtBalance': user.usdt_balance,
        })


class ConvertToUsdtView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ConversionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        sale, user = conversion_service.convert(
            request.user.id,
            serializer.validated_data['token_amount']
        )

        return Response({
            'message': 'Tokens converted to USDT',
            'conversion': {
                'tokenAmount': sale.token_amount,
                'usdtAmount': sale.amount,
                'currentPrice': sale.price_per_token,
                'newUsdtBalance': user.usdt_balance,
                'newAvailableTokens': user.available_tokens,
            },
        })


class UsdtWithdrawView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = UsdtWithdrawalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        withdrawal = withdrawal_service.request_usdt_withdrawal(
            request.user.id,
            serializer.validated_data['amount'],
            serializer.validated_data['wallet_address'],
        )

        return Response({
            'message': 'Withdrawal request submitted',
            'withdrawalRequest': WithdrawalRequestSerializer(withdrawal).data,
        })


class TokenWithdrawView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = TokenWithdrawalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        withdrawal = withdrawal_service.request_token_withdrawal(
            request.user.id,
            serializer.validated_data['amount'],
            serializer.validated_data['network'],
            serializer.validated_data['wallet_address'],
        )

        return Response({
            'message': 'Withdrawal request submitted',
            'withdrawalRequest': WithdrawalRequestSerializer(withdrawal).data,
        })


class TransactionViewSet(viewsets.ReadOnlyModelViewSet):
    """Transaction history endpoints"""
    serializer_class = TransactionSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['transaction_type', 'status']
    ordering_fields = ['created_at', 'amount']
    ordering = ['-created_at']

    def get_queryset(self):
        return Transaction.objects.filter(user=self.request.user)


class WithdrawalRequestViewSet(viewsets.ReadOnlyModelViewSet):
    """Own withdrawal requests"""
    serializer_class = WithdrawalRequestSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['status', 'network']

    def get_queryset(self):
        return WithdrawalRequest.objects.filter(user=self.request.user).select_related('user')


class AdminTransactionViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Transaction.objects.select_related('user')
    serializer_class = AdminTransactionSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    filterset_fields = ['transaction_type', 'status', 'user']
    search_fields = ['reference_id', 'user__email', 'user__name']
    ordering_fields = ['created_at', 'amount']
    ordering = ['-created_at']


class AdminWithdrawalViewSet(viewsets.ReadOnlyModelViewSet):
    """Withdrawal queue with the approve/reject action"""
    queryset = WithdrawalRequest.objects.select_related('user')
    serializer_class = WithdrawalRequestSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    filterset_fields = ['status', 'network']
    search_fields = ['user__email', 'wallet_address']

    @action(detail=False, methods=['post'])
    def approve(self, request):
        serializer = WithdrawalApprovalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        withdrawal = withdrawal_service.approve_withdrawal(
            serializer.validated_data['withdrawal_id'],
            serializer.validated_data['action'],
            request.user,
            serializer.validated_data['reason'],
        )

        return Response({
            'message': f'Withdrawal {withdrawal.status.lower()}',
            'withdrawalRequest': WithdrawalRequestSerializer(withdrawal).data,
        })
