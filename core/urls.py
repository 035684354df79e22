# core/urls.py
import logging

from django.contrib import admin
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from funds.views import (
    AdminTokenPriceView, AdminTransactionViewSet, AdminWithdrawalViewSet,
    ConvertToUsdtView, CurrentPriceView, ManualDepositView, PaymentConfirmationView,
    PurchaseFromBalanceView, PurchaseView, TokenWithdrawView, TransactionViewSet,
    UsdtWithdrawView, WithdrawalRequestViewSet
)
from notifications.views import AdminNotificationView, NotificationViewSet
from referrals.views import AdminCommissionViewSet, CommissionSettingsView, ReferralViewSet
from staking.views import AdminStakingRecordViewSet, StakeView, StakingRecordViewSet
from users.views import AdminUserViewSet, MeView, SignInView, SignOutView, SignUpView

logger = logging.getLogger(__name__)


def health_check(request):
    """Health check endpoint for monitoring"""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.error(f"Health check failed: {str(e)}")
        return JsonResponse({'status': 'unhealthy', 'database': 'unavailable'}, status=503)

    return JsonResponse({'status': 'healthy', 'database': 'ok'})


# Create router
router = DefaultRouter()

# Funds
router.register(r'transactions', TransactionViewSet, basename='transaction')
router.register(r'usdt/withdrawals', WithdrawalRequestViewSet, basename='usdt-withdrawal')

# Staking
router.register(r'tokens/staking', StakingRecordViewSet, basename='staking')

# Referrals
router.register(r'referrals', ReferralViewSet, basename='referral')

# Notifications
router.register(r'notifications', NotificationViewSet, basename='notification')

# Admin
router.register(r'admin/users', AdminUserViewSet, basename='admin-user')
router.register(r'admin/withdrawals', AdminWithdrawalViewSet, basename='admin-withdrawal')
router.register(r'admin/commissions', AdminCommissionViewSet, basename='admin-commission')
router.register(r'admin/staking/records', AdminStakingRecordViewSet, basename='admin-staking-record')
router.register(r'admin/transactions', AdminTransactionViewSet, basename='admin-transaction')

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),
    path('health/', health_check, name='health_check'),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'),
         name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'),
         name='redoc'),

    # Authentication
    path('api/v1/auth/sign-up/', SignUpView.as_view(), name='sign-up'),
    path('api/v1/auth/sign-in/', SignInView.as_view(), name='sign-in'),
    path('api/v1/auth/sign-out/', SignOutView.as_view(), name='sign-out'),
    path('api/v1/auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/v1/auth/me/', MeView.as_view(), name='me'),

    # Tokens
    path('api/v1/tokens/current-price/', CurrentPriceView.as_view(), name='current-price'),
    path('api/v1/tokens/purchase/', PurchaseView.as_view(), name='token-purchase'),
    path('api/v1/tokens/purchase-from-balance/', PurchaseFromBalanceView.as_view(),
         name='token-purchase-from-balance'),
    path('api/v1/tokens/stake/', StakeView.as_view(), name='token-stake'),
    path('api/v1/tokens/convert-to-usdt/', ConvertToUsdtView.as_view(), name='token-convert'),
    path('api/v1/tokens/withdraw/', TokenWithdrawView.as_view(), name='token-withdraw'),

    # USDT
    path('api/v1/usdt/withdraw/', UsdtWithdrawView.as_view(), name='usdt-withdraw'),

    # Admin operations
    path('api/v1/admin/payments/confirm/', PaymentConfirmationView.as_view(), name='admin-payment-confirm'),
    path('api/v1/admin/deposits/manual/', ManualDepositView.as_view(), name='admin-manual-deposit'),
    path('api/v1/admin/commission-settings/', CommissionSettingsView.as_view(),
         name='admin-commission-settings'),
    path('api/v1/admin/token-price/', AdminTokenPriceView.as_view(), name='admin-token-price'),
    path('api/v1/admin/notifications/', AdminNotificationView.as_view(), name='admin-notifications'),

    # API Routes
    path('api/v1/', include(router.urls)),
]
