# referrals/views.py
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Sum
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsAdminRole
from referrals.models import CommissionStatus, ReferralCommission
from referrals.serializers import (
    AdminReferralCommissionSerializer, CommissionApprovalSerializer,
    CommissionSettingsSerializer, ReferralCommissionSerializer, ReferredUserSerializer
)
from referrals.services.commission_service import (
    get_commission_settings, process_commission, update_referral_rate
)

User = get_user_model()
logger = logging.getLogger(__name__)


class ReferralViewSet(viewsets.GenericViewSet):
    """Referral program endpoints"""
    permission_classes = [IsAuthenticated]
    serializer_class = ReferralCommissionSerializer

    def get_queryset(self):
        return ReferralCommission.objects.filter(
            referrer=self.request.user
        ).select_related('referred_user')

    def list(self, request):
        """Referral statistics"""
        commissions = self.get_queryset()

        def total(status):
            return commissions.filter(status=status).aggregate(total=Sum('amount'))['total'] or 0

        return Response({
            'referralCode': request.user.referral_code,
            'referralLink': f'{settings.FRONTEND_URL}/sign-up?ref={request.user.referral_code}',
            'totalReferrals': User.objects.filter(referred_by=request.user).count(),
            'referralEarnings': request.user.referral_earnings,
            'pendingCommission': total(CommissionStatus.PENDING),
            'approvedCommission': total(CommissionStatus.APPROVED),
        })

    @action(detail=False, methods=['get'])
    def commissions(self, request):
        """Own commission buckets"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=False, methods=['get'], url_path='referred-users')
    def referred_users(self, request):
        """List referred users"""
        referred = User.objects.filter(referred_by=request.user).order_by('-created_at')
        page = self.paginate_queryset(referred)
        serializer = ReferredUserSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)


class AdminCommissionViewSet(viewsets.ReadOnlyModelViewSet):
    """Commission queue with the approve/reject action"""
    queryset = ReferralCommission.objects.select_related('referrer', 'referred_user')
    serializer_class = AdminReferralCommissionSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    filterset_fields = ['status', 'month', 'year', 'referrer']
    search_fields = ['referrer__email', 'referred_user__email']

    @action(detail=False, methods=['post'])
    def approve(self, request):
        serializer = CommissionApprovalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        commission = process_commission(
            serializer.validated_data['commission_id'],
            serializer.validated_data['action'],
            request.user,
            admin_notes=serializer.validated_data['admin_notes'],
            rejection_reason=serializer.validated_data['rejection_reason'],
        )

        return Response({
            'message': f'Commission {commission.status.lower()}',
            'commission': AdminReferralCommissionSerializer(commission).data,
        })


class CommissionSettingsView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get(self, request):
        return Response(CommissionSettingsSerializer(get_commission_settings()).data)

    def put(self, request):
        serializer = CommissionSettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        commission_settings = update_referral_rate(
            serializer.validated_data['referral_rate'],
            request.user.email
        )
        return Response(CommissionSettingsSerializer(commission_settings).data)
