# staking/views.py
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsAdminRole
from staking.models import StakingRecord
from staking.serializers import AdminStakingRecordSerializer, StakeSerializer, StakingRecordSerializer
from staking.services.staking_service import create_stake


class StakeView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = StakeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = create_stake(request.user.id, serializer.validated_data['amount'])

        return Response({
            'message': 'Tokens staked successfully',
            'stakingId': record.id,
            'amount': record.amount,
            'startDate': record.start_date,
            'endDate': record.end_date,
            'apy': record.apy,
        })


class StakingRecordViewSet(viewsets.ReadOnlyModelViewSet):
    """Own staking records"""
    serializer_class = StakingRecordSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['status']

    def get_queryset(self):
        return StakingRecord.objects.filter(user=self.request.user)


class AdminStakingRecordViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = StakingRecord.objects.select_related('user')
    serializer_class = AdminStakingRecordSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    filterset_fields = ['status', 'user']
    search_fields = ['user__email', 'user__name']
