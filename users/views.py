# users/views.py
import logging

from django.contrib.auth import login, logout
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.permissions import IsAdminRole
from users.models import User
from users.serializers import (
    AdminUserUpdateSerializer, ProfileUpdateSerializer, SignInSerializer,
    SignUpSerializer, UserSerializer
)
from users.services import account_service

logger = logging.getLogger(__name__)


def issue_tokens(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


class SignUpView(APIView):
    """User registration endpoint"""
    permission_classes = [AllowAny]

    def post(self, request):
        logger.info(f"Registration attempt for email: {request.data.get('email')}")

        serializer = SignUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = account_service.register_user(**serializer.validated_data)

        return Response({
            'message': 'Account created successfully',
            'user': UserSerializer(user).data,
        }, status=status.HTTP_201_CREATED)


class SignInView(APIView):
    """Session login that also returns a JWT pair"""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = SignInSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data['user']
        login(request, user)
        logger.info(f"User signed in: {user.email}")

        return Response({
            'user': UserSerializer(user).data,
            'tokens': issue_tokens(user),
        })


class SignOutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh')
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as e:
                logger.warning(f"Token blacklist failed: {str(e)}")

        logger.info(f"User signed out: {request.user.email}")
        logout(request)

        return Response({'message': 'Signed out successfully'})


class MeView(APIView):
    """Current user's profile and balances"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({'user': UserSerializer(request.user).data})

    def patch(self, request):
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        return Response({'user': UserSerializer(user).data})


class AdminUserViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       viewsets.GenericViewSet):
    """User management for admins"""
    queryset = User.objects.select_related('referred_by')
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    filterset_fields = ['role', 'is_active']
    search_fields = ['name', 'email', 'referral_code']
    ordering_fields = ['created_at', 'total_tokens', 'usdt_balance']

    def partial_update(self, request, pk=None):
        target = self.get_object()
        serializer = AdminUserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if serializer.validated_data['action'] == 'toggleActive':
            user = account_service.toggle_active(request.user, target)
        else:
            user = account_service.update_role(request.user, target, serializer.validated_data['value'])

        return Response({'user': UserSerializer(user).data})
