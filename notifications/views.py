# notifications/views.py
import logging

from django.db.models import Q
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsAdminRole
from notifications.models import Notification
from notifications.serializers import AdminNotificationSerializer, NotificationSerializer

logger = logging.getLogger(__name__)


class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    """User notification feed (own and global notifications)"""
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = []

    def get_queryset(self):
        user = self.request.user
        if self.action in ('mark_read', 'mark_all_read'):
            # Global rows are shared, so only own rows carry read state
            queryset = Notification.objects.filter(user=user)
        else:
            queryset = Notification.objects.filter(Q(user=user) | Q(user__isnull=True))

        if self.request.query_params.get('unread') == 'true':
            queryset = queryset.filter(is_read=False)
        return queryset.order_by('-created_at')

    def list(self, request, *args, **kwargs):
        response = super().list(request, *args, **kwargs)
        response.data['unreadCount'] = Notification.objects.filter(
            user=request.user,
            is_read=False
        ).count()
        return response

    @action(detail=True, methods=['post'], url_path='mark-read')
    def mark_read(self, request, pk=None):
        """Mark notification as read"""
        notification = self.get_object()
        notification.is_read = True
        notification.save(update_fields=['is_read'])

        return Response({'message': 'Marked as read'})

    @action(detail=False, methods=['post'], url_path='mark-all-read')
    def mark_all_read(self, request):
        updated = self.get_queryset().filter(is_read=False).update(is_read=True)
        return Response({'message': 'All notifications marked as read', 'updated': updated})


class AdminNotificationView(APIView):
    """Create a user-targeted or global notification (admin only)"""
    permission_classes = [IsAuthenticated, IsAdminRole]

    def post(self, request):
        serializer = AdminNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        notification = Notification.objects.create(
            user=serializer.validated_data.get('user'),
            notification_type=serializer.validated_data['notification_type'],
            title=serializer.validated_data['title'],
            message=serializer.validated_data['message'],
            data=serializer.validated_data.get('data') or {},
        )
        logger.info(f"Admin {request.user.email} created notification {notification.id}")

        return Response(
            NotificationSerializer(notification).data,
            status=status.HTTP_201_CREATED
        )
