# notifications/serializers.py
from rest_framework import serializers
from django.contrib.auth import get_user_model
from notifications.models import Notification

User = get_user_model()


class NotificationSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source='notification_type', read_only=True)
    isRead = serializers.BooleanField(source='is_read', read_only=True)
    isGlobal = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Notification
        fields = ['id', 'type', 'title', 'message', 'data', 'isRead', 'isGlobal', 'createdAt']

    def get_isGlobal(self, obj):
        return obj.user_id is None


class AdminNotificationSerializer(serializers.Serializer):
    """Admin broadcast: omit userId for a global notification"""
    userId = serializers.PrimaryKeyRelatedField(
        source='user',
        queryset=User.objects.all(),
        required=False,
        allow_null=True
    )
    type = serializers.ChoiceField(
        source='notification_type',
        choices=Notification.Type.choices,
        default=Notification.Type.ADMIN_MESSAGE
    )
    title = serializers.CharField(max_length=200)
    message = serializers.CharField()
    data = serializers.JSONField(required=False)
