"""Notification feed, read state and admin broadcasts."""
import pytest
from django.core import mail
from django.db import DatabaseError

from notifications.models import Notification
from notifications.services.notification_service import notification_service

FEED_URL = '/api/v1/notifications/'


@pytest.mark.django_db
class TestNotificationService:

    def test_notify_creates_row_and_sends_email(self, user):
        notification = notification_service.notify(
            user, Notification.Type.SYSTEM, 'Hello', 'Body text', email=True
        )

        assert notification.user == user
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == [user.email]
        assert mail.outbox[0].subject == 'DiTokens - Hello'

    def test_failures_are_swallowed(self, user, monkeypatch):
        def broken_create(**kwargs):
            raise DatabaseError('disk full')

        monkeypatch.setattr(Notification.objects, 'create', broken_create)

        assert notification_service.notify(user, Notification.Type.SYSTEM, 'Hi', 'Body') is None

    def test_email_failure_does_not_raise(self, user, settings):
        settings.EMAIL_BACKEND = 'tests.test_notifications.ExplodingBackend'

        notification = notification_service.notify(user, Notification.Type.SYSTEM, 'Hi', 'Body', email=True)

        assert notification is not None


class ExplodingBackend:
    def __init__(self, *args, **kwargs):
        pass

    def send_messages(self, messages):
        raise ConnectionRefusedError('SMTP down')


@pytest.mark.django_db
class TestNotificationFeed:

    def test_feed_includes_own_and_global_only(self, user_client, user, make_user):
        other = make_user(email='other@example.com')
        Notification.objects.create(user=user, notification_type='SYSTEM', title='Mine', message='m')
        Notification.objects.create(user=None, notification_type='SYSTEM', title='Everyone', message='m')
        Notification.objects.create(user=other, notification_type='SYSTEM', title='Theirs', message='m')

        response = user_client.get(FEED_URL)

        assert response.status_code == 200
        assert {item['title'] for item in response.data['items']} == {'Mine', 'Everyone'}
        assert response.data['unreadCount'] == 1

    def test_unread_filter_and_mark_read(self, user_client, user):
        first = Notification.objects.create(user=user, notification_type='SYSTEM', title='One', message='m')
        Notification.objects.create(user=user, notification_type='SYSTEM', title='Two', message='m')

        assert user_client.post(f'{FEED_URL}{first.id}/mark-read/').status_code == 200

        response = user_client.get(FEED_URL, {'unread': 'true'})
        assert [item['title'] for item in response.data['items']] == ['Two']

    def test_mark_all_read(self, user_client, user):
        for title in ('One', 'Two'):
            Notification.objects.create(user=user, notification_type='SYSTEM', title=title, message='m')

        response = user_client.post(f'{FEED_URL}mark-all-read/')

        assert response.data['updated'] == 2
        assert not Notification.objects.filter(user=user, is_read=False).exists()

    def test_cannot_mark_someone_elses_notification(self, user_client, make_user):
        other = make_user(email='other@example.com')
        theirs = Notification.objects.create(user=other, notification_type='SYSTEM', title='T', message='m')

        assert user_client.post(f'{FEED_URL}{theirs.id}/mark-read/').status_code == 404


@pytest.mark.django_db
class TestAdminBroadcast:

    def test_admin_creates_global_notification(self, admin_client):
        response = admin_client.post(
            '/api/v1/admin/notifications/',
            {'title': 'Maintenance', 'message': 'Sunday 02:00 UTC'},
            format='json'
        )

        assert response.status_code == 201
        assert response.data['isGlobal'] is True
        assert response.data['type'] == Notification.Type.ADMIN_MESSAGE

    def test_admin_targets_a_user(self, admin_client, user):
        response = admin_client.post(
            '/api/v1/admin/notifications/',
            {'userId': str(user.id), 'type': 'SECURITY', 'title': 'New login', 'message': 'From Lagos'},
            format='json'
        )

        assert response.status_code == 201
        assert Notification.objects.get(pk=response.data['id']).user == user

    def test_users_cannot_broadcast(self, user_client):
        response = user_client.post('/api/v1/admin/notifications/', {'title': 'x', 'message': 'y'}, format='json')
        assert response.status_code == 403
