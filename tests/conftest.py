"""Shared fixtures for the API and service tests."""
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from core.celery import app as celery_app
from users.models import User


@pytest.fixture(autouse=True)
def test_settings(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    settings.ADMIN_NOTIFICATION_EMAILS = ['ops@ditokens.test']
    settings.DIT_FALLBACK_PRICE = Decimal('2.80')
    settings.CELERY_TASK_ALWAYS_EAGER = True
    celery_app.config_from_object('django.conf:settings', namespace='CELERY', force=True)
    celery_app.conf.update(task_always_eager=True)
    yield settings
    celery_app.conf.update(task_always_eager=False)


@pytest.fixture
def make_user(db):
    counter = {'n': 0}

    def factory(role=User.Role.USER, password='secret123', **fields):
        counter['n'] += 1
        fields.setdefault('email', f'user{counter["n"]}@example.com')
        fields.setdefault('name', f'User {counter["n"]}')
        fields.setdefault('contact_number', '08012345678')
        fields.setdefault('country', 'Nigeria')
        fields.setdefault('state', 'Lagos')
        return User.objects.create_user(password=password, role=role, **fields)

    return factory


@pytest.fixture
def fund(db):
    """Set balances directly, bypassing the ledger (test setup only)"""
    def setter(user, **balances):
        User.objects.filter(pk=user.pk).update(**balances)
        user.refresh_from_db()
        return user

    return setter


@pytest.fixture
def user(make_user):
    return make_user(email='alice@example.com', name='Alice')


@pytest.fixture
def admin(make_user):
    return make_user(email='admin@ditokens.test', name='Admin', role=User.Role.ADMIN)


@pytest.fixture
def superadmin(make_user):
    return make_user(email='root@ditokens.test', name='Root', role=User.Role.SUPERADMIN)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def build(account):
        client = APIClient()
        client.force_authenticate(user=account)
        return client

    return build


@pytest.fixture
def user_client(client_for, user):
    return client_for(user)


@pytest.fixture
def admin_client(client_for, admin):
    return client_for(admin)


@pytest.fixture
def superadmin_client(client_for, superadmin):
    return client_for(superadmin)
