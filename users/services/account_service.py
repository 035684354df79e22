# users/services/account_service.py
import logging

from django.db import transaction
from rest_framework.exceptions import PermissionDenied

from referrals.services.commission_service import register_referral
from users.models import User

logger = logging.getLogger(__name__)


def register_user(name, email, password, contact_number='', country='', state='', referral_code=''):
    """
    Create an account, linking it to a referrer when the code is known.

    An unknown referral code is ignored rather than rejected.
    """
    with transaction.atomic():
        referrer = None
        if referral_code:
            referrer = User.objects.filter(referral_code=referral_code, is_active=True).first()
            if referrer is None:
                logger.info(f"Sign-up for {email} used unknown referral code {referral_code}")

        user = User.objects.create_user(
            email=email,
            password=password,
            name=name,
            contact_number=contact_number,
            country=country,
            state=state,
            referred_by=referrer,
        )

        if referrer is not None:
            register_referral(referrer, user)

    logger.info(f"User registered: {user.email} (ID: {user.id})")
    return user


def _check_can_manage(admin, target):
    if target.is_superadmin and not admin.is_superadmin:
        raise PermissionDenied('Only a superadmin can modify a superadmin account.')
    if target.pk == admin.pk:
        raise PermissionDenied('You cannot modify your own account.')


def toggle_active(admin, target):
    _check_can_manage(admin, target)
    target.is_active = not target.is_active
    target.save(update_fields=['is_active', 'updated_at'])
    logger.info(f"Admin {admin.email} set {target.email} active={target.is_active}")
    return target


def update_role(admin, target, role):
    if not admin.is_superadmin:
        raise PermissionDenied('Only a superadmin can change roles.')
    _check_can_manage(admin, target)

    target.role = role
    target.is_staff = role != User.Role.USER
    target.save(update_fields=['role', 'is_staff', 'updated_at'])
    logger.info(f"Admin {admin.email} changed role of {target.email} to {role}")
    return target
