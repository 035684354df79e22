# core/tasks.py
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task
def complete_matured_stakes():
    """Release stakes whose term has ended back to available tokens"""
    from staking.services.staking_service import complete_matured_stakes as complete

    completed = complete()
    logger.info(f"Completed {completed} matured stakes")
    return completed


@shared_task
def refresh_withdrawal_eligibility():
    """Flag pending withdrawals whose lock period has ended"""
    from funds.services.withdrawal_service import refresh_withdrawal_eligibility as refresh

    updated = refresh()
    logger.info(f"Marked {updated} withdrawal requests as eligible")
    return updated
