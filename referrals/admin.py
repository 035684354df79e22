# referrals/admin.py
from django.contrib import admin
from referrals.models import CommissionSettings, ReferralCommission


@admin.register(CommissionSettings)
class CommissionSettingsAdmin(admin.ModelAdmin):
    list_display = ['id', 'referral_rate', 'updated_by', 'updated_at']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(ReferralCommission)
class ReferralCommissionAdmin(admin.ModelAdmin):
    list_display = ['id', 'referrer', 'referred_user', 'month', 'year',
                    'amount', 'commission_percentage', 'status', 'created_at']
    list_filter = ['status', 'year', 'month']
    search_fields = ['referrer__email', 'referred_user__email']
    readonly_fields = ['amount', 'token_amount', 'price_per_token', 'status',
                       'approved_at', 'approved_by', 'rejected_at', 'rejected_by', 'created_at']
