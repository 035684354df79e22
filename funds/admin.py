# funds/admin.py
from django.contrib import admin
from funds.models import TokenPrice, Transaction, WithdrawalRequest


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ['reference_id', 'user', 'transaction_type', 'amount', 'token_amount',
                    'status', 'payment_method', 'created_at', 'completed_at']
    search_fields = ['reference_id', 'user__email']
    list_filter = ['transaction_type', 'status', 'created_at']
    readonly_fields = ['reference_id', 'amount', 'token_amount', 'price_per_token',
                       'processing_fee', 'created_at', 'completed_at']


@admin.register(TokenPrice)
class TokenPriceAdmin(admin.ModelAdmin):
    list_display = ['date', 'price', 'updated_by', 'updated_at']
    ordering = ['-date']


@admin.register(WithdrawalRequest)
class WithdrawalRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'amount', 'token_amount', 'network', 'status',
                    'can_withdraw', 'created_at', 'processed_at']
    list_filter = ['status', 'network', 'can_withdraw']
    search_fields = ['user__email', 'wallet_address']
    readonly_fields = ['amount', 'token_amount', 'transaction', 'created_at',
                       'processed_at', 'processed_by']

    fieldsets = (
        ('Request', {
            'fields': ('user', 'amount', 'token_amount', 'network', 'wallet_address', 'transaction')
        }),
        ('Lock Period', {
            'fields': ('lock_period_days', 'can_withdraw', 'created_at')
        }),
        ('Processing', {
            'fields': ('status', 'processed_at', 'processed_by', 'rejection_reason')
        }),
    )

    def has_add_permission(self, request):
        return False
