# users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from users.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['email', 'name', 'role', 'referral_code', 'total_tokens',
                    'usdt_balance', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['email', 'name', 'referral_code']
    ordering = ['-created_at']
    readonly_fields = ['referral_code', 'total_tokens', 'available_tokens', 'staked_tokens',
                       'usdt_balance', 'total_earnings', 'referral_earnings',
                       'created_at', 'updated_at']

    fieldsets = (
        (None, {'fields': ('name', 'email', 'password')}),
        ('Personal Info', {'fields': ('contact_number', 'country', 'state')}),
        ('Balances', {'fields': ('total_tokens', 'available_tokens', 'staked_tokens',
                                 'usdt_balance', 'total_earnings', 'referral_earnings')}),
        ('Referral Info', {'fields': ('referral_code', 'referred_by')}),
        ('Permissions', {
            'fields': ('role', 'is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Important Dates', {'fields': ('last_login', 'date_joined', 'created_at', 'updated_at')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'password1', 'password2'),
        }),
    )

    def has_delete_permission(self, request, obj=None):
        return False
