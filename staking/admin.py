from django.contrib import admin
from staking.models import StakingRecord


@admin.register(StakingRecord)
class StakingRecordAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'amount', 'apy', 'status', 'start_date', 'end_date', 'completed_at']
    list_filter = ['status', 'start_date']
    search_fields = ['user__email']
    readonly_fields = ['amount', 'start_date', 'end_date', 'apy', 'created_at']
