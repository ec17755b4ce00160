# operations/admin.py
from django.contrib import admin
from .models import Operation


@admin.register(Operation)
class OperationAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'kind', 'price', 'original_price', 'status', 'by', 'branch', 'created_at']
    list_filter = ['kind', 'status', 'by', 'branch', 'created_at']
    search_fields = ['name', 'user__name', 'user__phone']
    readonly_fields = ['uid', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        (None, {
            'fields': ('uid', 'user', 'kind', 'branch', 'name', 'price', 'original_price')
        }),
        ('Status', {
            'fields': ('status', 'finished_date', 'worker_confirmed_date', 'payment_confirmed_date')
        }),
        ('Payment', {
            'fields': ('by', 'payment_image_url', 'workers')
        }),
        ('Dates', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
