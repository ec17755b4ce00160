# users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Users with phone login and barbershop roles"""

    list_display = [
        'phone', 'name', 'role', 'branch',
        'is_active', 'is_suspended', 'created_at'
    ]
    list_filter = ['role', 'is_active', 'is_suspended', 'branch']
    search_fields = ['phone', 'name']
    ordering = ['-created_at']

    fieldsets = (
        (None, {
            'fields': ('phone', 'password')
        }),
        ('Personal Info', {
            'fields': ('name', 'role', 'branch')
        }),
        ('Status', {
            'fields': ('is_active', 'is_suspended', 'is_staff', 'is_superuser')
        }),
        ('Dates', {
            'fields': ('last_login', 'date_joined'),
            'classes': ('collapse',)
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('phone', 'name', 'role', 'branch', 'password1', 'password2'),
        }),
    )
