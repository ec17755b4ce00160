# branches/admin.py
from django.contrib import admin
from .models import Branch, BranchService


class BranchServiceInline(admin.TabularInline):
    model = BranchService
    extra = 0
    fields = ['position', 'name', 'barber_price', 'washer_price', 'barber_share', 'washer_share']
    ordering = ['position']


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'barber_share', 'washer_share', 'services_count', 'created_at']
    search_fields = ['name', 'owner__name', 'owner__phone']
    list_filter = ['created_at']
    inlines = [BranchServiceInline]

    def services_count(self, obj):
        return obj.services.count()
    services_count.short_description = 'Services'
