from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "phone", "address", "location_type")
    search_fields = ("name", "phone", "address")
    list_filter = ("location_type",)
