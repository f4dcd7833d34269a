from django.contrib import admin

from workshop.models import Appointment, Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["number", "status", "technician", "total", "created_at"]
    list_filter = ["status"]
    search_fields = ["number", "technician"]
    readonly_fields = ["subtotal", "discount_amount", "tax_amount", "total", "status_history", "version"]


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ["resource_id", "start_time", "end_time", "status"]
    list_filter = ["status", "resource_id"]
    search_fields = ["resource_id", "client_id", "service_type"]
    readonly_fields = ["version"]
