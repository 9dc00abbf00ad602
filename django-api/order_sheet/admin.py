from django.contrib import admin

from order_sheet.models import ColumnPreference, Event, LineItem, Order


class EventLineItemInline(admin.TabularInline):
    model = LineItem
    fk_name = "event"
    extra = 0


class OrderLineItemInline(admin.TabularInline):
    model = LineItem
    fk_name = "order"
    extra = 1


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "starts_at", "is_published"]
    list_filter = ["is_published"]
    search_fields = ["title"]
    inlines = [EventLineItemInline]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["number", "billing_first_name", "billing_last_name", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["number", "billing_email", "billing_last_name"]
    inlines = [OrderLineItemInline]


@admin.register(ColumnPreference)
class ColumnPreferenceAdmin(admin.ModelAdmin):
    list_display = ["actor_id", "visible_columns", "updated_at"]
