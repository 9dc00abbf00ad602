"""Serializers for request input and report output."""

from rest_framework import serializers


class FetchOrdersSerializer(serializers.Serializer):
    """Input of the asynchronous order fetch."""

    action = serializers.ChoiceField(choices=["fetch_orders"])
    date = serializers.CharField(required=False, allow_blank=True, default="", max_length=32)
    refresh_cache = serializers.ChoiceField(choices=["0", "1"], required=False, default="0")


class ColumnPreferenceSerializer(serializers.Serializer):
    """Input of a column preference save. Ids are filtered by the service."""

    visible_columns = serializers.ListField(
        child=serializers.CharField(),
        required=False,
        default=list,
    )


class OrderRowSerializer(serializers.Serializer):
    """Serializer for the OrderRow domain model."""

    event_id = serializers.CharField()
    event_title = serializers.CharField()
    event_start = serializers.CharField()
    order_id = serializers.CharField()
    order_number = serializers.CharField()
    order_edit_reference = serializers.CharField()
    purchaser_name = serializers.CharField()
    purchaser_email = serializers.CharField()
    purchaser_phone = serializers.CharField(allow_null=True)
    order_status = serializers.CharField()
    order_status_label = serializers.CharField()
    ticket_count = serializers.IntegerField()
    ticket_summary = serializers.CharField()
    order_created_at = serializers.CharField()
