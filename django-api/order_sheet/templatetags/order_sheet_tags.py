from datetime import datetime

from django import template

from order_sheet.domain.models import CANONICAL_DATETIME_FORMAT

register = template.Library()


@register.filter
def sheet_datetime(value: str) -> str:
    """Render a canonical timestamp as e.g. ``Jun 15, 2025 7:00 PM``."""
    try:
        parsed = datetime.strptime(value, CANONICAL_DATETIME_FORMAT)
    except (TypeError, ValueError):
        return value or ""
    hour = parsed.hour % 12 or 12
    return f"{parsed:%b} {parsed.day}, {parsed.year} {hour}:{parsed:%M %p}"
