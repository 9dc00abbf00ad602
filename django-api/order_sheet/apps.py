from django.apps import AppConfig


class OrderSheetConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "order_sheet"
    verbose_name = "Daily Order Sheet"

    def ready(self) -> None:
        from order_sheet import signals  # noqa: F401
