from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"

    def ready(self):
        from common.choices import FulfillmentMode

        mode = getattr(settings, "ORDER_FULFILLMENT_MODE", FulfillmentMode.DECLARED)
        if mode not in FulfillmentMode.values:
            raise ImproperlyConfigured(
                f"ORDER_FULFILLMENT_MODE must be one of {', '.join(FulfillmentMode.values)}, got {mode!r}"
            )
