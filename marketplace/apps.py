from django.apps import AppConfig


class MarketplaceConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "marketplace"
    verbose_name = "Print marketplace"

    def ready(self):
        # Register Prometheus collectors on startup
        from marketplace.infra.observability import metrics  # noqa: F401
