import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AuthenticationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"

    def ready(self):
        """
        Initialize OpenTelemetry tracing for the whole backend.
        """
        try:
            from django.conf import settings

            from authentication.infra.observability.tracing import setup_tracing

            setup_tracing(
                service_name="printhub-backend",
                jaeger_host=getattr(settings, "JAEGER_AGENT_HOST", "localhost"),
                jaeger_port=getattr(settings, "JAEGER_AGENT_PORT", 6831),
                enable=getattr(settings, "OTEL_TRACING_ENABLED", False),
            )
        except Exception as e:
            logger.warning(f"Failed to initialize OpenTelemetry tracing: {e}")
