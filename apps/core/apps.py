from django.apps import AppConfig  # type: ignore


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.core"
    label = "core"

    def ready(self) -> None:
        from .audit import register_audit_handlers

        register_audit_handlers()
