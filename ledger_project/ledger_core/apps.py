from django.apps import AppConfig


class LedgerCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ledger_core"

    # ensure receivers and journal generators are registered
    def ready(self):
        import ledger_core.signals  # noqa: F401
        import ledger_core.generators  # noqa: F401
