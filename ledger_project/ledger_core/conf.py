from django.conf import settings

# Used when settings.LEDGER is missing a key
DEFAULTS = {
    "AUTO_CREATE_ACCOUNTS": True,
    "STOCK_MOVEMENT_CONTRA_ACCOUNTS": {
        "receipt": "2150",
        "return": "2150",
        "issue": "5000",
        "adjustment": "6100",
        "scrap": "6100",
        "cycle_count": "6100",
        "transfer": "1410",
    },
    "STOCK_MOVEMENT_EXCLUDED_TYPES": ["reserve", "unreserve"],
    "JOURNAL_TASK_MAX_RETRIES": 3,
    "JOURNAL_TASK_RETRY_DELAY": 10,
}


def ledger_setting(name):
    """Read one key of settings.LEDGER, falling back to DEFAULTS."""
    # read on every call so override_settings works in tests
    overrides = getattr(settings, "LEDGER", {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
