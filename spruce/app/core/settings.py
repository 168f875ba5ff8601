import os


class Settings:
    def __init__(self):
        self.app_name = "Spruce ERP"
        self.api_version = "1.0.0"
        self.environment = os.getenv("SPRUCE_ENVIRONMENT", "development")
        self.log_level = os.getenv("SPRUCE_LOG_LEVEL", "INFO")
        # Owner of freshly created leads and actor of system activities.
        self.default_owner_id = "user-1"
        self.system_user_id = "user-1"
        self.seed_lead_count = int(os.getenv("SPRUCE_SEED_LEADS", "100"))
        self.seed_random_seed = int(os.getenv("SPRUCE_SEED", "7"))
        self.bulk_upload_delay_seconds = float(os.getenv("SPRUCE_UPLOAD_DELAY", "2.0"))


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
