from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for admin auth operations (member provisioning, signup rollback)

    # Pagination
    default_page_size: int = 50
    max_page_size: int = 200

    # Dashboard
    recent_announcements_limit: int = 5
    report_page_size: int = 500

    # Auth
    auth_cache_ttl_seconds: int = 60

    # App
    app_name: str = "committee-dashboard"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def clamp_limit(self, limit: Optional[int]) -> int:
        if not limit or limit < 1:
            return self.default_page_size
        return min(limit, self.max_page_size)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
