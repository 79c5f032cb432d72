from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List, Dict


class Settings(BaseSettings):
    # Workshop content
    workshops_urls: str = ""  # comma-separated, http(s) URLs or local paths
    content_url_prefix: Optional[str] = None  # base for lab files/images when a workshop has no content.url
    default_workshop: Optional[str] = None
    java_app: bool = False

    # Values exposed to lab templates
    openshift_master: Optional[str] = None  # rendered as MASTER_URL
    guid: Optional[str] = None
    template_vars: Dict[str, str] = {}  # JSON object, e.g. TEMPLATE_VARS='{"APP_NAME": "inventory"}'

    # Fetching
    fetch_timeout_seconds: float = 10.0
    content_cache_ttl_seconds: int = 300

    # App
    app_name: str = "workshopper"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:8080,http://127.0.0.1:3000,http://127.0.0.1:8080"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_workshops_urls_list(self) -> List[str]:
        return [u.strip() for u in self.workshops_urls.split(",") if u.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
