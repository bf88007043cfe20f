import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self) -> None:
        self.APP_NAME: str = os.getenv("APP_NAME", "Apparel Storefront API")
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
        self.SUPABASE_URL = os.getenv("SUPABASE_URL")
        self.SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
        self.SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")  # optional service role
        self.SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
        self.DEBUG_ENDPOINTS: bool = _flag("DEBUG_ENDPOINTS")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
        self.STORAGE_BUCKET: str = os.getenv("STORAGE_BUCKET", "product-images")


@lru_cache
def get_settings() -> Settings:
    return Settings()
