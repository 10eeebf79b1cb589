"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Hostel Food API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./hostel_food.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "1440"))
    auth_cookie_name: str = getenv("AUTH_COOKIE_NAME", "access_token")
    auth_cookie_secure: bool = getenv("AUTH_COOKIE_SECURE", "0") == "1"
    app_base_url: str = getenv("APP_BASE_URL", "http://localhost:8000")
    default_timezone: str = getenv("APP_DEFAULT_TIMEZONE", "Asia/Ho_Chi_Minh")
    default_order_cutoff_time: str = getenv("APP_DEFAULT_CUTOFF_TIME", "20:00")
    default_max_advance_days: int = int(getenv("APP_DEFAULT_MAX_ADVANCE_DAYS", "7"))
    brevo_api_key: str = getenv("BREVO_API_KEY", "")
    brevo_from_email: str = getenv("BREVO_FROM_EMAIL", "no-reply@hostelfood.local")
    brevo_from_name: str = getenv("BREVO_FROM_NAME", "Hostel Food")
    redis_url: str = getenv("REDIS_URL", "")
    admin_email: str = getenv("ADMIN_EMAIL", "admin@hostelfood.local")
    admin_password: str = getenv("ADMIN_PASSWORD", "admin123")
    password_reset_ttl_minutes: int = int(getenv("PASSWORD_RESET_TTL_MINUTES", "60"))


settings: Settings = Settings()
