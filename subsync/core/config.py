from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # App Basics
    app_env: str = "dev"
    app_name: str = "Lumen Sub Sync"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    # Public URL used in links sent to users
    app_base_url: str = "http://localhost:8000"
    log_level: str = "info"

    # Database
    database_url: str = "sqlite:///./dev.db"
    db_echo: bool = False
    # create missing tables on startup (no migrations in this repo)
    db_auto_create: bool = True

    # JWT / sessions
    jwt_secret: str = "secret_key"
    jwt_alg: str = "HS256"
    jwt_access_ttl_min: int = 60
    session_cookie_name: str = "subsync_session"
    session_cookie_secure: bool = False
    password_reset_ttl_min: int = 30

    # Identity policy
    password_min_length: int = 6

    # Subscriptions / billing
    usage_alert_threshold: int = 80
    currency: str = "USD"
    invoice_prefix: str = "INV"
    invoice_due_days: int = 15
    # Outcome of the mocked payment gateway: "approved", "pending" or "rejected"
    payment_mock_outcome: str = "approved"

    # Demo admin created by scripts/seed_plans.py
    seed_admin_email: str = "admin@lumen.com"
    seed_admin_password: str = "admin123"

    # Tell pydantic to read from .env file
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
    )

settings = Settings()
