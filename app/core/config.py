from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "Sapiens Care API"
    PORT: int = 5000
    # Comma-separated origins for CORS. If empty, any origin is allowed.
    CORS_ORIGINS: str = ""
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./data/sapiens_care.db"

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Render and others give postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v

    # Confirmed-order spreadsheet
    ORDERS_EXPORT_PATH: str = "./data/orders.xlsx"
    ORDERS_EXPORT_SHEET: str = "Orders"
    EXPORT_LOCK_TIMEOUT_SECONDS: float = 30.0

    # Signed image uploads (product photos)
    UPLOAD_CLOUD_NAME: str = ""
    UPLOAD_API_KEY: str = ""
    UPLOAD_API_SECRET: str = ""
    UPLOAD_PRESET: str = "your_upload_preset"


settings = Settings()
