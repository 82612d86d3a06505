import os
from typing import List, Optional
from decimal import Decimal
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    DB_USER: Optional[str] = None
    DB_PASS: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: Optional[str] = None
    FACILITY_DB_NAME: Optional[str] = None
    # Full SQLAlchemy URL, wins over the DB_* parts when set
    FACILITY_DATABASE_URL: Optional[str] = None

    # Email Configuration FOR INVOICE DELIVERY
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_SSL: bool = False
    EMAIL_SENDER: str = "noreply@sales-arm.com"

    # Billing
    INVOICE_TAX_RATE_PCT: Decimal = Decimal("0")
    INVOICE_CURRENCY: str = "ETB"
    INVOICE_NUMBER_PREFIX: str = "INV"
    INVOICE_SEND_CHANNELS: List[str] = ["email"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()


def build_facility_database_url(cfg: Settings = settings) -> str:
    if cfg.FACILITY_DATABASE_URL:
        return cfg.FACILITY_DATABASE_URL
    if not cfg.DB_HOST:
        # local development without Postgres
        return "sqlite:///./facility_billing.db"
    return (
        f"postgresql+psycopg2://{cfg.DB_USER}:{cfg.DB_PASS}@{cfg.DB_HOST}:{cfg.DB_PORT}/{cfg.FACILITY_DB_NAME}?sslmode=require"
    )


FACILITY_DATABASE_URL = build_facility_database_url()
