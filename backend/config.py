# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./storefront.db"

    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Signed cookie carrying the cart session token
    SESSION_SECRET_KEY: str = "dev-session-secret-change-me"
    SESSION_COOKIE_NAME: str = "storefront_session"

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    CURRENCY: str = "EGP"
    DEFAULT_SHIPPING_COST: float = 10.0

    # "stub" never leaves the process, "paymob" talks to the Paymob accept API
    PAYMENT_PROVIDER: str = "stub"
    PAYMENT_SIMULATED_DELAY_SECONDS: float = 2.0

    PAYMOB_API_URL: str = "https://accept.paymob.com/api/"
    PAYMOB_API_KEY: str = ""
    PAYMOB_INTEGRATION_ID: str = ""

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
