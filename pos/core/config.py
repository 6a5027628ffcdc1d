# pos/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./pos.db"
    SQLITE_BUSY_TIMEOUT: float = 30.0

    # Shop / invoice
    SHOP_NAME: str = "GenZ Collection"
    CURRENCY_SYMBOL: str = "₹"
    CURRENCY_NAME: str = "rupees"
    CURRENCY_SUBUNIT_NAME: str = "paise"
    AMOUNT_WORDS_LANG: str = "en_IN"
    PHONE_COUNTRY_CODE: str = "91"

    # Frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    CHECKOUT_RATE_LIMIT: str = "30/minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
    )


settings = Settings()
