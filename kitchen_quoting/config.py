from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./kitchen_quotes.db"
    COMPANY_NAME: str = "Kitchen Calculator"
    COMPANY_EMAIL: str = ""
    COMPANY_PHONE: str = ""

    # Pricing defaults, overridable per request
    CONTINGENCY_RATE_DEFAULT: float = 0.05
    TARIFF_RATE_DEFAULT: float = 0.10

    QUOTE_NUMBER_PREFIX: str = "KCQ"

    # Applied only when default surface rows are built from a single base price
    FENIX_IMPORT_MULTIPLIER: float = 1.5

    class Config:
        env_file = ".env"


settings = Settings()
