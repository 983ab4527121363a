from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Calculator defaults for the API and CLI front ends.

    The engine never reads these; every engine call takes fully specified inputs.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "MORTGAGE_"}

    # Loan calculator defaults
    default_principal: Decimal = Decimal("250000")
    default_annual_rate_percent: Decimal = Decimal("6.5")
    default_term_months: int = 360

    # Mortgage tracking defaults
    default_payment_day_of_month: int = 1

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
