from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Lending rules
    loan_period_days: int = Field(default=14, gt=0, alias="LOAN_PERIOD_DAYS")
    loan_limit: int = Field(default=5, gt=0, alias="LOAN_LIMIT")
    fine_limit: Decimal = Field(default=Decimal("10.00"), gt=0, alias="FINE_LIMIT")

    @field_validator("fine_limit", mode="before")
    @classmethod
    def float_to_decimal(cls, v: str | float | Decimal) -> str | Decimal:
        """Convert floats through their string form so 10.1 stays 10.1."""
        if isinstance(v, float):
            return str(v)
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )


settings = Settings()
