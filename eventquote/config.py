from typing import Optional

from pydantic_settings import BaseSettings

from .pricing.catalog import DEFAULT_PRICE_LIST, CustomTotalPolicy, PriceList, RoundingPolicy


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./events.db"
    COMPANY_NAME: str = "Event Quote Desk"
    COMPANY_PHONE: str = ""

    # Pricing, defaults match the canonical price list
    CURRENCY: str = "COP"
    BASE_DURATION_HOURS: int = 4
    ACCESSORY_ROUNDING: RoundingPolicy = RoundingPolicy.CEILING
    ACCESSORY_ROUNDING_INCREMENT: int = 5000
    CUSTOM_TOTAL_POLICY: CustomTotalPolicy = CustomTotalPolicy.MANUAL_WINS
    MIN_GUESTS: int = 10
    MAX_GUESTS: Optional[int] = None

    class Config:
        env_file = ".env"


settings = Settings()


def price_list_from_settings(config: Settings = None) -> PriceList:
    """Canonical price list with the environment's policy overrides applied."""
    config = config or settings
    packages = tuple(
        package.model_copy(update={"base_duration_hours": config.BASE_DURATION_HOURS})
        for package in DEFAULT_PRICE_LIST.packages
    )
    return DEFAULT_PRICE_LIST.model_copy(update={
        "packages": packages,
        "currency": config.CURRENCY,
        "base_duration_hours": config.BASE_DURATION_HOURS,
        "rounding_policy": config.ACCESSORY_ROUNDING,
        "rounding_increment": config.ACCESSORY_ROUNDING_INCREMENT,
        "custom_total_policy": config.CUSTOM_TOTAL_POLICY,
        "min_guests": config.MIN_GUESTS,
        "max_guests": config.MAX_GUESTS,
    })
