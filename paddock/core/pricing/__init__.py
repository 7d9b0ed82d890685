"""Performance-driven asset pricing."""

from paddock.core.pricing.model import (
    PricingModel,
    PriceChange,
    rolling_average,
    round_half_up,
    price_tier,
)

__all__ = [
    "PricingModel",
    "PriceChange",
    "rolling_average",
    "round_half_up",
    "price_tier",
]
