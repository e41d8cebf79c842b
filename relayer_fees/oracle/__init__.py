# relayer_fees/oracle/__init__.py
from .price_oracle import PriceOracle, PriceSource, TokenPriceInfo

__all__ = [
    "PriceOracle",
    "PriceSource",
    "TokenPriceInfo",
]
