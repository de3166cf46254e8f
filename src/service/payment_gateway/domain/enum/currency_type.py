from enum import Enum


class CurrencyType(str, Enum):
    """Currencies accepted by the mock payment gateway, serialized by name."""

    USD = 'USD'
