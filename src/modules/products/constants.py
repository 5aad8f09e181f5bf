"""Product business constants."""

from decimal import Decimal

PRICE_MIN = Decimal("0.01")
PRICE_MAX = Decimal("10000.00")

# Basket discount: products in this category bought in at least this
# quantity get ``DISCOUNT_RATE`` of their unit price off.
DISCOUNT_CATEGORY = "CPU"
DISCOUNT_MIN_QUANTITY = 2
DISCOUNT_RATE = Decimal("0.05")
