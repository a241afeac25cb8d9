from typing import Final

# Categories
WEIGHT: Final[str] = "weight"
VOLUME: Final[str] = "volume"
CATEGORIES: Final[tuple[str, ...]] = (WEIGHT, VOLUME)

# Canonical base unit and default selection per category
BASE_UNIT: Final[dict[str, str]] = {WEIGHT: "kg", VOLUME: "l"}
DEFAULT_UNIT: Final[dict[str, str]] = {WEIGHT: "kg", VOLUME: "l"}

# Decimal places for every formatted result of a category
PRECISION: Final[dict[str, int]] = {WEIGHT: 3, VOLUME: 2}
# Volume quantities below 1 are shown with extra digits
SMALL_VOLUME_PRECISION: Final[int] = 4

# Calculator steps
STEP_CATEGORY: Final[str] = "category-selection"
STEP_BASE_RATE: Final[str] = "base-rate-configuration"
STEP_CALCULATING: Final[str] = "calculating"

# Sub-tools inside the calculating step
TOOL_PRICE_TO_QUANTITY: Final[str] = "price-to-quantity"
TOOL_QUANTITY_TO_PRICE: Final[str] = "quantity-to-price"
TOOLS: Final[tuple[str, ...]] = (TOOL_PRICE_TO_QUANTITY, TOOL_QUANTITY_TO_PRICE)

# Offline compute message types
CALCULATE_OFFLINE: Final[str] = "CALCULATE_OFFLINE"
CALCULATION_RESULT: Final[str] = "CALCULATION_RESULT"
