"""Listing Format — display strings derived from listing and location fields.

Invariants:
    - format_unit returns None when quantity or unit is missing
    - format_location falls back to DEFAULT_LOCATION when the city is unknown
"""

DEFAULT_LOCATION = "Myanmar"


def _format_quantity(quantity: float) -> str:
    if float(quantity).is_integer():
        return str(int(quantity))
    return str(quantity)


def format_unit(
    quantity: float | None, quantity_unit: str | None, packaging: str | None,
) -> str | None:
    """'50kg bag', '10kg', or None."""
    if not quantity or not quantity_unit:
        return None
    unit = f"{_format_quantity(quantity)}{quantity_unit}"
    return f"{unit} {packaging}" if packaging else unit


def format_location(city: str | None, region: str | None) -> str:
    """'Yangon, Yangon Region', 'Yangon', or the country fallback."""
    if city and region:
        return f"{city}, {region}"
    if city:
        return city
    return DEFAULT_LOCATION
