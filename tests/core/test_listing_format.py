"""Listing Format — unit and location display strings."""

from agrilink.core.listing_format import DEFAULT_LOCATION, format_location, format_unit


def test_format_unit_with_packaging():
    assert format_unit(50, "kg", "bag") == "50kg bag"


def test_format_unit_keeps_fractional_quantity():
    assert format_unit(2.5, "kg", None) == "2.5kg"


def test_format_unit_needs_quantity_and_unit():
    assert format_unit(None, "kg", "bag") is None
    assert format_unit(10, None, None) is None


def test_format_location():
    assert format_location("Yangon", "Yangon Region") == "Yangon, Yangon Region"
    assert format_location("Yangon", None) == "Yangon"
    assert format_location(None, "Yangon Region") == DEFAULT_LOCATION
