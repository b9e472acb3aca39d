"""Price Comparison — per-kg normalization and similar-listing matching.

Invariants:
    - Names match when equal, when one contains the other, or when they share
      a meaningful word (length > 2, not in COMMON_WORDS) by substring
    - Per-kg price = price / kg_amount; a non-positive kg amount keeps the raw price
    - Unknown units convert 1:1
    - All functions PURE — the product service does the querying
"""

from dataclasses import dataclass

from agrilink.core.listing_format import format_unit

CURRENCY = "MMK"

COMMON_WORDS: frozenset[str] = frozenset({
    "fresh", "organic", "premium", "quality", "grade", "a", "the", "and",
    "of", "in", "on", "at", "to", "for", "with", "by",
})

# unit → kg multiplier
_KG_FACTORS: dict[str, float] = {
    "g": 0.001,
    "gram": 0.001,
    "lb": 0.453592,
    "pound": 0.453592,
    "ton": 1000.0,
    "tons": 1000.0,
    "kg": 1.0,
    "kilogram": 1.0,
}


@dataclass(frozen=True)
class PerKgPrice:
    price_per_kg: float
    conversion_factor: float


def _meaningful_words(name: str) -> list[str]:
    return [w for w in name.split(" ") if len(w) > 2 and w not in COMMON_WORDS]


def names_match(reference: str, candidate: str) -> bool:
    """Loose product-name similarity used to pick comparable listings."""
    ref = reference.lower()
    cand = candidate.lower()
    if ref == cand or ref in cand or cand in ref:
        return True
    cand_words = _meaningful_words(cand)
    return any(
        rw in cw or cw in rw
        for rw in _meaningful_words(ref)
        for cw in cand_words
    )


def to_per_kg(price: float, quantity: float | None, quantity_unit: str | None) -> PerKgPrice:
    """Normalize a listing price to a per-kg price."""
    if not quantity or not quantity_unit:
        return PerKgPrice(price_per_kg=price, conversion_factor=1.0)
    factor = _KG_FACTORS.get(quantity_unit.lower(), 1.0)
    kg_amount = quantity * factor
    return PerKgPrice(
        price_per_kg=price / kg_amount if kg_amount > 0 else price,
        conversion_factor=kg_amount,
    )


def display_unit(quantity: float | None, quantity_unit: str | None, packaging: str | None) -> str:
    """Display unit with the comparison defaults (1 kg) applied."""
    return format_unit(quantity or 1, quantity_unit or "kg", packaging) or "1kg"


def price_range(prices: list[float]) -> dict:
    """{min, max, currency}; empty input gives None bounds."""
    return {
        "min": min(prices) if prices else None,
        "max": max(prices) if prices else None,
        "currency": CURRENCY,
    }
