# courier/services/pricing.py
"""
Delivery pricing.

The fee depends on total weight only, through a flat tier table. It is a
known simplification of a zone/distance based rate card; distance is not
an input.

All functions are pure; the DraftAssembler and OrderFinalizer are the
only callers allowed to write their results into a draft.
"""
import math
from collections.abc import Iterable

from courier.schemas.draft import InsurancePlan, ItemDetails, Pricing

BASE_FEE = 1000

# (upper bound kg, flat amount for lower bands, per-kg rate inside the band)
LIGHT_LIMIT_KG = 5
LIGHT_RATE = 200

MEDIUM_LIMIT_KG = 20
MEDIUM_FLAT = 1000  # 5 kg * 200
MEDIUM_RATE = 150

HEAVY_FLAT = 3250  # 1000 + 15 kg * 150
HEAVY_RATE = 100

# Coverage cap and rate applied to the declared item value
INSURANCE_PLANS: dict[str, dict[str, float]] = {
    "basic": {"coverage": 1000, "rate": 0.01},
    "premium": {"coverage": 5000, "rate": 0.02},
}


def _round_half_up(amount: float) -> int:
    return int(math.floor(amount + 0.5))


def total_weight(items: Iterable[ItemDetails]) -> float:
    return sum(item.weight * item.quantity for item in items)


def total_value(items: Iterable[ItemDetails]) -> float:
    return sum(item.value * item.quantity for item in items)


def delivery_fee(total_weight_kg: float) -> int:
    """
    Tiered delivery fee for a shipment weight in kg.

        <= 5 kg  : 1000 + 200/kg
        <= 20 kg : 1000 + 1000 + 150/kg above 5
        >  20 kg : 1000 + 3250 + 100/kg above 20

    Rounded to the nearest whole currency unit.
    """
    if total_weight_kg < 0:
        raise ValueError("weight cannot be negative")

    fee = BASE_FEE
    if total_weight_kg <= LIGHT_LIMIT_KG:
        fee += total_weight_kg * LIGHT_RATE
    elif total_weight_kg <= MEDIUM_LIMIT_KG:
        fee += MEDIUM_FLAT + (total_weight_kg - LIGHT_LIMIT_KG) * MEDIUM_RATE
    else:
        fee += HEAVY_FLAT + (total_weight_kg - MEDIUM_LIMIT_KG) * HEAVY_RATE
    return _round_half_up(fee)


def total(items: Iterable[ItemDetails]) -> float:
    items = list(items)
    return total_value(items) + delivery_fee(total_weight(items))


def insurance_premium(item_value: float, plan: InsurancePlan | None) -> int:
    """
    Premium for the optional insurance: rate * min(value, coverage).
    """
    if plan is None:
        return 0
    option = INSURANCE_PLANS[plan]
    return _round_half_up(min(item_value, option["coverage"]) * option["rate"])


def compute_pricing(
    items: Iterable[ItemDetails],
    insurance: InsurancePlan | None = None,
) -> Pricing:
    """
    Derive the full pricing block of a draft from its items.

    A draft without items has nothing to deliver and prices to zero.
    """
    items = list(items)
    if not items:
        return Pricing()
    item_value = total_value(items)
    fee = delivery_fee(total_weight(items))
    premium = insurance_premium(item_value, insurance)
    return Pricing(
        item_value=item_value,
        delivery_fee=fee,
        insurance_premium=premium,
        total=item_value + fee + premium,
    )
