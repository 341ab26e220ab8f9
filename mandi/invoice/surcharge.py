"""
Invoice surcharge ("hamali") calculation.

Pure functions only; the invoice service decides what gets persisted.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

PERCENT_OF_SUBTOTAL = "percent-of-subtotal"
PER_KG = "per-kg"
PER_BAG = "per-bag"


@dataclass(frozen=True)
class SurchargeResult:
    include: bool
    mode: Optional[str]
    rate: Optional[float]
    basis: Optional[float]      # kg weight or bag count, None for percent
    amount: float


NO_SURCHARGE = SurchargeResult(include=False, mode=None, rate=None, basis=None, amount=0.0)


def percent_of_subtotal(subtotal: float, rate: float) -> float:
    return subtotal * rate / 100


def per_kg(rate: float, total_kg_weight: float) -> float:
    return rate * total_kg_weight


def per_bag(rate: float, total_bags: float) -> float:
    return rate * total_bags


def calculate_subtotal(items: Iterable) -> float:
    return sum(item.quantity * item.unit_price for item in items)


def compute_surcharge(config, subtotal: float, items) -> SurchargeResult:
    """Resolve a surcharge config against an invoice's subtotal and items."""
    if config is None:
        return NO_SURCHARGE

    if config.mode == PERCENT_OF_SUBTOTAL:
        return SurchargeResult(
            include=True,
            mode=config.mode,
            rate=config.rate,
            basis=None,
            amount=percent_of_subtotal(subtotal, config.rate),
        )

    if config.mode == PER_KG:
        weight = config.total_kg_weight
        if weight is None:
            weight = sum(item.quantity for item in items)
        if not weight:
            return NO_SURCHARGE
        return SurchargeResult(
            include=True,
            mode=config.mode,
            rate=config.rate,
            basis=weight,
            amount=per_kg(config.rate, weight),
        )

    if config.mode == PER_BAG:
        bags = config.total_bags
        if bags is None:
            bags = sum(item.bags or 0 for item in items)
        # Nothing to charge on: the invoice goes out without a surcharge
        if not bags:
            return NO_SURCHARGE
        return SurchargeResult(
            include=True,
            mode=config.mode,
            rate=config.rate,
            basis=bags,
            amount=per_bag(config.rate, bags),
        )

    raise ValueError(f"Unknown surcharge mode: {config.mode}")
