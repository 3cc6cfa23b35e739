"""
CO2 equivalence conversions.

Converts a CO2 amount (in grams) into everyday equivalents: kilometers
driven, tree-years of absorption, phone charges, cups of coffee and
LED bulb hours.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List

from .factors import (
    G_CO2_PER_CAR_KM,
    G_CO2_PER_COFFEE_CUP,
    G_CO2_PER_LED_HOUR,
    G_CO2_PER_PHONE_CHARGE,
    G_CO2_PER_TREE_YEAR,
    require_quantity,
)


@dataclass(frozen=True)
class Equivalents:
    """CO2 expressed as five everyday quantities, rounded to 2 decimals."""
    car_kilometers: float
    trees_equivalent: float
    phone_charges: float
    coffee_cups: float
    led_hours: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class CO2Equivalence:
    """A single CO2 equivalence metric, ready for display."""
    icon: str
    label: str
    value: float
    unit: str
    description: str


def convert_co2_to_equivalents(grams: float) -> Equivalents:
    """
    Convert a CO2 mass into everyday equivalents.

    Args:
        grams: CO2 mass in grams.

    Returns:
        Equivalents with each figure rounded to 2 decimals.
    """
    grams = require_quantity("grams", grams)
    return Equivalents(
        car_kilometers=round(grams / G_CO2_PER_CAR_KM, 2),
        trees_equivalent=round(grams / G_CO2_PER_TREE_YEAR, 2),
        phone_charges=round(grams / G_CO2_PER_PHONE_CHARGE, 2),
        coffee_cups=round(grams / G_CO2_PER_COFFEE_CUP, 2),
        led_hours=round(grams / G_CO2_PER_LED_HOUR, 2),
    )


def compute_equivalences(grams: float) -> List[CO2Equivalence]:
    """
    Convert CO2 (in grams) into labelled equivalence metrics.

    Returns an empty list when there is nothing to compare.
    """
    eq = convert_co2_to_equivalents(grams)
    if grams == 0:
        return []

    return [
        CO2Equivalence(
            icon="🚗",
            label="Kilometers driven",
            value=eq.car_kilometers,
            unit="km",
            description="by an average passenger car",
        ),
        CO2Equivalence(
            icon="🌳",
            label="Trees",
            value=eq.trees_equivalent,
            unit="tree-years",
            description="of CO₂ absorption by one tree",
        ),
        CO2Equivalence(
            icon="📱",
            label="Smartphone charges",
            value=eq.phone_charges,
            unit="charges",
            description="fully charging a smartphone",
        ),
        CO2Equivalence(
            icon="☕",
            label="Cups of coffee",
            value=eq.coffee_cups,
            unit="cups",
            description="brewed and served",
        ),
        CO2Equivalence(
            icon="💡",
            label="LED bulb hours",
            value=eq.led_hours,
            unit="hours",
            description="running an LED bulb",
        ),
    ]


def format_co2(grams: float) -> str:
    """Format CO2 in appropriate units (mg, g, kg, or tonnes).

    The unit is picked after rounding, so 999.96 g shows as 1.00 kg.
    """
    milligrams = round(grams * 1000, 1)
    if milligrams < 1000:
        return f"{milligrams:.1f} mg"
    if round(grams, 1) < 1000:
        return f"{grams:.1f} g"
    if round(grams / 1000, 2) < 1000:
        return f"{grams / 1000:.2f} kg"
    return f"{grams / 1_000_000:.2f} tonnes"
