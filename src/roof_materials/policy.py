"""
Pitch, waste, coverage and pricing tables used by the material estimator
"""

import math
import re
from dataclasses import dataclass
from typing import Dict, Union

from .exceptions import InvalidMeasurement
from .models import Complexity, ShingleType


# Rise range accepted for "rise/12" pitch notation
MIN_RISE = 0
MAX_RISE = 24
PITCH_RUN = 12

PITCH_MULTIPLIERS: Dict[int, float] = {
    rise: math.sqrt(1 + (rise / PITCH_RUN) ** 2)
    for rise in range(MIN_RISE, MAX_RISE + 1)
}

WASTE_FACTORS: Dict[Complexity, float] = {
    Complexity.LOW: 1.10,        # simple gable
    Complexity.MEDIUM: 1.15,     # hip roof or moderate complexity
    Complexity.HIGH: 1.20,       # many valleys/dormers
    Complexity.VERY_HIGH: 1.25,  # turrets, multiple levels
}

SQ_FT_PER_SQUARE = 100

# Coverage rates
SHINGLE_COVERAGE: Dict[ShingleType, float] = {
    ShingleType.THREE_TAB: 33.3,      # sq ft per bundle
    ShingleType.ARCHITECTURAL: 33.3,
    ShingleType.PREMIUM: 25.0,
}
UNDERLAYMENT_ROLL_SQ_FT = 1000     # synthetic
ICE_WATER_ROLL_SQ_FT = 75
ICE_WATER_EAVE_WIDTH_FT = 3        # laid from the eave up
STARTER_BUNDLE_LIN_FT = 105
RIDGE_CAP_BUNDLE_LIN_FT = 31.5
DRIP_EDGE_PIECE_LIN_FT = 10
VALLEY_PIECE_LIN_FT = 10
NAILS_PER_SQUARE = 320
NAILS_PER_BOX = 7200               # 30 lb box
PIPE_BOOTS_STANDARD = 3
PIPE_BOOTS_LARGE_ROOF = 4
LARGE_ROOF_SQ_FT = 2000

SHINGLE_UNIT_PRICES: Dict[ShingleType, float] = {
    ShingleType.THREE_TAB: 28.0,
    ShingleType.ARCHITECTURAL: 35.0,
    ShingleType.PREMIUM: 45.0,
}

# Material categories
SHINGLES = "Shingles"
UNDERLAYMENT = "Underlayment"
ICE_WATER_SHIELD = "Ice & Water Shield"
STARTER_STRIP = "Starter Strip"
RIDGE_CAP = "Ridge Cap"
DRIP_EDGE = "Drip Edge"
VALLEY_FLASHING = "Valley Flashing"
FASTENERS = "Fasteners"
PIPE_BOOTS = "Pipe Boots"

MANDATORY_CATEGORIES = (
    SHINGLES,
    UNDERLAYMENT,
    ICE_WATER_SHIELD,
    STARTER_STRIP,
    RIDGE_CAP,
    DRIP_EDGE,
    FASTENERS,
    PIPE_BOOTS,
)


@dataclass(frozen=True)
class CategoryPricing:
    """Default product and price for a material category"""
    category: str
    product_name: str
    unit: str
    unit_price: float
    coverage: str = None


CATEGORY_PRICING: Dict[str, CategoryPricing] = {
    UNDERLAYMENT: CategoryPricing(
        category=UNDERLAYMENT,
        product_name="GAF FeltBuster Synthetic Underlayment",
        unit="roll",
        unit_price=120.0,
        coverage=f"{UNDERLAYMENT_ROLL_SQ_FT} sq ft/roll"
    ),
    ICE_WATER_SHIELD: CategoryPricing(
        category=ICE_WATER_SHIELD,
        product_name="GAF WeatherWatch Ice & Water Shield",
        unit="roll",
        unit_price=95.0,
        coverage=f"{ICE_WATER_ROLL_SQ_FT} sq ft/roll"
    ),
    STARTER_STRIP: CategoryPricing(
        category=STARTER_STRIP,
        product_name="GAF Pro-Start Starter Strip Shingles",
        unit="bundle",
        unit_price=42.0,
        coverage=f"{STARTER_BUNDLE_LIN_FT} lin ft/bundle"
    ),
    RIDGE_CAP: CategoryPricing(
        category=RIDGE_CAP,
        product_name="GAF TimberTex Ridge Cap",
        unit="bundle",
        unit_price=62.0,
        coverage=f"{RIDGE_CAP_BUNDLE_LIN_FT} lin ft/bundle"
    ),
    DRIP_EDGE: CategoryPricing(
        category=DRIP_EDGE,
        product_name='Aluminum Drip Edge (2"x3") - White',
        unit="piece",
        unit_price=6.50,
        coverage=f"{DRIP_EDGE_PIECE_LIN_FT} lin ft/piece"
    ),
    VALLEY_FLASHING: CategoryPricing(
        category=VALLEY_FLASHING,
        product_name="W-Type Valley Metal (20\"x10') - Galvanized",
        unit="piece",
        unit_price=28.0,
        coverage=f"{VALLEY_PIECE_LIN_FT} lin ft/piece"
    ),
    FASTENERS: CategoryPricing(
        category=FASTENERS,
        product_name='1-1/4" Galvanized Roofing Nails (30lb box)',
        unit="box",
        unit_price=65.0,
        coverage=f"~{NAILS_PER_SQUARE} nails/square"
    ),
    PIPE_BOOTS: CategoryPricing(
        category=PIPE_BOOTS,
        product_name='Oatey All-Flash No-Calk Roof Flashing (1.5"-3")',
        unit="each",
        unit_price=18.0
    ),
}

_PITCH_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)\s*$")


def parse_pitch(pitch: str) -> int:
    """
    Parse "rise/12" notation into the integer rise

    Raises:
        InvalidMeasurement: malformed notation, run other than 12, or rise
            outside the table
    """
    if not isinstance(pitch, str):
        raise InvalidMeasurement(f"Pitch must be a 'rise/12' string, got {pitch!r}", field="pitch")

    match = _PITCH_PATTERN.match(pitch)
    if not match:
        raise InvalidMeasurement(f"Unrecognized pitch notation {pitch!r}", field="pitch")

    rise, run = float(match.group(1)), float(match.group(2))
    if run != PITCH_RUN:
        raise InvalidMeasurement(f"Pitch run must be {PITCH_RUN}, got {pitch!r}", field="pitch")
    if not rise.is_integer() or int(rise) not in PITCH_MULTIPLIERS:
        raise InvalidMeasurement(
            f"Pitch rise must be a whole number from {MIN_RISE} to {MAX_RISE}, got {pitch!r}",
            field="pitch"
        )
    return int(rise)


def pitch_multiplier(pitch: str) -> float:
    """Slope-length multiplier for a "rise/12" pitch"""
    return PITCH_MULTIPLIERS[parse_pitch(pitch)]


def parse_complexity(value: Union[Complexity, str]) -> Complexity:
    if isinstance(value, Complexity):
        return value
    try:
        return Complexity(str(value).strip().upper())
    except ValueError:
        raise InvalidMeasurement(f"Unrecognized complexity tier {value!r}", field="complexity") from None


def waste_factor(complexity: Union[Complexity, str]) -> float:
    return WASTE_FACTORS[parse_complexity(complexity)]


def parse_shingle_type(value: Union[ShingleType, str]) -> ShingleType:
    if isinstance(value, ShingleType):
        return value
    try:
        return ShingleType(str(value).strip().upper())
    except ValueError:
        raise InvalidMeasurement(f"Unrecognized shingle type {value!r}", field="shingle_type") from None
