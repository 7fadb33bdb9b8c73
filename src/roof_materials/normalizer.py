"""
Normalization of partial claim roof data into complete measurements.

Claims frequently carry only some of the measurements (often just the area).
Missing values are filled with industry-typical defaults and ratios, and a
complexity tier is inferred from the hip/valley geometry before the data is
handed to the material estimator.
"""

import math
import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from . import policy
from .estimation import calculate_materials
from .exceptions import InvalidMeasurement
from .models import Complexity, MaterialEstimate, RoofMeasurements, ShingleSpec, ShingleType

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_AREA = 2000.0
DEFAULT_PITCH = "6/12"
DEFAULT_SHINGLE_TYPE = ShingleType.ARCHITECTURAL
DEFAULT_MANUFACTURER = "GAF"
DEFAULT_PRODUCT_LINE = "Timberline HDZ"
DEFAULT_COLOR = "Charcoal"

# Typical ratios against sqrt(area) for a roughly square footprint
PERIMETER_RATIO = 4.0
RIDGE_RATIO = 0.8
EAVE_SHARE_OF_PERIMETER = 0.5
RAKE_SHARE_OF_PERIMETER = 0.3


class PartialClaimData(BaseModel):
    """
    Roof data as captured on a claim; every field may be missing.

    Keys are accepted in snake_case or camelCase (totalArea, hipLength, ...).
    """
    model_config = ConfigDict(extra='ignore', frozen=True, alias_generator=to_camel, populate_by_name=True)

    total_area: Optional[float] = None
    pitch: Optional[str] = None
    ridge_length: Optional[float] = None
    hip_length: Optional[float] = None
    valley_length: Optional[float] = None
    eave_length: Optional[float] = None
    rake_length: Optional[float] = None
    complexity: Optional[Complexity] = None
    shingle_type: Optional[ShingleType] = None
    shingle_color: Optional[str] = None
    manufacturer: Optional[str] = None
    product_line: Optional[str] = None

    @field_validator('ridge_length', 'hip_length', 'valley_length', 'eave_length', 'rake_length')
    @classmethod
    def length_not_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError('must be zero or positive')
        return v

    @field_validator('total_area')
    @classmethod
    def area_positive(cls, v):
        if v is not None and v <= 0:
            raise ValueError('must be positive')
        return v

    @field_validator('complexity', 'shingle_type', mode='before')
    @classmethod
    def upper_case_enum(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


def infer_complexity(hip_length: float, valley_length: float, ridge_length: float) -> Complexity:
    """
    Classify roof complexity from its hip/valley geometry

    - hips and valleys both present: HIGH
    - neither present: LOW
    - only one present: VERY_HIGH when valleys outrun the ridge, else MEDIUM
    """
    has_hips = hip_length > 0
    has_valleys = valley_length > 0

    if has_hips and has_valleys:
        return Complexity.HIGH
    if not has_hips and not has_valleys:
        return Complexity.LOW
    if valley_length > ridge_length:
        return Complexity.VERY_HIGH
    return Complexity.MEDIUM


def _coerce(partial: Union[PartialClaimData, Mapping[str, Any], None]) -> PartialClaimData:
    if isinstance(partial, PartialClaimData):
        return partial
    try:
        return PartialClaimData.model_validate(dict(partial or {}))
    except ValidationError as e:
        error = e.errors()[0]
        names = {info.alias: name for name, info in PartialClaimData.model_fields.items() if info.alias}
        field = ".".join(names.get(part, str(part)) for part in error.get('loc', ())) or None
        raise InvalidMeasurement(f"Invalid claim data: {error.get('msg')}", field=field) from e


def normalize_claim_data(
    partial: Union[PartialClaimData, Mapping[str, Any], None]
) -> Tuple[RoofMeasurements, ShingleSpec]:
    """Fill defaults and infer complexity, producing complete estimator inputs"""
    data = _coerce(partial)

    total_area = data.total_area if data.total_area is not None else DEFAULT_TOTAL_AREA
    pitch = data.pitch if data.pitch is not None else DEFAULT_PITCH
    policy.parse_pitch(pitch)

    side = math.sqrt(total_area)
    perimeter = side * PERIMETER_RATIO

    lengths: Dict[str, float] = {
        'ridge_length': _or_default(data.ridge_length, side * RIDGE_RATIO),
        'hip_length': _or_default(data.hip_length, 0.0),
        'valley_length': _or_default(data.valley_length, 0.0),
        'eave_length': _or_default(data.eave_length, perimeter * EAVE_SHARE_OF_PERIMETER),
        'rake_length': _or_default(data.rake_length, perimeter * RAKE_SHARE_OF_PERIMETER),
    }

    complexity = data.complexity
    if complexity is None:
        complexity = infer_complexity(
            lengths['hip_length'], lengths['valley_length'], lengths['ridge_length']
        )
        logger.debug(f"Inferred {complexity.value} complexity from hip/valley geometry")

    measurements = RoofMeasurements(
        total_area=total_area,
        pitch=pitch,
        complexity=complexity,
        **lengths
    )
    shingle_spec = ShingleSpec(
        type=data.shingle_type or DEFAULT_SHINGLE_TYPE,
        manufacturer=data.manufacturer or DEFAULT_MANUFACTURER,
        color=data.shingle_color or DEFAULT_COLOR,
        product_line=data.product_line or DEFAULT_PRODUCT_LINE
    )
    return measurements, shingle_spec


def _or_default(value: Optional[float], default: float) -> float:
    return float(value) if value is not None else default


def estimate_from_claim_data(
    partial: Union[PartialClaimData, Mapping[str, Any], None] = None
) -> MaterialEstimate:
    """Create a material estimate from (possibly incomplete) claim roof data"""
    measurements, shingle_spec = normalize_claim_data(partial)
    return calculate_materials(measurements, shingle_spec)
