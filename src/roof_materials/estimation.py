"""
Material quantity estimation
"""

import math
import uuid
import logging
from typing import Dict, List, Optional, Any
from datetime import datetime, timezone

from . import policy
from .exceptions import InvalidMeasurement
from .models import (
    MaterialEstimate, MaterialLine, RoofMeasurements, ShingleSpec,
    Complexity
)

LENGTH_FIELDS = ('ridge_length', 'hip_length', 'valley_length', 'eave_length', 'rake_length')


def _is_number(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


class MaterialEstimator:
    """Turns roof measurements and a shingle selection into a bill of materials"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize material estimator

        Args:
            config: Optional overrides; 'category_pricing' replaces entries
                of the default category price table
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)

        self.category_pricing = dict(policy.CATEGORY_PRICING)
        self.category_pricing.update(self.config.get('category_pricing', {}))
        self.shingle_prices = dict(policy.SHINGLE_UNIT_PRICES)
        self.shingle_prices.update(self.config.get('shingle_prices', {}))

    def calculate_materials(
        self,
        measurements: RoofMeasurements,
        shingle_spec: ShingleSpec
    ) -> MaterialEstimate:
        """
        Calculate every material line needed for the roof

        Args:
            measurements: Fully populated roof measurements
            shingle_spec: Shingle selection

        Returns:
            MaterialEstimate: New estimate with a fresh id

        Raises:
            InvalidMeasurement: non-positive area, negative length, unknown
                pitch, complexity or shingle type
        """
        self._validate(measurements)

        complexity = policy.parse_complexity(measurements.complexity)
        shingle_type = policy.parse_shingle_type(shingle_spec.type)
        waste = policy.WASTE_FACTORS[complexity]
        pitch = policy.pitch_multiplier(measurements.pitch)

        adjusted_area = measurements.total_area * pitch * waste
        squares = adjusted_area / policy.SQ_FT_PER_SQUARE

        materials: List[MaterialLine] = [
            self._shingles(adjusted_area, shingle_spec, shingle_type),
            self._underlayment(adjusted_area),
            self._ice_and_water(measurements, pitch, waste),
            self._starter_strip(measurements, waste),
            self._ridge_cap(measurements, waste, shingle_spec),
            self._drip_edge(measurements, waste),
        ]
        if measurements.valley_length > 0:
            materials.append(self._valley_flashing(measurements, waste))
        materials.append(self._fasteners(squares))
        materials.append(self._pipe_boots(measurements))

        estimate = MaterialEstimate(
            id=str(uuid.uuid4()),
            measurements=measurements,
            shingle_spec=shingle_spec,
            materials=tuple(materials),
            waste_factor=waste,
            created_at=datetime.now(timezone.utc),
            notes=tuple(self._generate_notes(measurements, complexity, waste, pitch, adjusted_area, squares))
        )

        self.logger.info(
            f"Material estimate {estimate.id}: {len(materials)} lines, "
            f"{squares:.1f} squares, total ${estimate.total_cost:,.2f}"
        )
        return estimate

    def _validate(self, measurements: RoofMeasurements):
        area = measurements.total_area
        if not _is_number(area) or area <= 0:
            raise InvalidMeasurement(f"Total area must be positive, got {area!r}", field="total_area")

        for name in LENGTH_FIELDS:
            value = getattr(measurements, name)
            if not _is_number(value) or value < 0:
                raise InvalidMeasurement(f"Length must be zero or positive, got {value!r}", field=name)

    def _line(self, category: str, quantity: int, product_name: str = None) -> MaterialLine:
        pricing = self.category_pricing[category]
        return MaterialLine(
            category=category,
            product_name=product_name or pricing.product_name,
            quantity=quantity,
            unit=pricing.unit,
            unit_price=pricing.unit_price,
            coverage=pricing.coverage
        )

    def _shingles(self, adjusted_area: float, spec: ShingleSpec, shingle_type) -> MaterialLine:
        coverage = policy.SHINGLE_COVERAGE[shingle_type]
        manufacturer = spec.manufacturer or "GAF"
        product_line = spec.product_line or "Timberline HDZ"
        color = spec.color or "Charcoal"

        return MaterialLine(
            category=policy.SHINGLES,
            product_name=f"{manufacturer} {product_line} - {color}",
            quantity=math.ceil(adjusted_area / coverage),
            unit="bundle",
            unit_price=self.shingle_prices[shingle_type],
            coverage=f"{coverage} sq ft/bundle"
        )

    def _underlayment(self, adjusted_area: float) -> MaterialLine:
        rolls = math.ceil(adjusted_area / policy.UNDERLAYMENT_ROLL_SQ_FT)
        return self._line(policy.UNDERLAYMENT, rolls)

    def _ice_and_water(self, m: RoofMeasurements, pitch: float, waste: float) -> MaterialLine:
        # Strip runs up the slope from every eave
        area = m.eave_length * policy.ICE_WATER_EAVE_WIDTH_FT * pitch * waste
        return self._line(policy.ICE_WATER_SHIELD, math.ceil(area / policy.ICE_WATER_ROLL_SQ_FT))

    def _starter_strip(self, m: RoofMeasurements, waste: float) -> MaterialLine:
        length = (m.eave_length + m.rake_length) * waste
        return self._line(policy.STARTER_STRIP, math.ceil(length / policy.STARTER_BUNDLE_LIN_FT))

    def _ridge_cap(self, m: RoofMeasurements, waste: float, spec: ShingleSpec) -> MaterialLine:
        length = (m.ridge_length + m.hip_length) * waste
        base = self.category_pricing[policy.RIDGE_CAP].product_name
        return self._line(
            policy.RIDGE_CAP,
            math.ceil(length / policy.RIDGE_CAP_BUNDLE_LIN_FT),
            product_name=f"{base} - {spec.color or 'Charcoal'}"
        )

    def _drip_edge(self, m: RoofMeasurements, waste: float) -> MaterialLine:
        length = (m.eave_length + m.rake_length) * waste
        return self._line(policy.DRIP_EDGE, math.ceil(length / policy.DRIP_EDGE_PIECE_LIN_FT))

    def _valley_flashing(self, m: RoofMeasurements, waste: float) -> MaterialLine:
        pieces = math.ceil(m.valley_length * waste / policy.VALLEY_PIECE_LIN_FT)
        return self._line(policy.VALLEY_FLASHING, pieces)

    def _fasteners(self, squares: float) -> MaterialLine:
        nails = math.ceil(squares * policy.NAILS_PER_SQUARE)
        return self._line(policy.FASTENERS, math.ceil(nails / policy.NAILS_PER_BOX))

    def _pipe_boots(self, m: RoofMeasurements) -> MaterialLine:
        count = policy.PIPE_BOOTS_LARGE_ROOF if m.total_area > policy.LARGE_ROOF_SQ_FT else policy.PIPE_BOOTS_STANDARD
        return self._line(policy.PIPE_BOOTS, count)

    def _generate_notes(
        self,
        m: RoofMeasurements,
        complexity: Complexity,
        waste: float,
        pitch: float,
        adjusted_area: float,
        squares: float
    ) -> List[str]:
        notes = [
            f"Waste factor: {(waste - 1) * 100:.0f}% ({complexity.value} complexity)",
            f"Pitch adjustment: {(pitch - 1) * 100:.1f}% for {m.pitch} pitch",
            f"Total adjusted area: {adjusted_area:.0f} sq ft ({squares:.1f} squares)",
        ]
        if complexity == Complexity.VERY_HIGH:
            notes.append("Complex roof - consider adding extra ridge cap and starter strip")
        return notes


_default_estimator = MaterialEstimator()


def calculate_materials(measurements: RoofMeasurements, shingle_spec: ShingleSpec) -> MaterialEstimate:
    """Estimate materials with the default price tables"""
    return _default_estimator.calculate_materials(measurements, shingle_spec)
