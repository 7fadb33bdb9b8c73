"""
Tests for claim data normalization and complexity inference.
"""

import math

import pytest

from conftest import assert_valid_estimate
from roof_materials.exceptions import InvalidMeasurement
from roof_materials.models import Complexity, ShingleType
from roof_materials.normalizer import (
    PartialClaimData, estimate_from_claim_data, infer_complexity, normalize_claim_data
)

pytestmark = pytest.mark.unit


def test_empty_claim_uses_defaults():
    estimate = estimate_from_claim_data({})

    assert estimate.measurements.total_area == 2000
    assert estimate.measurements.pitch == "6/12"
    assert estimate.shingle_spec.type == ShingleType.ARCHITECTURAL
    assert len(estimate.materials) > 5
    assert_valid_estimate(estimate)


def test_no_argument_is_empty_claim():
    estimate = estimate_from_claim_data()
    assert estimate.measurements.total_area == 2000


def test_hips_and_valleys_infer_high():
    estimate = estimate_from_claim_data({'hip_length': 20, 'valley_length': 15})
    assert estimate.measurements.complexity == Complexity.HIGH
    assert estimate.waste_factor == 1.20


def test_area_only_infers_low():
    estimate = estimate_from_claim_data({'total_area': 1500})
    assert estimate.measurements.complexity == Complexity.LOW
    assert estimate.waste_factor == 1.10


def test_hips_only_infers_medium():
    measurements, _ = normalize_claim_data({'hip_length': 30})
    assert measurements.complexity == Complexity.MEDIUM


def test_short_valleys_only_infer_medium():
    measurements, _ = normalize_claim_data({'valley_length': 10})
    assert measurements.complexity == Complexity.MEDIUM


def test_valleys_longer_than_ridge_infer_very_high():
    # default ridge for 2000 sq ft is about 35.8 ft
    measurements, _ = normalize_claim_data({'valley_length': 50})
    assert measurements.complexity == Complexity.VERY_HIGH


def test_explicit_complexity_wins():
    measurements, _ = normalize_claim_data({'complexity': 'very_high'})
    assert measurements.complexity == Complexity.VERY_HIGH


@pytest.mark.parametrize("hip,valley,ridge,expected", [
    (0, 0, 40, Complexity.LOW),
    (20, 15, 40, Complexity.HIGH),
    (20, 0, 40, Complexity.MEDIUM),
    (0, 20, 40, Complexity.MEDIUM),
    (0, 50, 40, Complexity.VERY_HIGH),
])
def test_infer_complexity(hip, valley, ridge, expected):
    assert infer_complexity(hip, valley, ridge) == expected


def test_derived_linear_defaults():
    measurements, _ = normalize_claim_data({'total_area': 1600})

    assert math.isclose(measurements.ridge_length, 32.0)
    assert math.isclose(measurements.eave_length, 80.0)
    assert math.isclose(measurements.rake_length, 48.0)
    assert measurements.hip_length == 0
    assert measurements.valley_length == 0


def test_supplied_values_kept():
    measurements, spec = normalize_claim_data({
        'total_area': 2400,
        'pitch': '8/12',
        'ridge_length': 50,
        'eave_length': 0,
        'shingle_type': 'premium',
        'shingle_color': 'Weathered Wood'
    })
    assert measurements.total_area == 2400
    assert measurements.pitch == "8/12"
    assert measurements.ridge_length == 50
    assert measurements.eave_length == 0
    assert spec.type == ShingleType.PREMIUM
    assert spec.color == "Weathered Wood"
    assert spec.manufacturer == "GAF"


def test_accepts_model_instance():
    estimate = estimate_from_claim_data(PartialClaimData(total_area=1800, pitch="4/12"))
    assert estimate.measurements.total_area == 1800
    assert estimate.measurements.pitch == "4/12"


def test_unknown_fields_ignored():
    measurements, _ = normalize_claim_data({'total_area': 1500, 'claim_number': 'CLM-1'})
    assert measurements.total_area == 1500


def test_camel_case_claim_keys():
    estimate = estimate_from_claim_data({'hipLength': 20, 'valleyLength': 15})

    assert estimate.measurements.hip_length == 20
    assert estimate.measurements.valley_length == 15
    assert estimate.measurements.complexity == Complexity.HIGH
    assert estimate.waste_factor == 1.20


def test_camel_case_shingle_keys():
    measurements, spec = normalize_claim_data({
        'totalArea': 2400,
        'ridgeLength': 50,
        'shingleType': 'premium',
        'shingleColor': 'Weathered Wood',
    })

    assert measurements.total_area == 2400
    assert measurements.ridge_length == 50
    assert spec.type == ShingleType.PREMIUM
    assert spec.color == "Weathered Wood"


def test_camel_case_error_reports_field_name():
    with pytest.raises(InvalidMeasurement) as exc:
        normalize_claim_data({'hipLength': -1})
    assert exc.value.field == 'hip_length'


@pytest.mark.parametrize("claim,field", [
    ({'total_area': 0}, 'total_area'),
    ({'total_area': -5}, 'total_area'),
    ({'hip_length': -1}, 'hip_length'),
    ({'complexity': 'EXTREME'}, 'complexity'),
    ({'shingle_type': 'CEDAR'}, 'shingle_type'),
])
def test_invalid_claim_data_rejected(claim, field):
    with pytest.raises(InvalidMeasurement) as exc:
        normalize_claim_data(claim)
    assert exc.value.field == field


def test_invalid_pitch_rejected():
    with pytest.raises(InvalidMeasurement):
        estimate_from_claim_data({'pitch': 'steep'})
