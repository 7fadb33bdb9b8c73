"""
Tests for catalog SKU resolution.
"""

import pytest

from roof_materials import policy
from roof_materials.catalog import CatalogProduct, CatalogResolver
from roof_materials.models import MaterialLine, PricedMaterialLine

pytestmark = pytest.mark.unit


def test_every_line_gets_a_sku(priced_estimate):
    assert all(isinstance(line, PricedMaterialLine) for line in priced_estimate.materials)
    assert priced_estimate.line_for(policy.SHINGLES).sku == "GAF-THDZ-CHR"
    assert priced_estimate.line_for(policy.FASTENERS).sku == "NAIL-125-30"
    assert priced_estimate.line_for(policy.ICE_WATER_SHIELD).sku == "GAF-WW-IWS"


def test_catalog_price_and_name_applied(priced_estimate, standard_estimate):
    shingles = priced_estimate.line_for(policy.SHINGLES)
    assert shingles.unit_price == 38.50
    assert shingles.product_name == "GAF Timberline HDZ Charcoal"
    assert shingles.quantity == standard_estimate.line_for(policy.SHINGLES).quantity
    assert priced_estimate.total_cost == sum(line.total_price for line in priced_estimate.materials)


def test_original_estimate_untouched(priced_estimate, standard_estimate):
    assert priced_estimate.id == standard_estimate.id
    assert all(line.sku is None for line in standard_estimate.materials)
    assert priced_estimate is not standard_estimate


def test_unmatched_category_left_unpriced(catalog_products, standard_estimate):
    resolver = CatalogResolver(p for p in catalog_products if p.category != "Pipe Boots")
    priced = resolver.attach_skus(standard_estimate)

    boots = priced.line_for(policy.PIPE_BOOTS)
    assert boots.sku is None
    assert not isinstance(boots, PricedMaterialLine)
    assert boots == standard_estimate.line_for(policy.PIPE_BOOTS)


def test_product_name_does_not_decide_category(standard_estimate):
    resolver = CatalogResolver([
        CatalogProduct("GAF-PS-STR", "GAF Pro-Start Starter Strip Shingles", "Starter Strip", 40.00, "bundle"),
    ])
    priced = resolver.attach_skus(standard_estimate)

    assert priced.line_for(policy.SHINGLES).sku is None
    assert priced.line_for(policy.STARTER_STRIP).sku == "GAF-PS-STR"


def test_search_ranks_by_word_overlap(catalog):
    results = catalog.search("GAF Timberline HDZ")
    assert results[0].sku == "GAF-THDZ-CHR"
    assert len(results) <= 5


def test_priced_line_requires_sku():
    line = MaterialLine("Shingles", "GAF Timberline HDZ", 10, "bundle", 35.0)
    with pytest.raises(ValueError):
        line.priced("")


def test_priced_line_keeps_estimate_price_by_default():
    line = MaterialLine("Shingles", "GAF Timberline HDZ", 10, "bundle", 35.0)
    priced = line.priced("SKU-1")
    assert priced.sku == "SKU-1"
    assert priced.unit_price == 35.0
    assert priced.total_price == 350.0
